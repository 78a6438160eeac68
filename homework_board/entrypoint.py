from __future__ import annotations

import uvicorn

from .app import create_app
from .config import load_settings
from .utils.logging_setup import configure_logging

settings = load_settings()
configure_logging(settings.log_level)

app = create_app(settings)


def main() -> None:
    # uvicorn logs bind failures and exits non-zero on its own
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
