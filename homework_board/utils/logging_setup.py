from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_NAME = "homework_board"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger; safe to call repeatedly."""
    root = logging.getLogger()
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        root.warning(f"Unknown LOG_LEVEL {level!r}. Using INFO")
        resolved = logging.INFO
    root.setLevel(resolved)

    if any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
