from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import Settings, load_settings
from .homework.router import build_homework_router
from .homework.store import RecordStore
from .middleware.cors import CORSHeadersMiddleware
from .middleware.request_logging import RequestLoggingMiddleware
from .routes.system import build_system_router
from .uploads.router import build_upload_router
from .uploads.store import UploadStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application from ``settings``.

    API routes are registered before the static mount at ``/``, which acts
    as the catch-all for the front-end and answers 404 for anything else.
    """
    settings = settings or load_settings()

    record_store = RecordStore(settings.data_dir)
    upload_store = UploadStore(
        settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_bytes=settings.max_upload_bytes,
    )
    upload_store.ensure_dir()
    settings.static_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(title="Homework Board", version=__version__)
    app.state.settings = settings
    app.state.record_store = record_store
    app.state.upload_store = upload_store

    app.include_router(build_system_router(settings.subjects))
    app.include_router(build_homework_router(settings.subjects, record_store))
    app.include_router(build_upload_router(upload_store))
    app.mount(
        "/",
        StaticFiles(directory=settings.static_dir, html=True),
        name="static",
    )

    app.add_middleware(CORSHeadersMiddleware)
    # Added last so it runs first and times the whole request.
    app.add_middleware(RequestLoggingMiddleware)

    logger.info(
        f"Homework board ready: {len(settings.subjects)} subject(s), "
        f"data in {settings.data_dir}, uploads in {settings.upload_dir}"
    )
    return app
