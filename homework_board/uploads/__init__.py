"""Attachment uploads and their public retrieval endpoint."""

from .router import build_upload_router  # noqa: F401
from .store import UploadStore  # noqa: F401
