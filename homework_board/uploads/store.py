from __future__ import annotations

import contextlib
import logging
import os
import time
from pathlib import Path
from typing import BinaryIO, Optional

from starlette.datastructures import UploadFile

from ..config import DEFAULT_MAX_UPLOAD_BYTES
from ..errors import InvalidFilename, PayloadTooLarge, StorageError, UploadNotFound
from ..homework.schemas import Attachment

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _check_name(name: Optional[str]) -> str:
    if not name:
        raise InvalidFilename("Filename required")
    if "/" in name or "\\" in name or "\x00" in name or name in {".", ".."}:
        raise InvalidFilename(f"Invalid filename: {name!r}")
    return name


class UploadStore:
    """Flat directory of uploaded files, named ``{epoch_seconds}_{declared_name}``."""

    def __init__(
        self,
        upload_dir: Path | str,
        *,
        url_prefix: str = "/uploads/",
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix
        self.max_bytes = max_bytes

    def ensure_dir(self) -> None:
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create upload directory {self.upload_dir}") from e

    def storage_name(self, declared_name: str) -> str:
        return f"{int(time.time())}_{declared_name}"

    def store(self, upload: UploadFile) -> Attachment:
        """
        Copy ``upload`` into the upload directory and describe it as an attachment.

        The copy is chunked and counted; once more than ``max_bytes`` have been
        read the partial file is removed and :class:`PayloadTooLarge` raised.
        The declared filename is deliberately left out of the result.
        """
        declared = _check_name(upload.filename)
        self.ensure_dir()

        filename = self.storage_name(declared)
        target = self.upload_dir / filename
        try:
            written = self._copy_limited(upload.file, target)
        except PayloadTooLarge:
            logger.info(f"Rejected upload '{declared}': larger than {self.max_bytes} bytes")
            raise
        except OSError as e:
            logger.error(f"Failed to store upload '{declared}' at {target}: {e}")
            raise StorageError(f"Could not write {target}") from e

        logger.info(f"Stored upload {filename} ({written} bytes)")
        return Attachment(type=upload.content_type or "", url=self.url_prefix + filename)

    def _copy_limited(self, source: BinaryIO, target: Path) -> int:
        if hasattr(source, "seek"):
            with contextlib.suppress(OSError, ValueError):
                source.seek(0)

        written = 0
        try:
            with target.open("wb") as buffer:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise PayloadTooLarge(self.max_bytes)
                    buffer.write(chunk)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(target)
            raise
        return written

    def resolve(self, filename: str) -> Path:
        """Map a public filename to an existing file inside the upload directory."""
        name = _check_name(filename)
        root = self.upload_dir.resolve()
        path = (root / name).resolve()
        if path.parent != root:
            raise InvalidFilename(f"Invalid filename: {filename!r}")
        if not path.is_file():
            raise UploadNotFound(filename)
        return path
