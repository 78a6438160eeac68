from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..errors import StorageError
from ..utils.dates import format_display_timestamp
from .schemas import HomeworkRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """
    One JSON document per subject under ``data_dir``.

    There is no locking: concurrent saves for the same subject are
    last-writer-wins. Saves go through a temporary file and ``os.replace``
    so a concurrent load sees either the old or the new document.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, subject: str) -> Path:
        return self.data_dir / f"{subject}.json"

    def load(self, subject: str) -> HomeworkRecord:
        path = self.path_for(subject)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return HomeworkRecord()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read homework for '{subject}' from {path}: {e}")
            raise StorageError(f"Could not read {path}") from e

        try:
            record = HomeworkRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Malformed homework document for '{subject}' at {path}: {e}")
            raise StorageError(f"Malformed record in {path}") from e

        record.updated_at = format_display_timestamp(record.updated_at)
        return record

    def save(self, subject: str, record: HomeworkRecord) -> None:
        path = self.path_for(subject)
        try:
            payload = json.dumps(record.model_dump(), indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise StorageError(f"Could not encode homework for '{subject}'") from e

        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=f".{subject}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error(f"Failed to save homework for '{subject}' to {path}: {e}")
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageError(f"Could not write {path}") from e

        logger.info(f"Saved homework for '{subject}' ({len(record.files)} attachment(s))")
