from __future__ import annotations


class HomeworkBoardError(Exception):
    """Base class for errors raised by the homework board stores."""


class StorageError(HomeworkBoardError):
    """A record or upload could not be read from or written to disk."""


class PayloadTooLarge(HomeworkBoardError):
    """An upload exceeded the configured size ceiling."""

    def __init__(self, limit: int):
        super().__init__(f"Upload exceeds {limit} bytes")
        self.limit = limit


class InvalidFilename(HomeworkBoardError):
    """A declared or requested filename is empty or escapes the upload directory."""


class UploadNotFound(HomeworkBoardError):
    """No uploaded file exists under the requested name."""
