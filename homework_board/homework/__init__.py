"""
Per-subject homework records.

Each subject has exactly one current record, stored as a JSON document and
replaced wholesale on every update.
"""

from .router import build_homework_router  # noqa: F401
from .store import RecordStore  # noqa: F401
