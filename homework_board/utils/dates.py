from __future__ import annotations

import re
from datetime import datetime

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

# RFC 3339 date-time; fractional seconds are accepted but not kept.
_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.\d+)?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


def format_display_timestamp(value: str) -> str:
    """
    Convert an RFC 3339 timestamp to ``YYYY-MM-DD HH:MM``.

    The result is rendered in the timestamp's own UTC offset, so
    ``2025-09-09T14:50:00Z`` becomes ``2025-09-09 14:50``. Any value that
    does not parse is returned unchanged, which makes the function
    idempotent: the display form itself never parses.
    """
    match = _RFC3339_RE.match(value or "")
    if match is None:
        return value
    try:
        parsed = datetime.strptime(
            match.group("base") + match.group("offset"), "%Y-%m-%dT%H:%M:%S%z"
        )
    except ValueError:
        return value
    return parsed.strftime(DISPLAY_FORMAT)
