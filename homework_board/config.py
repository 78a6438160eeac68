"""
Runtime configuration for the homework board.

Values come from environment variables (optionally seeded from a ``.env``
file). Invalid values are logged and replaced by their defaults so a typo
in deployment never prevents the service from starting.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS: Tuple[str, ...] = (
    "computer_graphics",
    "bjd",
    "com_practicum",
    "it",
    "engl113",
    "engl208",
    "math",
    "oap",
    "oss",
    "ofg",
    "op1c",
)
DEFAULT_MAX_UPLOAD_BYTES = 10 << 20  # 10 MiB
DEFAULT_PORT = 8080
MAX_UPLOAD_BYTES_CAP = 1 << 30

_SLUG_RE = re.compile(r"^[a-z0-9_]+$")


@dataclass(frozen=True)
class Settings:
    subjects: Tuple[str, ...] = DEFAULT_SUBJECTS
    data_dir: Path = Path(".")
    upload_dir: Path = Path("uploads")
    static_dir: Path = Path("static")
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    upload_url_prefix: str = "/uploads/"


def parse_subjects(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated slug list, dropping invalid and repeated entries."""
    if not raw or not raw.strip():
        return DEFAULT_SUBJECTS

    subjects: List[str] = []
    for item in raw.split(","):
        slug = item.strip().lower()
        if not slug:
            continue
        if not _SLUG_RE.match(slug):
            logger.warning(f"Ignoring invalid subject slug: {item.strip()!r}")
            continue
        if slug not in subjects:
            subjects.append(slug)

    if not subjects:
        logger.warning(
            f"HOMEWORK_SUBJECTS value {raw!r} contains no valid slugs. Using defaults"
        )
        return DEFAULT_SUBJECTS
    return tuple(subjects)


def _int_from_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid {name} value: {raw}. Error: {e}. Using default: {default}")
        return default
    if value < minimum or value > maximum:
        logger.warning(
            f"{name} value {value} is outside [{minimum}, {maximum}]. Using default: {default}"
        )
        return default
    return value


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build :class:`Settings` from the process environment."""
    load_dotenv(env_file)

    settings = Settings(
        subjects=parse_subjects(os.getenv("HOMEWORK_SUBJECTS")),
        data_dir=Path(os.getenv("HOMEWORK_DATA_DIR") or "."),
        upload_dir=Path(os.getenv("HOMEWORK_UPLOAD_DIR") or "uploads"),
        static_dir=Path(os.getenv("HOMEWORK_STATIC_DIR") or "static"),
        max_upload_bytes=_int_from_env(
            "HOMEWORK_MAX_UPLOAD_BYTES",
            DEFAULT_MAX_UPLOAD_BYTES,
            minimum=1,
            maximum=MAX_UPLOAD_BYTES_CAP,
        ),
        host=os.getenv("HOMEWORK_HOST") or "0.0.0.0",
        port=_int_from_env("HOMEWORK_PORT", DEFAULT_PORT, minimum=1, maximum=65535),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
    logger.debug(f"Loaded settings: {settings}")
    return settings
