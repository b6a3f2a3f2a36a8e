"""
Date / time utility helpers.

All timestamps are parsed and serialised as ``"YYYY-MM-DD HH:mm:ss"``
(i.e. the Python format string ``"%Y-%m-%d %H:%M:%S"``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(raw: str) -> datetime:
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT)
    except (ValueError, TypeError) as exc:
        raise ValueError(
            f"Invalid timestamp {raw!r}. Expected format: YYYY-MM-DD HH:mm:ss"
        ) from exc


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def now() -> datetime:
    # second precision so a parsed-then-formatted value round-trips
    return datetime.now().replace(microsecond=0)


def parse_optional_timestamp(raw: Optional[str]) -> datetime:
    if raw is None:
        return now()
    return parse_timestamp(raw)
