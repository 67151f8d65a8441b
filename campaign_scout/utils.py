from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def parse_date(value: Any) -> datetime | None:
    """Parse a provider date into an aware UTC datetime; None if missing or unparsable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = date_parser.parse(str(value))
        except (ValueError, TypeError, OverflowError, date_parser.ParserError):
            return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def is_later(candidate: Any, current: Any) -> bool:
    """True when ``candidate`` parses to a strictly later instant than ``current``."""
    candidate_dt = parse_date(candidate)
    if candidate_dt is None:
        return False
    current_dt = parse_date(current)
    return current_dt is None or candidate_dt > current_dt
