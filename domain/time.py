"""
Domain time utilities (pure).

Centralized timestamp validation and parsing for registry-supplied calendar
dates.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def parse_calendar_date(name: str, value: Any) -> Optional[date]:
    """
    Parse a registry date into a calendar date.

    Accepts:
    - None or an empty string (the registry redacts or omits dates) -> None
    - date / datetime instances
    - ISO-8601 strings, with or without a time component ("2024-03-01",
      "2024-03-01T10:00:00Z")

    Raises:
    - ValueError for anything else. Callers wrap this in their own error type.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{name} must be an ISO date string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        return None

    # Registry payloads mix plain dates and full timestamps.
    head = text.split("T", 1)[0].split(" ", 1)[0]
    try:
        return date.fromisoformat(head)
    except ValueError:
        raise ValueError(f"{name} is not a valid ISO date: {value!r}") from None
