"""
Domain: Ownership duration labels.

Contract:
- Duration is the whole-day difference end - start.
- Under 30 days the label is "{days} dagar".
- Otherwise years are fixed 365-day intervals and months fixed 30-day
  intervals of the remainder:
    years = floor(days / 365)
    months = floor((days % 365) / 30)
  rendered "{years} år, {months} mån", collapsed to "{years} år" when months
  is 0 and to "{months} mån" when years is 0.

Calendar-naive by design: these are operator-facing approximations.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def ownership_days(start: Optional[date], end: Optional[date]) -> Optional[int]:
    """Whole days between start and end, or None if either is missing or end precedes start."""

    if start is None or end is None:
        return None
    days = (_as_date(end) - _as_date(start)).days
    if days < 0:
        return None
    return days


def duration_label(start: Optional[date], end: Optional[date]) -> Optional[str]:
    """
    Human-scale label for the time between start and end.

    Returns None when a date is missing or the range is negative (a data
    quality problem in the history, not something to render).
    """

    days = ownership_days(start, end)
    if days is None:
        return None
    if days < DAYS_PER_MONTH:
        return f"{days} dagar"

    years = days // DAYS_PER_YEAR
    months = (days % DAYS_PER_YEAR) // DAYS_PER_MONTH
    if years == 0:
        return f"{months} mån"
    if months == 0:
        return f"{years} år"
    return f"{years} år, {months} mån"
