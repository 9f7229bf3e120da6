"""
Domain: Vehicle ownership history.

An ownership history is the ordered list of registered owners for one vehicle,
as supplied by the vehicle registry.

Rules implemented here:
- Events are ordered most-recent-first (index 0 is the current owner).
- A history may hold 0, 1 or many events; the same name may appear twice.
- Optional fields may be absent and never cause an error.
- Only a structurally unparseable date is rejected (InvalidHistoryEntry).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from .time import parse_calendar_date

# Fragments of registry owner-type labels that denote a private individual
# ("Privatperson", "Privat").
PRIVATE_LABEL_MARKERS: Tuple[str, ...] = ("privat",)


class InvalidHistoryEntry(ValueError):
    """Raised when a history event carries a date that cannot be parsed."""

    def __init__(self, index: Optional[int], value: Any):
        self.index = index
        self.value = value
        position = f"entry {index}" if index is not None else "entry"
        super().__init__(f"Ownership history {position} has an invalid date: {value!r}")


class OwnerClass(str, Enum):
    PERSON = "person"
    COMPANY = "company"
    UNKNOWN = "unknown"

    @staticmethod
    def parse(value: Any) -> Optional["OwnerClass"]:
        """Map a registry owner_class value onto OwnerClass; unrecognized values become UNKNOWN."""

        if value is None:
            return None
        if isinstance(value, OwnerClass):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        try:
            return OwnerClass(text)
        except ValueError:
            return OwnerClass.UNKNOWN


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class OwnershipEvent:
    """
    One historical owner record for a vehicle.

    `date` is the day the ownership began. It is None when the registry
    omitted or redacted it. ISO strings and datetimes are normalized to a
    date on construction; anything unparseable raises InvalidHistoryEntry.
    """

    date: Optional[date]
    name: Optional[str] = None
    owner_type_label: Optional[str] = None
    owner_class: Optional[OwnerClass] = None
    details: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            parsed = parse_calendar_date("date", self.date)
        except ValueError:
            raise InvalidHistoryEntry(None, self.date) from None
        object.__setattr__(self, "date", parsed)

    def is_private(self) -> bool:
        """True if the registry marks this owner as a private individual."""

        if self.owner_class == OwnerClass.PERSON:
            return True
        label = (self.owner_type_label or "").lower()
        return any(marker in label for marker in PRIVATE_LABEL_MARKERS)

    @staticmethod
    def from_row(row: Mapping[str, Any], index: Optional[int] = None) -> "OwnershipEvent":
        """
        Build an event from a registry row.

        Accepted keys: date, name, owner_type (or owner_type_label),
        owner_class, details. Missing keys are treated as absent.
        """

        raw_date = row.get("date")
        try:
            parsed = parse_calendar_date("date", raw_date)
        except ValueError:
            raise InvalidHistoryEntry(index, raw_date) from None

        label = row.get("owner_type_label", row.get("owner_type"))
        return OwnershipEvent(
            date=parsed,
            name=_optional_text(row.get("name")),
            owner_type_label=_optional_text(label),
            owner_class=OwnerClass.parse(row.get("owner_class")),
            details=_optional_text(row.get("details")),
        )


@dataclass(frozen=True, slots=True)
class OwnershipHistory:
    """Ownership events for one vehicle, most recent first."""

    events: Tuple[OwnershipEvent, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[OwnershipEvent]:
        return iter(self.events)

    @property
    def head(self) -> Optional[OwnershipEvent]:
        """The current (most recent) owner, or None for an empty history."""

        return self.events[0] if self.events else None

    @staticmethod
    def from_events(events: Iterable[OwnershipEvent]) -> "OwnershipHistory":
        return OwnershipHistory(events=tuple(events))

    @staticmethod
    def from_rows(rows: Optional[Iterable[Mapping[str, Any]]]) -> "OwnershipHistory":
        """
        Parse registry rows (most-recent-first) into a history.

        Raises InvalidHistoryEntry on the first row with a malformed date.
        """

        if not rows:
            return OwnershipHistory()
        return OwnershipHistory(
            events=tuple(OwnershipEvent.from_row(row, index=i) for i, row in enumerate(rows))
        )
