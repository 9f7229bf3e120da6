"""
Domain: Duplicate lead matching.

Contract:
- At least one match criterion must be enabled; otherwise InvalidCriteria is
  raised before any record is examined. The system never falls back to
  "match everything".
- A candidate never matches a population record with the same id.
- Registration number, chassis number and owner name compare
  case-insensitively; phone compares exactly as stored.
- Empty or missing values never match.
- One MatchResult is emitted per matching field, so a single pair may yield up
  to four results. Which leads are duplicates is the set of distinct
  candidate ids across all results.

The population is indexed once per enabled criterion so each candidate lookup
is a dictionary hit rather than a population scan. Indexing does not change
which results are produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .lead_record import LeadRecord


class InvalidCriteria(ValueError):
    """Raised when a duplicate check is requested with no match criterion selected."""

    def __init__(self, message: str = "At least one match criterion must be selected"):
        super().__init__(message)


class MatchType(str, Enum):
    REG_NR = "reg_nr"
    CHASSIS = "chassis"
    NAME = "name"
    PHONE = "phone"


@dataclass(frozen=True, slots=True)
class MatchCriteria:
    match_reg_nr: bool = False
    match_chassis: bool = False
    match_name: bool = False
    match_phone: bool = False

    def enabled(self) -> List[MatchType]:
        """Enabled match types in canonical order."""

        flags = (
            (MatchType.REG_NR, self.match_reg_nr),
            (MatchType.CHASSIS, self.match_chassis),
            (MatchType.NAME, self.match_name),
            (MatchType.PHONE, self.match_phone),
        )
        return [match_type for match_type, on in flags if on]

    def validate(self) -> None:
        if not self.enabled():
            raise InvalidCriteria()


@dataclass(frozen=True, slots=True)
class MatchResult:
    lead_id: str
    matched_against_id: str
    match_type: MatchType


def _case_insensitive(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.lower()


def _as_stored(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


# Match type -> function producing the comparison key for a record (None = no key).
_KEY_FUNCTIONS: Mapping[MatchType, Callable[[LeadRecord], Optional[str]]] = {
    MatchType.REG_NR: lambda record: _case_insensitive(record.reg_nr),
    MatchType.CHASSIS: lambda record: _case_insensitive(record.chassis_nr),
    MatchType.NAME: lambda record: _case_insensitive(record.owner_name),
    MatchType.PHONE: lambda record: _as_stored(record.phone),
}


def match_key(record: LeadRecord, match_type: MatchType) -> Optional[str]:
    """Comparison key of a record for one match type, or None if the field is empty."""

    return _KEY_FUNCTIONS[match_type](record)


def build_index(population: Sequence[LeadRecord], match_type: MatchType) -> Dict[str, List[str]]:
    """Map each comparison key to the ids of population records carrying it, in population order."""

    index: Dict[str, List[str]] = {}
    for record in population:
        key = match_key(record, match_type)
        if key is not None:
            index.setdefault(key, []).append(record.id)
    return index


def find_duplicates(
    candidates: Sequence[LeadRecord],
    population: Sequence[LeadRecord],
    criteria: MatchCriteria,
) -> List[MatchResult]:
    """
    Find population records that duplicate each candidate.

    Results are ordered by candidate, then by match type (reg_nr, chassis,
    name, phone), then by population order.

    Raises:
        InvalidCriteria: If no criterion is enabled.
    """

    criteria.validate()
    enabled = criteria.enabled()
    indexes = {match_type: build_index(population, match_type) for match_type in enabled}

    results: List[MatchResult] = []
    for candidate in candidates:
        for match_type in enabled:
            key = match_key(candidate, match_type)
            if key is None:
                continue
            for other_id in indexes[match_type].get(key, ()):
                if other_id == candidate.id:
                    continue
                results.append(
                    MatchResult(lead_id=candidate.id, matched_against_id=other_id, match_type=match_type)
                )
    return results


@dataclass(frozen=True, slots=True)
class DuplicateSummary:
    total_checked: int
    unique_count: int
    duplicate_count: int
    duplicate_lead_ids: Tuple[str, ...]
    match_counts: Mapping[MatchType, int] = field(default_factory=dict)


def summarize_matches(candidates: Sequence[LeadRecord], matches: Sequence[MatchResult]) -> DuplicateSummary:
    """
    Aggregate match results into counts.

    duplicate_lead_ids keeps first-seen order and holds each candidate id once,
    however many results it produced.
    """

    candidate_ids = {candidate.id for candidate in candidates}
    duplicate_ids: Dict[str, None] = {}
    match_counts: Dict[MatchType, int] = {}
    for match in matches:
        if match.lead_id not in candidate_ids:
            continue
        duplicate_ids.setdefault(match.lead_id, None)
        match_counts[match.match_type] = match_counts.get(match.match_type, 0) + 1

    total = len(candidates)
    return DuplicateSummary(
        total_checked=total,
        unique_count=total - len(duplicate_ids),
        duplicate_count=len(duplicate_ids),
        duplicate_lead_ids=tuple(duplicate_ids),
        match_counts=match_counts,
    )
