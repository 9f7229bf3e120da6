"""
Duplicate-lead check and deletion workflow.

Handles:
- Running the duplicate matcher over an operator-selected batch of leads
- Reporting unique/duplicate counts and a per-match-type breakdown
- Deleting the found duplicates only after an explicit confirmation call
- Restoring deleted duplicates (deletion moves leads to the trash)

State machine:
    IDLE -> CHECKING -> REPORTED | FAILED
    REPORTED -> DELETING -> DELETED | REPORTED (delete failed, report kept)

There is no automatic deletion. Both the owner classifier and the duplicate
matcher are heuristic, so deleting always requires a human-confirmed call to
confirm_delete().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from domain.duplicates import (
    MatchCriteria,
    MatchResult,
    MatchType,
    find_duplicates,
    summarize_matches,
)
from domain.lead_record import LeadRecord

logger = logging.getLogger(__name__)


class LeadStore(Protocol):
    """Persistence operations the workflow needs. Implemented by repositories."""

    def list_active_leads(self) -> List[LeadRecord]: ...

    def delete_leads(self, lead_ids: Sequence[str]) -> int: ...

    def restore_leads(self, lead_ids: Sequence[str]) -> int: ...


class DeleteFailed(RuntimeError):
    """Raised when the store could not delete the reported duplicates."""

    def __init__(self, lead_ids: Sequence[str], reason: str):
        self.lead_ids = tuple(lead_ids)
        self.reason = reason
        super().__init__(f"Failed to delete {len(self.lead_ids)} duplicate leads: {reason}")


class WorkflowState(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    REPORTED = "reported"
    DELETING = "deleting"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class DuplicateReport:
    """
    Outcome of one duplicate check.

    matches keeps one entry per matching field, so one duplicate pair can
    appear several times; duplicate_lead_ids holds each duplicate once.
    """

    criteria: MatchCriteria
    total_checked: int
    unique_count: int
    duplicate_count: int
    duplicate_lead_ids: Tuple[str, ...]
    matches: Tuple[MatchResult, ...]
    match_counts: Mapping[MatchType, int] = field(default_factory=dict)
    missing_ids: Tuple[str, ...] = ()

    @property
    def has_duplicates(self) -> bool:
        return self.duplicate_count > 0


@dataclass(frozen=True, slots=True)
class DeleteOutcome:
    deleted: int
    lead_ids: Tuple[str, ...] = ()


def _select_candidates(
    candidate_ids: Iterable[str],
    population: Sequence[LeadRecord],
) -> Tuple[List[LeadRecord], Tuple[str, ...]]:
    """Resolve candidate ids against the population, keeping selection order."""

    by_id: Dict[str, LeadRecord] = {}
    for record in population:
        by_id.setdefault(record.id, record)

    selected: List[LeadRecord] = []
    seen: set[str] = set()
    missing: List[str] = []
    for lead_id in candidate_ids:
        if lead_id in seen:
            continue
        seen.add(lead_id)
        record = by_id.get(lead_id)
        if record is None:
            missing.append(lead_id)
        else:
            selected.append(record)
    return selected, tuple(missing)


class DedupWorkflow:
    """
    One operator's duplicate check session.

    Not thread-safe: create one workflow per request/session.
    """

    def __init__(self, store: LeadStore):
        self._store = store
        self._state = WorkflowState.IDLE
        self._report: Optional[DuplicateReport] = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def report(self) -> Optional[DuplicateReport]:
        return self._report

    def run(
        self,
        candidate_ids: Sequence[str],
        population: Sequence[LeadRecord],
        criteria: MatchCriteria,
    ) -> DuplicateReport:
        """
        Check the selected leads against the population.

        Raises:
            InvalidCriteria: If no criterion is selected. Raised before the
                population is examined; the workflow moves to FAILED.
        """

        if self._state == WorkflowState.DELETING:
            raise RuntimeError("Cannot start a duplicate check while a delete is in progress")

        self._state = WorkflowState.CHECKING
        self._report = None
        try:
            criteria.validate()
            candidates, missing = _select_candidates(candidate_ids, population)
            matches = find_duplicates(candidates, population, criteria)
        except Exception:
            self._state = WorkflowState.FAILED
            raise

        summary = summarize_matches(candidates, matches)
        report = DuplicateReport(
            criteria=criteria,
            total_checked=summary.total_checked,
            unique_count=summary.unique_count,
            duplicate_count=summary.duplicate_count,
            duplicate_lead_ids=summary.duplicate_lead_ids,
            matches=tuple(matches),
            match_counts=summary.match_counts,
            missing_ids=missing,
        )

        if missing:
            logger.warning(
                "%d selected leads were not found in the population",
                len(missing),
                extra={"missing_ids": list(missing)},
            )
        logger.info(
            "Duplicate check: %d checked, %d unique, %d duplicates",
            report.total_checked,
            report.unique_count,
            report.duplicate_count,
            extra={"match_counts": {k.value: v for k, v in report.match_counts.items()}},
        )

        self._report = report
        self._state = WorkflowState.REPORTED
        return report

    def check_selection(self, candidate_ids: Sequence[str], criteria: MatchCriteria) -> DuplicateReport:
        """Run a check against all active leads in the store."""

        # Validate first so an invalid request never loads the population.
        try:
            criteria.validate()
        except Exception:
            self._state = WorkflowState.FAILED
            raise
        population = self._store.list_active_leads()
        return self.run(candidate_ids, population, criteria)

    def confirm_delete(self, report: DuplicateReport) -> DeleteOutcome:
        """
        Delete the duplicates of a reported check. Called only after the
        operator confirmed.

        Raises:
            RuntimeError: If the report is not the workflow's current report.
            DeleteFailed: If the store fails; the workflow stays REPORTED and
                the same report can be retried.
        """

        if self._state != WorkflowState.REPORTED or report is not self._report:
            raise RuntimeError("confirm_delete requires the current reported duplicate check")

        lead_ids = report.duplicate_lead_ids
        if not lead_ids:
            self._state = WorkflowState.DELETED
            return DeleteOutcome(deleted=0)

        self._state = WorkflowState.DELETING
        try:
            deleted = self._store.delete_leads(list(lead_ids))
        except Exception as exc:
            self._state = WorkflowState.REPORTED
            logger.error(
                "Deleting %d duplicate leads failed: %s",
                len(lead_ids),
                exc,
                extra={"lead_ids": list(lead_ids)},
            )
            raise DeleteFailed(lead_ids, str(exc)) from exc

        self._state = WorkflowState.DELETED
        logger.info("Moved %d duplicate leads to the trash", deleted)
        return DeleteOutcome(deleted=deleted, lead_ids=lead_ids)

    def undo_delete(self, outcome: DeleteOutcome) -> int:
        """Restore the leads removed by confirm_delete. Returns the restored count."""

        if not outcome.lead_ids:
            return 0
        restored = self._store.restore_leads(list(outcome.lead_ids))
        logger.info("Restored %d leads from the trash", restored)
        return restored


__all__ = [
    "DedupWorkflow",
    "DeleteFailed",
    "DeleteOutcome",
    "DuplicateReport",
    "LeadStore",
    "WorkflowState",
]
