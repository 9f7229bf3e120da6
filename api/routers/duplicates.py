"""
Duplicate API Endpoints.

Endpoints for checking selected leads for duplicates, deleting confirmed
duplicates (moved to the trash), and restoring them.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_lead_store
from api.models import (
    DeleteResponse,
    DuplicateCheckRequest,
    DuplicateDeleteRequest,
    DuplicateReportResponse,
    MatchCriteriaIn,
    MatchResultResponse,
    RestoreRequest,
    RestoreResponse,
)
from domain.duplicates import InvalidCriteria, MatchCriteria
from services.dedup_workflow import DedupWorkflow, DeleteFailed, DuplicateReport, LeadStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_criteria(criteria: MatchCriteriaIn) -> MatchCriteria:
    return MatchCriteria(
        match_reg_nr=criteria.match_reg_nr,
        match_chassis=criteria.match_chassis,
        match_name=criteria.match_name,
        match_phone=criteria.match_phone,
    )


def _to_response(report: DuplicateReport) -> DuplicateReportResponse:
    return DuplicateReportResponse(
        total_checked=report.total_checked,
        unique_count=report.unique_count,
        duplicate_count=report.duplicate_count,
        duplicate_lead_ids=list(report.duplicate_lead_ids),
        matches=[
            MatchResultResponse(
                lead_id=m.lead_id,
                matched_against_id=m.matched_against_id,
                match_type=m.match_type.value,
            )
            for m in report.matches
        ],
        match_counts={k.value: v for k, v in report.match_counts.items()},
        missing_ids=list(report.missing_ids),
    )


def _run_check(workflow: DedupWorkflow, request: DuplicateCheckRequest) -> DuplicateReport:
    try:
        return workflow.check_selection(request.lead_ids, _to_criteria(request.criteria))
    except InvalidCriteria as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        logger.exception("Duplicate check failed")
        raise HTTPException(status_code=502, detail=f"Failed to load leads: {e}")


@router.post(
    "/duplicates/check",
    response_model=DuplicateReportResponse,
    summary="Check Duplicates",
    description="Check selected leads against every other active lead using the chosen match criteria."
)
def check_duplicates(
    request: DuplicateCheckRequest,
    store: LeadStore = Depends(get_lead_store),
):
    """
    Check the selected leads for duplicates.

    At least one criterion must be selected (400 otherwise). Nothing is
    deleted; use `/duplicates/delete` with `confirm: true` for that.
    """
    workflow = DedupWorkflow(store)
    return _to_response(_run_check(workflow, request))


@router.post(
    "/duplicates/delete",
    response_model=DeleteResponse,
    summary="Delete Duplicates",
    description="Re-check the selection and move the found duplicates to the trash. Requires confirm=true."
)
def delete_duplicates(
    request: DuplicateDeleteRequest,
    store: LeadStore = Depends(get_lead_store),
):
    """
    Delete duplicates after explicit confirmation.

    The selection is re-checked so only leads that are duplicates under the
    given criteria are deleted. Returns 502 if the store fails; nothing is
    deleted in that case and the request can be retried.
    """
    if not request.confirm:
        raise HTTPException(
            status_code=400,
            detail="Deleting duplicates requires explicit confirmation (confirm=true)"
        )

    workflow = DedupWorkflow(store)
    report = _run_check(workflow, request)

    try:
        outcome = workflow.confirm_delete(report)
    except DeleteFailed as e:
        raise HTTPException(status_code=502, detail=str(e))

    return DeleteResponse(
        deleted=outcome.deleted,
        lead_ids=list(outcome.lead_ids),
        report=_to_response(report),
    )


@router.post(
    "/duplicates/restore",
    response_model=RestoreResponse,
    summary="Restore Leads",
    description="Take previously deleted leads back out of the trash."
)
def restore_duplicates(
    request: RestoreRequest,
    store: LeadStore = Depends(get_lead_store),
):
    try:
        restored = store.restore_leads(request.lead_ids)
    except RuntimeError as e:
        raise HTTPException(status_code=502, detail=f"Failed to restore leads: {e}")
    return RestoreResponse(restored=restored)
