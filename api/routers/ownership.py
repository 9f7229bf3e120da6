"""
Ownership API Endpoints.

Endpoints for analyzing a vehicle's ownership chain and extracting the
previous private owner as a lead.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_owner_classifier
from api.models import LeadResponse, OwnershipAnalysisRequest, OwnershipAnalysisResponse
from domain.lead_extraction import DealerOwner, IntermediaryOwner, PrivateOwner, SoldVehicle
from domain.owner_classifier import OwnerClassifier
from services.ownership_service import analyze_vehicle

router = APIRouter()


@router.post(
    "/ownership/analyze",
    response_model=OwnershipAnalysisResponse,
    summary="Analyze Ownership Chain",
    description="Classify the current owner and extract the previous private owner for dealer-held vehicles."
)
def analyze_ownership(
    request: OwnershipAnalysisRequest,
    classifier: OwnerClassifier = Depends(get_owner_classifier),
):
    """
    Analyze a vehicle's ownership history (most recent owner first).

    **Situations:**
    - `dealer`: current owner is a dealer/rental company; `lead` holds the
      most recent private owner before the dealer, if any
    - `intermediary`: a dealer advertises a vehicle registered to someone else
    - `sold`: the vehicle is known to have been bought by `bought_by`
    - `private`: anything else

    Returns 422 if a history entry has a malformed date.
    """
    rows = [event.model_dump() for event in request.history]
    analysis = analyze_vehicle(
        request.reg_nr,
        rows,
        classifier=classifier,
        seller_name=request.seller_name,
        bought_by=request.bought_by,
    )

    if analysis.error is not None:
        raise HTTPException(status_code=422, detail=analysis.error)

    situation = analysis.situation
    current = analysis.current_owner
    response = OwnershipAnalysisResponse(
        reg_nr=analysis.reg_nr,
        situation="private",
        owner_name=current.name if current else None,
        is_dealer_or_rental=isinstance(situation, DealerOwner),
    )

    if isinstance(situation, DealerOwner):
        response.situation = "dealer"
        response.dealer_since = situation.dealer_since
        if situation.lead is not None:
            lead = situation.lead
            response.lead = LeadResponse(
                name=lead.name,
                purchase_date=lead.purchase_date,
                sold_date=lead.sold_date,
                details=lead.details,
                ownership_duration=lead.ownership_duration_label,
                chain_index=lead.chain_index,
            )
    elif isinstance(situation, IntermediaryOwner):
        response.situation = "intermediary"
        response.seller_name = situation.seller_name
    elif isinstance(situation, SoldVehicle):
        response.situation = "sold"
        response.bought_by = situation.bought_by
    elif isinstance(situation, PrivateOwner):
        response.situation = "private"

    return response
