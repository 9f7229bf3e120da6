"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Ownership Models
# ============================================================================

class OwnershipEventIn(BaseModel):
    """One registry ownership row. Dates are validated by the domain layer."""
    date: Optional[str] = None
    name: Optional[str] = None
    owner_type: Optional[str] = None
    owner_class: Optional[str] = None
    details: Optional[str] = None


class OwnershipAnalysisRequest(BaseModel):
    """Ownership chain for one vehicle, most recent owner first."""
    reg_nr: str = Field(..., min_length=1, description="Registration number")
    history: List[OwnershipEventIn] = Field(default_factory=list)
    seller_name: Optional[str] = Field(
        None,
        description="Dealer advertising the vehicle, if it came from a dealer listing"
    )
    bought_by: Optional[str] = Field(
        None,
        description="Buyer name if the vehicle is known to have been sold"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "reg_nr": "ABC123",
                "history": [
                    {"date": "2024-03-01", "name": "Norrlands Bil AB", "owner_class": "company"},
                    {"date": "2022-01-10", "name": "Anna Andersson", "owner_class": "person"},
                ],
            }
        }


class LeadResponse(BaseModel):
    """Previous private owner of a dealer-held vehicle."""
    name: Optional[str]
    purchase_date: Optional[date]
    sold_date: Optional[date]
    details: Optional[str] = None
    ownership_duration: Optional[str] = None
    chain_index: int


class OwnershipAnalysisResponse(BaseModel):
    """Owner situation and extracted lead for one vehicle."""
    reg_nr: str
    situation: str  # "private", "dealer", "intermediary", "sold"
    owner_name: Optional[str] = None
    is_dealer_or_rental: bool
    dealer_since: Optional[date] = None
    seller_name: Optional[str] = None
    bought_by: Optional[str] = None
    lead: Optional[LeadResponse] = None

    class Config:
        json_schema_extra = {
            "example": {
                "reg_nr": "ABC123",
                "situation": "dealer",
                "owner_name": "Norrlands Bil AB",
                "is_dealer_or_rental": True,
                "dealer_since": "2024-03-01",
                "lead": {
                    "name": "Anna Andersson",
                    "purchase_date": "2022-01-10",
                    "sold_date": "2024-03-01",
                    "ownership_duration": "2 år, 1 mån",
                    "chain_index": 1
                }
            }
        }


# ============================================================================
# Duplicate Models
# ============================================================================

class MatchCriteriaIn(BaseModel):
    """Fields to match on. At least one must be true."""
    match_reg_nr: bool = False
    match_chassis: bool = False
    match_name: bool = False
    match_phone: bool = False


class DuplicateCheckRequest(BaseModel):
    """Leads to check against every other active lead."""
    lead_ids: List[str] = Field(..., min_length=1, description="Selected lead IDs")
    criteria: MatchCriteriaIn

    class Config:
        json_schema_extra = {
            "example": {
                "lead_ids": ["lead-1", "lead-2"],
                "criteria": {"match_reg_nr": True, "match_phone": True}
            }
        }


class MatchResultResponse(BaseModel):
    lead_id: str
    matched_against_id: str
    match_type: str  # "reg_nr", "chassis", "name", "phone"


class DuplicateReportResponse(BaseModel):
    """Result of a duplicate check."""
    total_checked: int
    unique_count: int
    duplicate_count: int
    duplicate_lead_ids: List[str]
    matches: List[MatchResultResponse]
    match_counts: Dict[str, int]
    missing_ids: List[str] = Field(default_factory=list)


class DuplicateDeleteRequest(DuplicateCheckRequest):
    """Re-check the selection and move the found duplicates to the trash."""
    confirm: bool = Field(
        False,
        description="Must be true; duplicates are only deleted on explicit confirmation"
    )


class DeleteResponse(BaseModel):
    deleted: int
    lead_ids: List[str]
    report: DuplicateReportResponse


class RestoreRequest(BaseModel):
    lead_ids: List[str] = Field(..., min_length=1)


class RestoreResponse(BaseModel):
    restored: int

