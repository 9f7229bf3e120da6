"""
Vehicle ownership analysis service.

Turns the registry's ownership rows for one vehicle into an actionable result:
- the current owner's classification (dealer/rental or not)
- the owner situation (private, dealer, intermediary, sold)
- for dealer-held vehicles, the previous private owner as a lead, with an
  ownership-duration label

Failures are scoped to one vehicle: a history with an unparseable date fails
closed (no lead) and the error is reported on the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional

from domain.lead_extraction import (
    DealerOwner,
    Lead,
    OwnerSituation,
    resolve_owner_situation,
)
from domain.owner_classifier import ClassifiedOwner, OwnerClassifier
from domain.ownership import InvalidHistoryEntry, OwnershipHistory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VehicleAnalysis:
    """
    Result of analyzing one vehicle's ownership chain.

    situation is None only when the history could not be parsed, in which case
    error holds the reason. current_owner.is_dealer_or_rental agrees with the
    situation: it is True whenever the situation is DealerOwner.
    """

    reg_nr: str
    history_length: int
    current_owner: Optional[ClassifiedOwner]
    situation: Optional[OwnerSituation]
    error: Optional[str] = None

    @property
    def lead(self) -> Optional[Lead]:
        if isinstance(self.situation, DealerOwner):
            return self.situation.lead
        return None


def analyze_vehicle(
    reg_nr: str,
    rows: Optional[Iterable[Mapping[str, Any]]],
    *,
    classifier: OwnerClassifier,
    seller_name: Optional[str] = None,
    bought_by: Optional[str] = None,
) -> VehicleAnalysis:
    """
    Analyze a vehicle's ownership rows (most recent first).

    Args:
        reg_nr: Registration number, used for reporting only.
        rows: Registry ownership rows.
        classifier: Dealer/rental classifier.
        seller_name: Dealer advertising the vehicle, if any.
        bought_by: Buyer name if the vehicle is known to have been sold.

    Returns:
        VehicleAnalysis. Never raises for malformed history; see `error`.
    """

    rows = list(rows or [])
    try:
        history = OwnershipHistory.from_rows(rows)
    except InvalidHistoryEntry as exc:
        logger.warning(
            "Skipping lead extraction for %s: %s",
            reg_nr,
            exc,
            extra={"reg_nr": reg_nr, "entry_index": exc.index},
        )
        return VehicleAnalysis(
            reg_nr=reg_nr,
            history_length=len(rows),
            current_owner=None,
            situation=None,
            error=str(exc),
        )

    head = history.head
    current_owner = classifier.classify_owner(head.name if head else None, head)
    situation = resolve_owner_situation(
        history,
        classifier,
        seller_name=seller_name,
        bought_by=bought_by,
    )

    if isinstance(situation, DealerOwner):
        if current_owner is not None and not current_owner.is_dealer_or_rental:
            # The advertising dealer matched the registered owner's name.
            current_owner = replace(current_owner, is_dealer_or_rental=True)
        lead = situation.lead
        if lead is None:
            logger.info("Dealer-held vehicle %s has no private owner in history", reg_nr)
        elif lead.purchase_date and lead.sold_date and lead.purchase_date > lead.sold_date:
            logger.warning(
                "Ownership dates out of order for %s (purchase %s after sale %s)",
                reg_nr,
                lead.purchase_date,
                lead.sold_date,
                extra={"reg_nr": reg_nr, "chain_index": lead.chain_index},
            )

    return VehicleAnalysis(
        reg_nr=reg_nr,
        history_length=len(history),
        current_owner=current_owner,
        situation=situation,
    )


__all__ = ["VehicleAnalysis", "analyze_vehicle"]
