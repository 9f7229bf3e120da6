"""
Domain: Lead extraction from an ownership chain.

When a vehicle is held by a dealer, the actionable lead is the most recent
private owner before the dealer.

Contract:
- The current owner (head of the history) is never a lead candidate.
- The first private owner found walking back from the head is the lead; older
  private owners are not surfaced.
- purchase_date is the private owner's own event date; sold_date is the date
  of the event one step toward the present (for the owner right behind the
  head, the dealer's acquisition date).

The owner's overall situation is modeled as a closed set of variants
(PrivateOwner, DealerOwner, IntermediaryOwner, SoldVehicle) so callers handle
every case explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from .duration import duration_label
from .known_dealers import names_match
from .owner_classifier import OwnerClassifier
from .ownership import OwnershipHistory


@dataclass(frozen=True, slots=True)
class Lead:
    """The previous private owner of a dealer-held vehicle."""

    name: Optional[str]
    purchase_date: Optional[date]
    sold_date: Optional[date]
    details: Optional[str] = None
    chain_index: int = 1

    @property
    def ownership_duration_label(self) -> Optional[str]:
        return duration_label(self.purchase_date, self.sold_date)


def extract_previous_private_owner(history: OwnershipHistory) -> Optional[Lead]:
    """
    Return the most recent private owner behind the current owner, or None.

    The head is consumed once before the walk starts, so it can never be
    re-examined as a candidate.
    """

    events = iter(history)
    newer = next(events, None)
    if newer is None:
        return None

    for index, event in enumerate(events, start=1):
        if event.is_private():
            return Lead(
                name=event.name,
                purchase_date=event.date,
                sold_date=newer.date,
                details=event.details,
                chain_index=index,
            )
        newer = event

    return None


@dataclass(frozen=True, slots=True)
class PrivateOwner:
    owner_name: Optional[str]


@dataclass(frozen=True, slots=True)
class DealerOwner:
    owner_name: Optional[str]
    dealer_since: Optional[date]
    lead: Optional[Lead]


@dataclass(frozen=True, slots=True)
class IntermediaryOwner:
    """The listing's dealer sells a vehicle registered to someone else."""

    owner_name: Optional[str]
    seller_name: str


@dataclass(frozen=True, slots=True)
class SoldVehicle:
    bought_by: str


OwnerSituation = Union[PrivateOwner, DealerOwner, IntermediaryOwner, SoldVehicle]


def resolve_owner_situation(
    history: OwnershipHistory,
    classifier: OwnerClassifier,
    *,
    seller_name: Optional[str] = None,
    bought_by: Optional[str] = None,
) -> OwnerSituation:
    """
    Decide which situation the vehicle's current owner is in.

    Args:
        history: Ownership chain, most recent first.
        classifier: Dealer/rental classifier.
        seller_name: Name of the dealer advertising the vehicle, if it was
            found through a dealer listing.
        bought_by: Name of the buyer if the vehicle is known to have been sold.
    """

    if bought_by and bought_by.strip():
        return SoldVehicle(bought_by=bought_by.strip())

    head = history.head
    owner_name = head.name if head is not None else None

    is_dealer = classifier.classify(owner_name, head)

    listed_by_dealer = bool(seller_name and seller_name.strip())
    if not is_dealer and listed_by_dealer and owner_name:
        if not names_match(seller_name, owner_name):
            return IntermediaryOwner(owner_name=owner_name, seller_name=seller_name.strip())
        # The advertising dealer is the registered owner.
        is_dealer = True

    if is_dealer:
        return DealerOwner(
            owner_name=owner_name,
            dealer_since=head.date if head is not None else None,
            lead=extract_previous_private_owner(history),
        )

    return PrivateOwner(owner_name=owner_name)
