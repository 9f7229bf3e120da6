"""
Domain: Owner classification (dealer/rental vs. everyone else).

Rules implemented here:
- Keyword evidence on the owner's name is the load-bearing signal. A keyword
  is a lower-case substring (not a whole word) tested against the name.
- Registry metadata (owner-type label, owner class) alone never makes an
  owner a dealer. It only gates which history heuristics are consulted.
- An absent name is never a dealer.

Known limitation: substring matching false-positives on names that merely
contain a keyword fragment. This is accepted and must not be tightened
silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from .known_dealers import DealerMatchType, KnownDealers
from .ownership import OwnerClass, OwnershipEvent

logger = logging.getLogger(__name__)

DEFAULT_DEALER_KEYWORDS: Tuple[str, ...] = (
    # Trade / legal-form tokens
    "bil ab",
    "bilhandlare",
    "bilhandel",
    "bilgruppen",
    "bilcenter",
    "hyrbil",
    "biluthyrning",
    "uthyrning",
    "leasing",
    # Rental brands
    "hertz",
    "avis",
    "europcar",
    "sixt",
    "mabi",
    "budget",
)

# Fragments of registry owner-type labels that denote a dealer, finance or
# leasing category ("Bilhandlare", "Finans/Leasing").
DEALER_LABEL_MARKERS: Tuple[str, ...] = ("handlare", "handel", "finans", "leasing")


@dataclass(frozen=True, slots=True)
class ClassifiedOwner:
    name: Optional[str]
    is_dealer_or_rental: bool
    registry_says_company: bool = False
    known_dealer_match: Optional[DealerMatchType] = None


def registry_suggests_company(head: Optional[OwnershipEvent]) -> bool:
    """True if registry metadata for the current owner points at a commercial owner."""

    if head is None:
        return False
    if head.owner_class == OwnerClass.COMPANY:
        return True
    label = (head.owner_type_label or "").lower()
    return any(marker in label for marker in DEALER_LABEL_MARKERS)


@dataclass(frozen=True, slots=True)
class OwnerClassifier:
    """
    Pure, configurable dealer/rental classifier.

    keywords: lower-case substrings that mark a dealer or rental company.
    known_dealers: optional list of confirmed dealer names, consulted after
    the keyword test.
    """

    keywords: Tuple[str, ...] = DEFAULT_DEALER_KEYWORDS
    known_dealers: KnownDealers = field(default_factory=KnownDealers)

    @staticmethod
    def with_keywords(
        keywords: Iterable[str],
        known_dealers: Optional[KnownDealers] = None,
    ) -> "OwnerClassifier":
        cleaned = tuple(k.strip().lower() for k in keywords if k and k.strip())
        if not cleaned:
            raise ValueError("keywords must contain at least one non-empty keyword")
        return OwnerClassifier(keywords=cleaned, known_dealers=known_dealers or KnownDealers())

    def has_keyword(self, name: str) -> bool:
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.keywords)

    def classify(self, name: Optional[str], history_head: Optional[OwnershipEvent] = None) -> bool:
        """Return True if the named owner is a dealer or rental company."""

        return self.classify_owner(name, history_head).is_dealer_or_rental

    def classify_owner(
        self,
        name: Optional[str],
        history_head: Optional[OwnershipEvent] = None,
    ) -> ClassifiedOwner:
        """Classify an owner and keep the evidence that led to the decision."""

        company_hint = registry_suggests_company(history_head)

        if name is None or not name.strip():
            return ClassifiedOwner(name=name, is_dealer_or_rental=False, registry_says_company=company_hint)

        if self.has_keyword(name):
            return ClassifiedOwner(name=name, is_dealer_or_rental=True, registry_says_company=company_hint)

        dealer_match = self.known_dealers.match(name)
        if dealer_match is not None:
            return ClassifiedOwner(
                name=name,
                is_dealer_or_rental=True,
                registry_says_company=company_hint,
                known_dealer_match=dealer_match.match_type,
            )

        if company_hint:
            # Metadata only decides whether the name is re-examined; it is
            # never evidence on its own.
            is_dealer = self.has_keyword(name)
            if not is_dealer:
                logger.debug(
                    "Registry marks owner as company but name has no dealer keyword",
                    extra={"owner_name": name},
                )
            return ClassifiedOwner(name=name, is_dealer_or_rental=is_dealer, registry_says_company=True)

        return ClassifiedOwner(name=name, is_dealer_or_rental=False)
