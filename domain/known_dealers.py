"""
Domain: Known dealer name matching.

Dealers confirmed from listing data are kept as a plain list of names. An owner
name is matched against that list after normalization and removal of
legal-form suffixes, so "Norrlands Bil AB" and "Norrlands Bil" are the same
dealer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

# Trailing corporate/legal-form tokens stripped before comparing names.
CORPORATE_SUFFIXES: Tuple[str, ...] = (
    " ab",
    " hb",
    " kb",
    " ek för",
    " ekonomisk förening",
    " handelsbolag",
    " kommanditbolag",
    " aktiebolag",
    " i likvidation",
    " konkurs",
    " filial",
    " sweden",
    " nordic",
    " scandinavia",
    " group",
)

# Shorter cores than this are too generic for containment matching.
MIN_PARTIAL_CORE_LENGTH = 5

_WHITESPACE = re.compile(r"\s+")


class DealerMatchType(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"  # owner core contains dealer core
    REVERSE = "reverse"  # dealer core contains owner core


def normalize_name(name: str) -> str:
    """'  Norrlands   Bil AB ' -> 'norrlands bil ab'"""

    return _WHITESPACE.sub(" ", name.lower().strip())


def core_name(name: str) -> str:
    """
    Strip corporate suffixes from a normalized name.

    'Norrlands Bil AB' -> 'norrlands bil'
    'ABC Bilar Handelsbolag' -> 'abc bilar'
    """

    result = normalize_name(name)
    for suffix in CORPORATE_SUFFIXES:
        if result.endswith(suffix):
            result = result[: -len(suffix)].strip()
    return result


def names_match(first: Optional[str], second: Optional[str]) -> bool:
    """True if two names likely refer to the same company."""

    if not first or not second:
        return False
    core1 = core_name(first)
    core2 = core_name(second)
    if not core1 or not core2:
        return False
    if core1 == core2:
        return True
    if core1 in core2 or core2 in core1:
        shorter = core1 if len(core1) < len(core2) else core2
        return len(shorter) >= MIN_PARTIAL_CORE_LENGTH
    return False


@dataclass(frozen=True, slots=True)
class DealerMatch:
    dealer_name: str
    match_type: DealerMatchType


@dataclass(frozen=True, slots=True)
class KnownDealers:
    """
    Immutable list of confirmed dealer names.

    Order matters: the first matching dealer wins, so callers should pass the
    list sorted by relevance (e.g. by number of listings).
    """

    names: Tuple[str, ...] = ()

    @staticmethod
    def of(names: Iterable[str]) -> "KnownDealers":
        return KnownDealers(names=tuple(n for n in names if n and n.strip()))

    def match(self, owner_name: Optional[str]) -> Optional[DealerMatch]:
        """
        Find the dealer an owner name refers to.

        Exact matches on the normalized name take precedence over core-name
        containment in either direction.
        """

        if not owner_name or not owner_name.strip():
            return None

        normalized = normalize_name(owner_name)
        for dealer in self.names:
            if normalize_name(dealer) == normalized:
                return DealerMatch(dealer_name=dealer, match_type=DealerMatchType.EXACT)

        owner_core = core_name(owner_name)
        for dealer in self.names:
            dealer_core = core_name(dealer)
            if not dealer_core or not owner_core:
                continue
            if dealer_core in owner_core and len(dealer_core) >= MIN_PARTIAL_CORE_LENGTH:
                return DealerMatch(dealer_name=dealer, match_type=DealerMatchType.PARTIAL)
            if owner_core in dealer_core and len(owner_core) >= MIN_PARTIAL_CORE_LENGTH:
                return DealerMatch(dealer_name=dealer, match_type=DealerMatchType.REVERSE)

        return None

    def is_known_dealer(self, owner_name: Optional[str]) -> bool:
        return self.match(owner_name) is not None
