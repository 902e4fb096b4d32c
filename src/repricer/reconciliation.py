"""
Matching stock rows to comparison-site listings by EAN.

The two exports disagree on EAN padding and check digits, so a listing
matches when its EAN starts with the stock EAN (case-insensitive, trimmed)
rather than when the two are equal.
"""

from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .models import Listing, Stock

class MatchType(Enum):
    """How a match was determined."""

    EAN_PREFIX = "ean_prefix"  # Listing EAN starts with the stock EAN
    MISSING_EAN = "missing_ean"  # Stock row has no EAN to match on
    UNMATCHED = "unmatched"  # No listing EAN carries the prefix

def match_key(ean: str | None) -> str:
    """Normalize an EAN for comparison."""
    if not ean:
        return ""
    return ean.strip().lower()

@dataclass
class MatchResult:
    """Result of matching a single stock row."""

    stock: Stock
    listing: Listing | None
    match_type: MatchType

    @property
    def matched(self) -> bool:
        return self.listing is not None


class EANMatcher:
    """
    Resolves each stock row to the first listing (in listing order) whose
    EAN starts with the stock EAN.

    Listing EANs are kept in a sorted index, so every listing sharing a prefix
    sits in one contiguous run found by bisection. The earliest listing in that
    run wins, which gives the same answer as a linear scan in listing order.

    Usage:
        matcher = EANMatcher(listings)
        listing = matcher.find(stock_row)
    """

    def __init__(self, listings: Sequence[Listing]):
        self.listings = list(listings)
        self._index: list[tuple[str, int]] = sorted(
            (match_key(listing.ean), position)
            for position, listing in enumerate(self.listings)
        )
        self._keys = [key for key, _ in self._index]

    def find(self, stock: Stock) -> Listing | None:
        """Return the matching listing, or None."""
        prefix = match_key(stock.ean)
        if not prefix:
            return None

        first_position = None
        i = bisect_left(self._keys, prefix)
        while i < len(self._keys) and self._keys[i].startswith(prefix):
            position = self._index[i][1]
            if first_position is None or position < first_position:
                first_position = position
            i += 1

        if first_position is None:
            return None
        return self.listings[first_position]

    def match(self, stock: Stock) -> MatchResult:
        if not match_key(stock.ean):
            return MatchResult(stock=stock, listing=None, match_type=MatchType.MISSING_EAN)

        listing = self.find(stock)
        if listing is None:
            return MatchResult(stock=stock, listing=None, match_type=MatchType.UNMATCHED)
        return MatchResult(stock=stock, listing=listing, match_type=MatchType.EAN_PREFIX)
