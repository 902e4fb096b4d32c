"""
Typed records shared by the loaders, the matcher and the pricing pipeline.

Listing and Stock rows are immutable once loaded. A RepricedItem owns copies
of every scalar it reports and keeps no reference back to its inputs.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator


LADDER_SIZE = 19


class CompetitorLadder:
    """
    Fixed-position sequence of competitor prices (cheapest first).

    A slot holds either a positive price or None. Empty slots are kept so the
    position of every price matches the column it was read from.
    """

    __slots__ = ("_slots",)

    def __init__(self, prices: Iterable[float | None] = ()):
        slots = tuple(
            float(p) if p is not None and p > 0 else None for p in prices
        )
        if len(slots) > LADDER_SIZE:
            raise ValueError(
                f"Competitor ladder holds at most {LADDER_SIZE} slots, got {len(slots)}"
            )
        self._slots = slots

    @classmethod
    def from_cells(cls, cells: Iterable[float | None], size: int = LADDER_SIZE) -> "CompetitorLadder":
        """Build a full-width ladder, padding missing trailing cells with None."""
        slots = list(cells)[:size]
        slots.extend([None] * (size - len(slots)))
        return cls(slots)

    @property
    def slots(self) -> tuple[float | None, ...]:
        return self._slots

    @property
    def lowest(self) -> float | None:
        """First present price in the ladder."""
        for price in self._slots:
            if price is not None:
                return price
        return None

    def present(self) -> Iterator[tuple[int, float]]:
        """Yield (1-based position, price) for every filled slot."""
        for index, price in enumerate(self._slots, start=1):
            if price is not None:
                yield index, price

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[float | None]:
        return iter(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompetitorLadder):
            return NotImplemented
        return self._slots == other._slots

    def __hash__(self) -> int:
        return hash(self._slots)

    def __repr__(self) -> str:
        return f"CompetitorLadder({list(self._slots)!r})"


@dataclass(frozen=True)
class Listing:
    """One row of the comparison-site export."""

    ean: str
    sell_price_with_tax: float = 0.0
    link: str = ""
    ladder: CompetitorLadder = field(default_factory=CompetitorLadder)
    row_number: int | None = None

    @property
    def lowest_ladder_price(self) -> float | None:
        return self.ladder.lowest


@dataclass(frozen=True)
class Stock:
    """One row of the warehouse export."""

    code: str
    name: str
    ean: str
    quantity_on_hand: float
    purchase_cost_ex_tax: float
    rule_code: str
    row_number: int | None = None


@dataclass(frozen=True)
class PriceQuote:
    """Unrounded outcome of a pricing strategy for one matched pair."""

    sell_price_with_tax: float
    sell_price_ex_tax: float
    discount_percent: float
    tax_rate: float
    floor_applied: bool = False


@dataclass(frozen=True)
class RepricedItem:
    """One output row: a matched, successfully priced stock item."""

    code: str
    name: str
    ean: str
    quantity_on_hand: float
    purchase_cost_ex_tax: float
    new_sell_price_with_tax: float
    new_sell_price_ex_tax: float
    discount_percent: float
    rule_code: str
    ladder_rank: int
    lowest_ladder_price_with_tax: float | None
    link: str
    floor_applied: bool = False


@dataclass(frozen=True)
class SkippedItem:
    """A stock row that produced no output, kept for operator review."""

    code: str
    ean: str
    reason: str
    row_number: int | None = None

    def describe(self) -> str:
        where = f" (row {self.row_number})" if self.row_number is not None else ""
        return f"EAN {self.ean or '<empty>'} code {self.code or '<empty>'}{where}: {self.reason}"
