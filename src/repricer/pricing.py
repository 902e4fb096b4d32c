"""
Pricing calculators: tax rate, rule discount, price reconstruction and the
competitor price floor.

All functions work at full float precision. Rounding happens only when a
RepricedItem is assembled.

Discount is a markdown on the tax-exclusive sell price:
    discount = (sell - cost) / sell * 100
so a sell price is rebuilt from cost and discount as
    sell = cost / (1 - discount / 100)
"""

from dataclasses import dataclass
from typing import Mapping, Protocol

from .models import PriceQuote


STANDARD_TAX_RATE = 21.0
REDUCED_TAX_RATE = 0.0
BOOK_KEYWORDS = ("kniha", "knihy", "knížka", "knížky")

# Returned for unknown rule codes; a negative discount means markup
MARKUP_DISCOUNT = -1.0


def classify_tax_rate(
    name: str | None,
    keywords: tuple[str, ...] = BOOK_KEYWORDS,
    standard_rate: float = STANDARD_TAX_RATE,
    reduced_rate: float = REDUCED_TAX_RATE,
) -> float:
    """Return the reduced rate when the product name mentions a book, else the standard rate."""
    if not name or not name.strip():
        return standard_rate

    lowered = name.lower()
    if any(keyword in lowered for keyword in keywords):
        return reduced_rate
    return standard_rate


# --- Discount policy ---


class DiscountRule(Protocol):
    def discount_for(self, quantity: float) -> float: ...


@dataclass(frozen=True)
class FlatDiscount:
    """Same discount regardless of stock."""

    percent: float

    def discount_for(self, quantity: float) -> float:
        return self.percent


@dataclass(frozen=True)
class StockTieredDiscount:
    """One discount above a stock threshold, another at or below it."""

    threshold: float
    above: float
    at_or_below: float

    def discount_for(self, quantity: float) -> float:
        return self.above if quantity > self.threshold else self.at_or_below


# Rule code -> discount behaviour. Add a rule by adding a line.
DISCOUNT_RULES: dict[str, DiscountRule] = {
    "1": FlatDiscount(10),
    "2": StockTieredDiscount(threshold=3, above=0, at_or_below=10),
    "3": FlatDiscount(20),
    "4": FlatDiscount(5),
}


class DiscountPolicy:
    """
    Maps a rule code and stock quantity to a discount percentage.

    Price is never consulted: the sell price is rebuilt from the discount,
    not the other way round.

    Usage:
        policy = DiscountPolicy()
        policy.discount("2", quantity=4)   # 0
        policy.discount("9", quantity=1)   # -1, markup
    """

    def __init__(
        self,
        rules: Mapping[str, DiscountRule] | None = None,
        default: float = MARKUP_DISCOUNT,
    ):
        self.rules = dict(DISCOUNT_RULES if rules is None else rules)
        self.default = default

    def discount(self, rule_code: str | None, quantity: float) -> float:
        key = (rule_code or "").strip().lower()
        rule = self.rules.get(key)
        if rule is None:
            return self.default
        return float(rule.discount_for(quantity))

    def __contains__(self, rule_code: str) -> bool:
        return (rule_code or "").strip().lower() in self.rules


# --- Price reconstruction ---


def _with_tax(price_ex_tax: float, tax_rate: float) -> float:
    return price_ex_tax * (1 + tax_rate / 100)


def _ex_tax(price_with_tax: float, tax_rate: float) -> float:
    return price_with_tax / (1 + tax_rate / 100)


def realized_discount(sell_price_ex_tax: float, cost_ex_tax: float) -> float:
    """Discount implied by a sell price; 0 when the price is not positive."""
    if sell_price_ex_tax <= 0:
        return 0.0
    return (sell_price_ex_tax - cost_ex_tax) / sell_price_ex_tax * 100


def reconstruct_price(cost_ex_tax: float, discount_percent: float, tax_rate: float) -> PriceQuote:
    """
    Rebuild a sell price from purchase cost and the target discount.

    Degenerate discounts:
    - 0 keeps the cost exactly
    - >= 100 or negative falls back to break-even and reports 0 discount
    """
    if discount_percent == 0 or discount_percent >= 100 or discount_percent < 0:
        sell_ex_tax = cost_ex_tax
        reported = 0.0
    else:
        sell_ex_tax = cost_ex_tax / (1 - discount_percent / 100)
        reported = discount_percent

    return PriceQuote(
        sell_price_with_tax=_with_tax(sell_ex_tax, tax_rate),
        sell_price_ex_tax=sell_ex_tax,
        discount_percent=reported,
        tax_rate=tax_rate,
    )


def enforce_price_floor(
    quote: PriceQuote,
    cost_ex_tax: float,
    lowest_competitor_price: float | None,
    markup: float = 1.0,
) -> PriceQuote:
    """
    Lift a quote that undercuts the cheapest competitor to `lowest + markup`.

    Quotes at or above the lowest price, or with no competitor price, pass through.
    """
    if lowest_competitor_price is None:
        return quote
    if quote.sell_price_with_tax >= lowest_competitor_price:
        return quote

    sell_with_tax = lowest_competitor_price + markup
    sell_ex_tax = _ex_tax(sell_with_tax, quote.tax_rate)
    return PriceQuote(
        sell_price_with_tax=sell_with_tax,
        sell_price_ex_tax=sell_ex_tax,
        discount_percent=realized_discount(sell_ex_tax, cost_ex_tax),
        tax_rate=quote.tax_rate,
        floor_applied=True,
    )


def quote_at_price(sell_price_with_tax: float, cost_ex_tax: float, tax_rate: float) -> PriceQuote:
    """Quote for a fixed tax-inclusive price, deriving the rest from it."""
    sell_ex_tax = _ex_tax(sell_price_with_tax, tax_rate)
    return PriceQuote(
        sell_price_with_tax=sell_price_with_tax,
        sell_price_ex_tax=sell_ex_tax,
        discount_percent=realized_discount(sell_ex_tax, cost_ex_tax),
        tax_rate=tax_rate,
    )
