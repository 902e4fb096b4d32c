"""
Repricing strategies.

A strategy turns one matched (stock, listing) pair into a PriceQuote, or
returns None when the pair cannot be priced. The engine picks one strategy
per run; calculators never branch on which one is active.
"""

from abc import ABC, abstractmethod

from .models import Listing, PriceQuote, Stock
from .pricing import DiscountPolicy, enforce_price_floor, quote_at_price, reconstruct_price
from .ranking import second_rung_price
from .settings import RepricingSettings


class RepricingStrategy(ABC):
    """Base class for pricing one matched pair."""

    name: str = ""
    # Reason recorded when quote() returns None
    skip_reason: str = "not_priced"

    @abstractmethod
    def quote(self, stock: Stock, listing: Listing, tax_rate: float) -> PriceQuote | None:
        ...


class RuleBasedStrategy(RepricingStrategy):
    """
    Price from purchase cost and the rule-code discount, then lift the result
    above the cheapest competitor if it undercuts them.
    """

    name = "rules"

    def __init__(self, policy: DiscountPolicy | None = None, floor_markup: float = 1.0):
        self.policy = policy or DiscountPolicy()
        self.floor_markup = floor_markup

    def quote(self, stock: Stock, listing: Listing, tax_rate: float) -> PriceQuote:
        discount = self.policy.discount(stock.rule_code, stock.quantity_on_hand)
        candidate = reconstruct_price(stock.purchase_cost_ex_tax, discount, tax_rate)
        return enforce_price_floor(
            candidate,
            cost_ex_tax=stock.purchase_cost_ex_tax,
            lowest_competitor_price=listing.lowest_ladder_price,
            markup=self.floor_markup,
        )


class SecondRungStrategy(RepricingStrategy):
    """Price at the second distinct competitor price on the ladder."""

    name = "second_rung"
    skip_reason = "no_second_rung"

    def __init__(self, decimals: int = 2):
        self.decimals = decimals

    def quote(self, stock: Stock, listing: Listing, tax_rate: float) -> PriceQuote | None:
        price = second_rung_price(listing.ladder, decimals=self.decimals)
        if price is None:
            return None
        return quote_at_price(price, stock.purchase_cost_ex_tax, tax_rate)


STRATEGY_NAMES = (RuleBasedStrategy.name, SecondRungStrategy.name)


def get_strategy(name: str, settings: RepricingSettings | None = None) -> RepricingStrategy:
    """Build a strategy by name ("rules" or "second_rung")."""
    settings = settings or RepricingSettings()
    key = (name or "").strip().lower()

    if key == RuleBasedStrategy.name:
        return RuleBasedStrategy(floor_markup=settings.floor_markup)
    if key == SecondRungStrategy.name:
        return SecondRungStrategy(decimals=settings.price_decimals)

    raise ValueError(f"Unknown repricing strategy '{name}', expected one of: {', '.join(STRATEGY_NAMES)}")
