"""
Repricing run: match every stock row, price it, rank it, and collect results
in stock order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence

from .models import Listing, PriceQuote, RepricedItem, SkippedItem, Stock
from .pricing import classify_tax_rate
from .ranking import ladder_rank
from .reconciliation import EANMatcher, MatchType
from .settings import RepricingSettings
from .strategies import RepricingStrategy, RuleBasedStrategy

logger = logging.getLogger(__name__)


@dataclass
class RepricingRun:
    """Outcome of one repricing run."""

    strategy: str
    results: list[RepricedItem] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)
    matched_count: int = 0
    unmatched_count: int = 0

    @property
    def total_stock_records(self) -> int:
        return self.matched_count + self.unmatched_count

    @property
    def match_rate(self) -> float:
        if self.total_stock_records == 0:
            return 0
        return self.matched_count / self.total_stock_records

    @property
    def floor_adjusted_count(self) -> int:
        return sum(1 for item in self.results if item.floor_applied)

    def summary(self) -> dict:
        return {
            "strategy": self.strategy,
            "total": self.total_stock_records,
            "matched": self.matched_count,
            "unmatched": self.unmatched_count,
            "priced": len(self.results),
            "skipped": len(self.skipped),
            "match_rate": f"{self.match_rate:.1%}",
        }


class RepricingEngine:
    """
    Runs the per-row pipeline against a fixed set of listings.

    For each stock row: EAN match -> tax rate -> strategy quote -> ladder rank
    on the final price -> RepricedItem. Rows that cannot be matched or priced
    are skipped with a warning; nothing aborts the run.

    Usage:
        engine = RepricingEngine(listings, RuleBasedStrategy())
        run = engine.run(stock_rows)
    """

    def __init__(
        self,
        listings: Sequence[Listing],
        strategy: RepricingStrategy | None = None,
        settings: RepricingSettings | None = None,
    ):
        self.settings = settings or RepricingSettings()
        self.strategy = strategy or RuleBasedStrategy(floor_markup=self.settings.floor_markup)
        self.matcher = EANMatcher(listings)

    def tax_rate(self, stock: Stock) -> float:
        return classify_tax_rate(
            stock.name,
            keywords=self.settings.reduced_tax_keywords,
            standard_rate=self.settings.standard_tax_rate,
            reduced_rate=self.settings.reduced_tax_rate,
        )

    def reprice(self, stock: Stock) -> RepricedItem | SkippedItem:
        """Run the full pipeline for one stock row."""
        match = self.matcher.match(stock)
        if not match.matched:
            reason = "missing_ean" if match.match_type == MatchType.MISSING_EAN else "no_listing"
            return SkippedItem(code=stock.code, ean=stock.ean, reason=reason, row_number=stock.row_number)

        listing = match.listing
        quote = self.strategy.quote(stock, listing, self.tax_rate(stock))
        if quote is None:
            return SkippedItem(
                code=stock.code,
                ean=stock.ean,
                reason=self.strategy.skip_reason,
                row_number=stock.row_number,
            )

        return self._assemble(stock, listing, quote)

    def _assemble(self, stock: Stock, listing: Listing, quote: PriceQuote) -> RepricedItem:
        digits = self.settings.price_decimals
        lowest = listing.lowest_ladder_price

        return RepricedItem(
            code=stock.code,
            name=stock.name,
            ean=stock.ean,
            quantity_on_hand=stock.quantity_on_hand,
            purchase_cost_ex_tax=stock.purchase_cost_ex_tax,
            new_sell_price_with_tax=round(quote.sell_price_with_tax, digits),
            new_sell_price_ex_tax=round(quote.sell_price_ex_tax, digits),
            discount_percent=round(quote.discount_percent, digits),
            rule_code=stock.rule_code,
            # Rank the unrounded final price
            ladder_rank=ladder_rank(quote.sell_price_with_tax, listing.ladder),
            lowest_ladder_price_with_tax=round(lowest, digits) if lowest is not None else None,
            link=listing.link,
            floor_applied=quote.floor_applied,
        )

    def run(self, stock_rows: Sequence[Stock], max_workers: int | None = None) -> RepricingRun:
        """
        Reprice every stock row, keeping results in stock order.

        With max_workers > 1 rows are priced on a thread pool; listings are
        only read, and executor.map returns outcomes in submission order.
        """
        workers = max_workers or self.settings.max_workers
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(self.reprice, stock_rows))
        else:
            outcomes = [self.reprice(stock) for stock in stock_rows]

        run = RepricingRun(strategy=self.strategy.name)
        for outcome in outcomes:
            if isinstance(outcome, RepricedItem):
                run.results.append(outcome)
                run.matched_count += 1
                continue

            # A pair the strategy cannot price counts as a match failure too
            run.skipped.append(outcome)
            run.unmatched_count += 1
            logger.warning("Skipped stock row, %s", outcome.describe())

        logger.info(
            "Repriced %d of %d stock rows (strategy=%s, unmatched=%d, skipped=%d)",
            len(run.results),
            len(outcomes),
            run.strategy,
            run.unmatched_count,
            len(run.skipped),
        )
        return run
