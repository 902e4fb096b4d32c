# Matching and repricing engine
# Nothing here knows about spreadsheet column positions; see the feeds package

from .models import CompetitorLadder, Listing, PriceQuote, RepricedItem, SkippedItem, Stock
from .parsers import EANNormalizer, NumberParser, TextNormalizer
from .pricing import (
    DISCOUNT_RULES,
    DiscountPolicy,
    classify_tax_rate,
    enforce_price_floor,
    reconstruct_price,
)
from .ranking import ladder_rank, second_rung_price
from .reconciliation import EANMatcher, MatchResult, MatchType
from .quality import DataQualityChecker, DataQualityIssue, DataQualityReport
from .strategies import RepricingStrategy, RuleBasedStrategy, SecondRungStrategy, get_strategy
from .engine import RepricingEngine, RepricingRun
from .export import OUTPUT_COLUMNS, results_to_frame, results_to_xlsx_bytes, write_results
from .settings import RepricingSettings

__all__ = [
    "CompetitorLadder",
    "Listing",
    "PriceQuote",
    "RepricedItem",
    "SkippedItem",
    "Stock",
    "EANNormalizer",
    "NumberParser",
    "TextNormalizer",
    "DISCOUNT_RULES",
    "DiscountPolicy",
    "classify_tax_rate",
    "enforce_price_floor",
    "reconstruct_price",
    "ladder_rank",
    "second_rung_price",
    "EANMatcher",
    "MatchResult",
    "MatchType",
    "DataQualityChecker",
    "DataQualityIssue",
    "DataQualityReport",
    "RepricingStrategy",
    "RuleBasedStrategy",
    "SecondRungStrategy",
    "get_strategy",
    "RepricingEngine",
    "RepricingRun",
    "OUTPUT_COLUMNS",
    "results_to_frame",
    "results_to_xlsx_bytes",
    "write_results",
    "RepricingSettings",
]
