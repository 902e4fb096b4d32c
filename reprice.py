"""
Interactive repricing runner.

Prompts for the Heureka export, the warehouse export, the output workbook
and the repricing strategy, then writes the repriced items.
Run with: python reprice.py
"""

import logging
import sys
import traceback
from pathlib import Path
from typing import Callable

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from feeds import HeurekaCatalogLoader
from repricer import RepricingEngine, RepricingSettings, get_strategy, write_results
from repricer.strategies import STRATEGY_NAMES

logger = logging.getLogger("reprice")


def prompt_input_path(prompt: str, default: str, ask: Callable[[str], str] = input) -> Path:
    """Ask for an existing file; blank answer means the default."""
    answer = ask(prompt).strip()
    if not answer:
        return Path(default)

    path = Path(answer)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {answer}")
    return path


def prompt_output_path(prompt: str, default: str, ask: Callable[[str], str] = input) -> Path:
    answer = ask(prompt).strip()
    return Path(answer) if answer else Path(default)


def prompt_strategy(ask: Callable[[str], str] = input) -> str:
    """Ask which repricing strategy to run; blank or 1 means rule-based."""
    options = ", ".join(f"{i}={name}" for i, name in enumerate(STRATEGY_NAMES, start=1))
    answer = ask(f"Repricing strategy ({options}) [1]: ").strip().lower()
    if not answer:
        return STRATEGY_NAMES[0]
    if answer.isdigit() and 1 <= int(answer) <= len(STRATEGY_NAMES):
        return STRATEGY_NAMES[int(answer) - 1]
    return answer


def run(
    listings_path: Path,
    stock_path: Path,
    output_path: Path,
    strategy_name: str,
    settings: RepricingSettings,
) -> dict:
    """Load both exports, reprice, write the output workbook and return the run summary."""
    strategy = get_strategy(strategy_name, settings)
    loader = HeurekaCatalogLoader(settings)

    catalogs = loader.load_all(listings_path, stock_path)
    for report in catalogs.quality_reports.values():
        critical = report.critical_issues
        for issue in report.issues:
            level = logging.WARNING if issue in critical else logging.INFO
            logger.log(level, "[%s] %s: %s", report.source_name, issue.column, issue.description)

    engine = RepricingEngine(catalogs.listings, strategy, settings)
    result = engine.run(catalogs.stock)
    write_results(result.results, output_path, placeholder=settings.empty_result_placeholder)
    return result.summary()


def main(ask: Callable[[str], str] = input) -> int:
    settings = RepricingSettings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    print("Heureka repricer - matches the Heureka export with warehouse stock")
    print("=================================================================")

    try:
        listings_path = prompt_input_path(
            f"Heureka export path (Enter for '{settings.default_listings_path}'): ",
            settings.default_listings_path,
            ask,
        )
        stock_path = prompt_input_path(
            f"Warehouse export path (Enter for '{settings.default_stock_path}'): ",
            settings.default_stock_path,
            ask,
        )
        output_path = prompt_output_path(
            f"Output workbook path (Enter for '{settings.default_output_path}'): ",
            settings.default_output_path,
            ask,
        )
        strategy_name = prompt_strategy(ask)

        summary = run(listings_path, stock_path, output_path, strategy_name, settings)
    except Exception as exc:
        print(f"\nError: {exc}")
        print(f"Detail: {traceback.format_exc()}")
        return 1

    print(
        f"\nDone. Matched {summary['matched']} of {summary['total']} stock rows "
        f"({summary['unmatched']} unmatched). Output: {output_path}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
