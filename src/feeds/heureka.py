"""
Loader for the Heureka comparison export and the warehouse (sklad) export.

THIS FILE CONTAINS SOURCE-SPECIFIC COLUMN POSITIONS:
- Heureka: EAN in F, sell price with tax in L, product link in I, and the
  cheapest competitor offers in ascending order across P..AH (19 columns)
- Sklad: code A, EAN B, name C, quantity F, purchase cost without tax G,
  pricing rule J

Both exports have a header in row 1 and data from row 2. Legacy .xls and
.xlsx workbooks map to the same positions.

To adapt for a different export layout, change the column maps below; the
repricer package does not depend on them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from repricer.models import CompetitorLadder, Listing, Stock
from repricer.parsers import EANNormalizer, NumberParser, TextNormalizer
from repricer.pricing import DiscountPolicy
from repricer.quality import DataQualityChecker, DataQualityIssue, DataQualityReport
from repricer.settings import RepricingSettings

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """A workbook exists but cannot be read."""


@dataclass
class LoadedCatalogs:
    """Container for both loaded exports."""

    listings: list[Listing]
    stock: list[Stock]
    quality_reports: dict[str, DataQualityReport] = field(default_factory=dict)


def _column_index(letter: str) -> int:
    """Excel column letter -> 0-based index ("A" -> 0, "AH" -> 33)."""
    index = 0
    for char in letter.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


class HeurekaCatalogLoader:
    """
    Loads both exports into Listing and Stock records.

    Quirks handled:
    - Numeric EANs in .xls files come back as floats (8591230000001.0)
    - Prices may be typed as text with decimal commas
    - Ladder cells that are blank, zero or non-numeric are empty slots, but
      keep their column position
    - Stock rows without EAN or rule code are dropped (and reported)
    """

    LISTING_COLUMNS = {
        "ean": "F",
        "link": "I",
        "sell_price_with_tax": "L",
    }
    LADDER_FIRST_COLUMN = "P"
    LADDER_LAST_COLUMN = "AH"

    STOCK_COLUMNS = {
        "code": "A",
        "ean": "B",
        "name": "C",
        "quantity": "F",
        "purchase_cost": "G",
        "rule_code": "J",
    }

    ENGINES = {
        ".xls": "xlrd",
        ".xlsx": "openpyxl",
        ".xlsm": "openpyxl",
    }

    def __init__(self, settings: RepricingSettings | None = None):
        self.settings = settings or RepricingSettings()
        self.number_parser = NumberParser()
        self.ean_normalizer = EANNormalizer()
        self.text_normalizer = TextNormalizer()

    @property
    def ladder_columns(self) -> list[str]:
        first = _column_index(self.LADDER_FIRST_COLUMN)
        last = _column_index(self.LADDER_LAST_COLUMN)
        width = min(last - first + 1, self.settings.ladder_size)
        return [f"ladder_{i:02d}" for i in range(1, width + 1)]

    def load_all(self, listings_path: Path | str, stock_path: Path | str) -> LoadedCatalogs:
        """Load both exports and their quality reports."""
        listings, listing_report = self.load_listings(listings_path)
        stock, stock_report = self.load_stock(stock_path)

        return LoadedCatalogs(
            listings=listings,
            stock=stock,
            quality_reports={
                "listings": listing_report,
                "stock": stock_report,
            },
        )

    # --- Reading ---

    def read_sheet(self, path: Path | str) -> pd.DataFrame:
        """
        Read the first worksheet as raw cells, without a header.

        Raises FileNotFoundError for a missing file and CatalogLoadError for a
        workbook that cannot be opened.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Input file not found: {path}")

        engine = self.ENGINES.get(path.suffix.lower())
        try:
            # Only truly empty cells are blank; "NA" is a valid code or EAN
            return pd.read_excel(
                path, sheet_name=0, header=None, dtype=object, engine=engine, keep_default_na=False
            )
        except Exception as exc:
            raise CatalogLoadError(f"Cannot read workbook {path}: {exc}") from exc

    def _select(self, raw: pd.DataFrame, columns: dict[str, int]) -> pd.DataFrame:
        """Pick columns by 0-based position from the data rows (row 2 onwards)."""
        data = raw.iloc[1:]
        selected = pd.DataFrame(index=data.index)
        for name, index in columns.items():
            selected[name] = data[index] if index in data.columns else None
        selected["row_number"] = data.index + 1
        return selected

    # --- Listings ---

    def tabulate_listings(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Map raw cells to named listing columns."""
        first = _column_index(self.LADDER_FIRST_COLUMN)
        columns = {name: _column_index(letter) for name, letter in self.LISTING_COLUMNS.items()}
        for offset, name in enumerate(self.ladder_columns):
            columns[name] = first + offset
        return self._select(raw, columns)

    def load_listings(self, path: Path | str) -> tuple[list[Listing], DataQualityReport]:
        """Load the comparison export."""
        logger.info("Loading listings from %s", path)
        raw = self.read_sheet(path)
        if raw.shape[0] <= 1:
            logger.warning("Listings worksheet in %s is empty", path)
            return [], DataQualityReport(source_name="Listings", total_rows=0)

        df = self.tabulate_listings(raw)
        df["ean_normalized"] = self.ean_normalizer.normalize_series(df["ean"])
        df["link_normalized"] = self.text_normalizer.normalize_series(df["link"])
        df["price_parsed"] = self.number_parser.parse_series(df["sell_price_with_tax"])

        # Rows with no EAN, link or price carry nothing to match or report
        has_content = (df["price_parsed"] > 0) | (df["link_normalized"] != "") | (df["ean_normalized"] != "")
        df = df[has_content]

        listings = []
        ladder_columns = self.ladder_columns
        for record in df.to_dict("records"):
            ladder = CompetitorLadder.from_cells(
                (self.number_parser.parse_optional_price(record[c]) for c in ladder_columns),
                size=len(ladder_columns),
            )
            listings.append(
                Listing(
                    ean=record["ean_normalized"],
                    sell_price_with_tax=record["price_parsed"],
                    link=record["link_normalized"],
                    ladder=ladder,
                    row_number=int(record["row_number"]),
                )
            )

        report = self._check_listing_quality(df)
        logger.info("Loaded %d listings", len(listings))
        return listings, report

    def _check_listing_quality(self, df: pd.DataFrame) -> DataQualityReport:
        checker = DataQualityChecker("Listings", required_columns=["ean", "sell_price_with_tax"])
        checker.check_duplicates(["ean_normalized"], severity="info")
        checker.check_outliers(
            "sell_price_with_tax", min_val=0, severity="warning", parser=self.number_parser.parse
        )

        def check_empty_ladders(d: pd.DataFrame) -> list[DataQualityIssue]:
            filled = pd.Series(False, index=d.index)
            for col in self.ladder_columns:
                filled |= d[col].apply(self.number_parser.parse_optional_price).notna()
            empty = int((~filled).sum())
            if empty > 0:
                return [
                    DataQualityIssue(
                        column="ladder",
                        issue_type="missing",
                        severity="info",
                        count=empty,
                        percentage=(empty / len(d)) * 100,
                        description=f"{empty:,} listings have no competitor prices (no price floor)",
                    )
                ]
            return []

        checker.add_check(check_empty_ladders)
        return checker.run(df)

    # --- Stock ---

    def load_stock(self, path: Path | str) -> tuple[list[Stock], DataQualityReport]:
        """Load the warehouse export, dropping rows without EAN or rule code."""
        logger.info("Loading stock from %s", path)
        raw = self.read_sheet(path)
        if raw.shape[0] <= 1:
            logger.warning("Stock worksheet in %s is empty", path)
            return [], DataQualityReport(source_name="Stock", total_rows=0)

        df = self._select(raw, {name: _column_index(letter) for name, letter in self.STOCK_COLUMNS.items()})
        df["code_normalized"] = self.text_normalizer.normalize_series(df["code"])
        df["ean_normalized"] = self.ean_normalizer.normalize_series(df["ean"])
        df["name_normalized"] = self.text_normalizer.normalize_series(df["name"])
        df["rule_normalized"] = self.text_normalizer.normalize_series(df["rule_code"])
        df["quantity_parsed"] = self.number_parser.parse_series(df["quantity"])
        df["cost_parsed"] = self.number_parser.parse_series(df["purchase_cost"])

        # Rows with neither code nor EAN are not products
        df = df[(df["code_normalized"] != "") | (df["ean_normalized"] != "")]

        report = self._check_stock_quality(df)

        missing_ean = df["ean_normalized"] == ""
        missing_rule = df["rule_normalized"] == ""
        for issue_column, mask in (("ean", missing_ean), ("rule_code", missing_rule)):
            dropped = int(mask.sum())
            if dropped:
                report.add(
                    DataQualityIssue(
                        column=issue_column,
                        issue_type="dropped",
                        severity="info",
                        count=dropped,
                        percentage=(dropped / len(df)) * 100,
                        sample_values=df.loc[mask, "code_normalized"].head(5).tolist(),
                        description=f"{dropped:,} rows dropped for blank {issue_column}",
                    )
                )
        for record in df[missing_ean | missing_rule].to_dict("records"):
            logger.warning(
                "Dropping stock row %s (code %s, EAN %r): blank EAN or rule code",
                record["row_number"],
                record["code_normalized"],
                record["ean_normalized"],
            )

        stock = [
            Stock(
                code=record["code_normalized"],
                name=record["name_normalized"],
                ean=record["ean_normalized"],
                quantity_on_hand=record["quantity_parsed"],
                purchase_cost_ex_tax=record["cost_parsed"],
                rule_code=record["rule_normalized"],
                row_number=int(record["row_number"]),
            )
            for record in df[~(missing_ean | missing_rule)].to_dict("records")
        ]

        logger.info("Loaded %d stock rows (%d dropped)", len(stock), len(df) - len(stock))
        return stock, report

    def _check_stock_quality(self, df: pd.DataFrame) -> DataQualityReport:
        policy = DiscountPolicy()
        checker = DataQualityChecker("Stock", required_columns=["code", "name", "purchase_cost"])

        checker.check_outliers("quantity", min_val=0, severity="warning", parser=self.number_parser.parse)
        checker.check_outliers("purchase_cost", min_val=0, severity="critical", parser=self.number_parser.parse)
        checker.check_invalid_values(
            "rule_code",
            validator=lambda value: self.text_normalizer.normalize(value) in policy,
            severity="info",
            description="rule codes without a discount rule (priced at break-even)",
        )

        return checker.run(df)
