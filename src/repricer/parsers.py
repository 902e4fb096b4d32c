"""
Cell parsers for the two spreadsheet exports.

Both exports come out of office tooling, so the same column can hold:
- numbers typed as text, with decimal commas or thousands spaces
- EANs stored as numbers (legacy workbooks return them as floats)
- blank cells read back as NaN
"""

import numbers
import re

import pandas as pd


class NumberParser:
    """
    Lenient numeric parser for price and quantity cells.

    Anything that cannot be read as a number becomes `default`, so a single
    bad cell never stops a load.
    """

    # \s covers the non-breaking spaces office tools use as thousands separators
    _SPACES = re.compile(r"\s+")

    def __init__(self, default: float = 0.0):
        self.default = default

    def parse(self, value) -> float:
        """Parse a single cell value."""
        if value is None or isinstance(value, bool):
            return self.default
        if isinstance(value, numbers.Real):
            if pd.isna(value):
                return self.default
            return float(value)

        text = self._SPACES.sub("", str(value))
        if not text:
            return self.default

        # The later separator is the decimal point: "1.234,50" and "1,234.50" -> "1234.50"
        if "," in text and "." in text:
            if text.rfind(",") > text.rfind("."):
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        else:
            text = text.replace(",", ".")

        try:
            result = float(text)
        except ValueError:
            return self.default
        if pd.isna(result):
            return self.default
        return result

    def parse_optional_price(self, value) -> float | None:
        """Parse a ladder cell: positive price or None."""
        result = self.parse(value)
        return result if result > 0 else None

    def parse_series(self, series: pd.Series) -> pd.Series:
        return series.apply(self.parse)


class EANNormalizer:
    """
    Turns EAN cells into comparable strings.

    Handles:
    - 8591230000001.0 -> "8591230000001" (numeric cells from .xls files)
    - surrounding whitespace
    - blank/NaN -> ""

    Case folding is left to the matcher so the emitted EAN keeps the source spelling.
    """

    def normalize(self, ean) -> str:
        if ean is None:
            return ""
        if isinstance(ean, float):
            if pd.isna(ean):
                return ""
            if ean.is_integer():
                return str(int(ean))
        return str(ean).strip()

    def normalize_series(self, series: pd.Series) -> pd.Series:
        return series.apply(self.normalize)


class TextNormalizer:
    """Renders free-text cells (codes, names, links, rules) as strings."""

    def __init__(self, strip: bool = True):
        self.strip = strip

    def normalize(self, value) -> str:
        if value is None:
            return ""
        if isinstance(value, float):
            if pd.isna(value):
                return ""
            # Codes typed as numbers come back as floats from legacy workbooks
            if value.is_integer():
                return str(int(value))
        result = str(value)
        return result.strip() if self.strip else result

    def normalize_series(self, series: pd.Series) -> pd.Series:
        return series.apply(self.normalize)
