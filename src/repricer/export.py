"""Writing repriced items to the output workbook."""

import logging
from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .models import RepricedItem

logger = logging.getLogger(__name__)


# Output header -> RepricedItem attribute; order is fixed
OUTPUT_COLUMNS = {
    "Code": "code",
    "Name": "name",
    "EAN": "ean",
    "Quantity": "quantity_on_hand",
    "PurchaseCost": "purchase_cost_ex_tax",
    "NewSellPriceWithTax": "new_sell_price_with_tax",
    "NewSellPriceExTax": "new_sell_price_ex_tax",
    "Discount": "discount_percent",
    "RuleCode": "rule_code",
    "LadderRank": "ladder_rank",
    "LowestLadderPriceWithTax": "lowest_ladder_price_with_tax",
    "Link": "link",
}

SHEET_NAME = "Result"
MAX_COLUMN_WIDTH = 80


def results_to_frame(items: Sequence[RepricedItem]) -> pd.DataFrame:
    """Tabulate items in the output column order."""
    rows = [
        {header: getattr(item, attribute) for header, attribute in OUTPUT_COLUMNS.items()}
        for item in items
    ]
    return pd.DataFrame(rows, columns=list(OUTPUT_COLUMNS))


def _fit_columns(worksheet) -> None:
    for column_cells in worksheet.columns:
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
        letter = get_column_letter(column_cells[0].column)
        worksheet.column_dimensions[letter].width = min(width + 2, MAX_COLUMN_WIDTH)


def _write_workbook(items: Sequence[RepricedItem], target, placeholder: str) -> None:
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        if not items:
            pd.DataFrame([[placeholder]]).to_excel(
                writer, sheet_name=SHEET_NAME, header=False, index=False
            )
            return

        results_to_frame(items).to_excel(writer, sheet_name=SHEET_NAME, index=False)
        worksheet = writer.sheets[SHEET_NAME]
        for cell in worksheet[1]:
            cell.font = Font(bold=True)
        _fit_columns(worksheet)


def write_results(
    items: Sequence[RepricedItem],
    output_path: str | Path,
    placeholder: str = "No data to display",
) -> Path:
    """
    Write items to an .xlsx workbook.

    With no items the sheet holds a single placeholder cell instead of a
    header row.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    _write_workbook(items, path, placeholder)

    if items:
        logger.info("Wrote %d rows to %s", len(items), path)
    else:
        logger.info("No repriced items, wrote placeholder to %s", path)
    return path


def results_to_xlsx_bytes(items: Sequence[RepricedItem], placeholder: str = "No data to display") -> bytes:
    """Same workbook as write_results, returned in memory (for downloads)."""
    buffer = BytesIO()
    _write_workbook(items, buffer, placeholder)
    return buffer.getvalue()
