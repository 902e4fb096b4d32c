"""Shared fixtures: import paths and small workbook builders."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from openpyxl import Workbook

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for path in (PROJECT_ROOT, PROJECT_ROOT / "src"):
    path_str = str(path)
    if path_str not in sys.path:
        # Tests import `repricer`, `feeds` and `reprice` without installing the package.
        sys.path.insert(0, path_str)

from repricer.models import CompetitorLadder, Listing, Stock  # noqa: E402


LISTING_HEADER = {6: "EAN", 9: "Link", 12: "Price"}
STOCK_HEADER = {1: "Code", 2: "EAN", 3: "Name", 6: "Stock", 7: "Cost", 10: "Rule"}


def _write_workbook(path: Path, header: dict[int, str], rows: list[dict[int, object]]) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    for column, title in header.items():
        sheet.cell(row=1, column=column, value=title)
    for offset, row in enumerate(rows, start=2):
        for column, value in row.items():
            sheet.cell(row=offset, column=column, value=value)
    workbook.save(path)
    return path


def listing_row(ean, price=None, link=None, ladder=()) -> dict[int, object]:
    """Cells for one Heureka row; ladder values start at column P (16)."""
    row: dict[int, object] = {6: ean, 9: link, 12: price}
    for offset, value in enumerate(ladder):
        row[16 + offset] = value
    return {column: value for column, value in row.items() if value is not None}


def stock_row(code, ean, name, quantity, cost, rule) -> dict[int, object]:
    row = {1: code, 2: ean, 3: name, 6: quantity, 7: cost, 10: rule}
    return {column: value for column, value in row.items() if value is not None}


@pytest.fixture
def listings_workbook(tmp_path: Path):
    def build(rows: list[dict[int, object]], name: str = "heureka.xlsx") -> Path:
        return _write_workbook(tmp_path / name, LISTING_HEADER, rows)

    return build


@pytest.fixture
def stock_workbook(tmp_path: Path):
    def build(rows: list[dict[int, object]], name: str = "sklad.xlsx") -> Path:
        return _write_workbook(tmp_path / name, STOCK_HEADER, rows)

    return build


def make_listing(ean: str, ladder=(), price: float = 0.0, link: str = "") -> Listing:
    return Listing(ean=ean, sell_price_with_tax=price, link=link, ladder=CompetitorLadder(ladder))


def make_stock(
    ean: str,
    rule: str = "1",
    cost: float = 100.0,
    quantity: float = 1,
    name: str = "Hrnec",
    code: str = "X1",
) -> Stock:
    return Stock(
        code=code,
        name=name,
        ean=ean,
        quantity_on_hand=quantity,
        purchase_cost_ex_tax=cost,
        rule_code=rule,
    )
