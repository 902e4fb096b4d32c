"""Tests for reading the Heureka and warehouse workbooks."""

from __future__ import annotations

import logging

import pandas as pd
import pytest

from conftest import listing_row, stock_row
from feeds.heureka import CatalogLoadError, HeurekaCatalogLoader
from repricer.models import LADDER_SIZE


def test_listings_map_columns_and_keep_ladder_gaps(listings_workbook):
    path = listings_workbook(
        [
            listing_row("859123000001", price=150, link="https://heureka.cz/a", ladder=[140, None, "150,5", "n/a", 0, 160]),
            listing_row(8591230000029, price="199,90"),
        ]
    )

    listings, report = HeurekaCatalogLoader().load_listings(path)

    first, second = listings
    assert first.ean == "859123000001"
    assert first.sell_price_with_tax == 150
    assert first.link == "https://heureka.cz/a"
    assert len(first.ladder) == LADDER_SIZE
    assert first.ladder.slots[:6] == (140.0, None, 150.5, None, None, 160.0)
    assert first.lowest_ladder_price == 140
    assert first.row_number == 2

    assert second.ean == "8591230000029"
    assert second.sell_price_with_tax == pytest.approx(199.9)
    assert second.lowest_ladder_price is None
    assert report.source_name == "Listings"
    assert any(issue.column == "ladder" for issue in report.issues)


def test_listing_rows_without_content_are_ignored(listings_workbook):
    path = listings_workbook([listing_row("111", price=10), {20: 5.0}, listing_row("222", link="x")])

    listings, _ = HeurekaCatalogLoader().load_listings(path)

    assert [listing.ean for listing in listings] == ["111", "222"]


def test_duplicate_listing_eans_are_reported(listings_workbook):
    path = listings_workbook([listing_row("111", price=10), listing_row("111", price=12)])

    _, report = HeurekaCatalogLoader().load_listings(path)

    [duplicate] = [issue for issue in report.issues if issue.issue_type == "duplicate"]
    assert duplicate.count == 1


def test_stock_rows_without_ean_or_rule_are_dropped(stock_workbook):
    path = stock_workbook(
        [
            stock_row("X1", 8591230, "Hrnec", 2, "100,50", 1),
            stock_row("X2", None, "Bez EAN", 1, 10, "1"),
            stock_row("X3", "123", "Bez pravidla", 1, 10, None),
            stock_row(None, None, "Jen název", 1, 10, "1"),
            stock_row("X5", " 456 ", "Kniha", "n/a", 20, " 3 "),
        ]
    )

    stock, report = HeurekaCatalogLoader().load_stock(path)

    assert [s.code for s in stock] == ["X1", "X5"]
    x1, x5 = stock
    assert x1.ean == "8591230"
    assert x1.purchase_cost_ex_tax == 100.5
    assert x1.quantity_on_hand == 2
    assert x1.rule_code == "1"
    assert x1.row_number == 2
    assert x5.ean == "456"
    assert x5.quantity_on_hand == 0
    assert x5.rule_code == "3"

    dropped = {issue.column: issue.count for issue in report.issues if issue.issue_type == "dropped"}
    assert dropped == {"ean": 1, "rule_code": 1}


def test_dropped_stock_rows_are_logged(stock_workbook, caplog):
    path = stock_workbook(
        [
            stock_row("X1", "111", "A", 1, 10, "1"),
            stock_row("X2", None, "Bez EAN", 1, 10, "1"),
            stock_row("X3", "333", "Bez pravidla", 1, 10, None),
        ]
    )

    with caplog.at_level(logging.WARNING, logger="feeds.heureka"):
        HeurekaCatalogLoader().load_stock(path)

    warnings = [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "X2" in warnings[0]
    assert "row 3" in warnings[0]
    assert "X3" in warnings[1]
    assert "'333'" in warnings[1]


def test_legacy_xls_is_read_with_xlrd(tmp_path, monkeypatch):
    path = tmp_path / "sklad.xls"
    path.write_bytes(b"legacy workbook")
    raw = pd.DataFrame(
        [
            ["Code", "EAN", "Name", "", "", "Stock", "Cost", "", "", "Rule"],
            ["X1", 8591230000001.0, "Hrnec", "", "", 2.0, 100.0, "", "", 1.0],
        ],
        dtype=object,
    )
    calls = []

    def fake_read_excel(io, **kwargs):
        calls.append((io, kwargs))
        return raw

    monkeypatch.setattr(pd, "read_excel", fake_read_excel)

    stock, _ = HeurekaCatalogLoader().load_stock(path)

    [(io, kwargs)] = calls
    assert io == path
    assert kwargs["engine"] == "xlrd"
    [x1] = stock
    assert x1.ean == "8591230000001"
    assert x1.rule_code == "1"
    assert x1.purchase_cost_ex_tax == 100.0


def test_unknown_rule_codes_are_reported(stock_workbook):
    path = stock_workbook([stock_row("X1", "1", "A", 1, 10, "7"), stock_row("X2", "2", "B", 1, 10, "2")])

    _, report = HeurekaCatalogLoader().load_stock(path)

    [invalid] = [issue for issue in report.issues if issue.issue_type == "invalid_value"]
    assert invalid.column == "rule_code"
    assert invalid.count == 1


def test_load_all_returns_both_catalogs(listings_workbook, stock_workbook):
    listings_path = listings_workbook([listing_row("111", price=10, ladder=[9])])
    stock_path = stock_workbook([stock_row("X1", "111", "A", 1, 5, "1")])

    catalogs = HeurekaCatalogLoader().load_all(listings_path, stock_path)

    assert len(catalogs.listings) == 1
    assert len(catalogs.stock) == 1
    assert set(catalogs.quality_reports) == {"listings", "stock"}


def test_empty_worksheet_loads_nothing(tmp_path):
    from openpyxl import Workbook

    path = tmp_path / "empty.xlsx"
    Workbook().save(path)

    listings, report = HeurekaCatalogLoader().load_listings(path)

    assert listings == []
    assert report.total_rows == 0


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(FileNotFoundError):
        HeurekaCatalogLoader().load_stock(tmp_path / "nope.xlsx")


def test_unreadable_workbook_is_fatal(tmp_path):
    path = tmp_path / "broken.xlsx"
    path.write_text("not a workbook", encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        HeurekaCatalogLoader().load_listings(path)
