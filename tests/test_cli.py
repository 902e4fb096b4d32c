"""Tests for the interactive runner."""

from __future__ import annotations

from openpyxl import load_workbook

import reprice
from conftest import listing_row, stock_row


def _answers(*values):
    iterator = iter(values)
    return lambda prompt: next(iterator)


def test_full_run_writes_output(tmp_path, listings_workbook, stock_workbook, capsys):
    listings_path = listings_workbook([listing_row("859123000001", price=150, ladder=[140, 150, 160])])
    stock_path = stock_workbook(
        [
            stock_row("X1", "8591230", "Hrnec", 2, 100, "1"),
            stock_row("X2", "000", "Miska", 1, 50, "1"),
        ]
    )
    output_path = tmp_path / "vysledek.xlsx"

    status = reprice.main(_answers(str(listings_path), str(stock_path), str(output_path), ""))

    assert status == 0
    assert "Matched 1 of 2 stock rows (1 unmatched)" in capsys.readouterr().out
    sheet = load_workbook(output_path).active
    assert sheet["A2"].value == "X1"
    assert sheet["F2"].value == 141
    assert sheet.max_row == 2


def test_missing_input_reports_error(tmp_path, capsys):
    status = reprice.main(_answers(str(tmp_path / "missing.xlsx")))

    assert status == 1
    out = capsys.readouterr().out
    assert "Error: File not found" in out
    assert "Detail:" in out


def test_unknown_strategy_is_an_error(tmp_path, listings_workbook, stock_workbook, capsys):
    listings_path = listings_workbook([listing_row("1", price=1)])
    stock_path = stock_workbook([stock_row("X1", "1", "A", 1, 1, "1")])

    status = reprice.main(_answers(str(listings_path), str(stock_path), str(tmp_path / "o.xlsx"), "cheapest"))

    assert status == 1
    assert "Unknown repricing strategy" in capsys.readouterr().out


def test_prompt_helpers_use_defaults():
    assert str(reprice.prompt_input_path("?", "heureka.xlsx", _answers(""))) == "heureka.xlsx"
    assert str(reprice.prompt_output_path("?", "out.xlsx", _answers("  "))) == "out.xlsx"
    assert reprice.prompt_strategy(_answers("")) == "rules"
    assert reprice.prompt_strategy(_answers("2")) == "second_rung"
    assert reprice.prompt_strategy(_answers("Second_Rung")) == "second_rung"
