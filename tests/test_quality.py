"""Tests for the data quality checker."""

from __future__ import annotations

import pandas as pd

from repricer.quality import DataQualityChecker


def test_missing_values_only_in_required_columns():
    df = pd.DataFrame({"ean": ["1", "", None, "4"], "ladder_01": [None] * 4})

    report = DataQualityChecker("Listings", required_columns=["ean"]).run(df)

    [issue] = report.issues
    assert issue.column == "ean"
    assert issue.count == 2
    assert issue.severity == "critical"
    assert report.critical_issues == [issue]
    assert issue.description == "2 blank values (50.0%)"


def test_outliers_with_custom_parser():
    df = pd.DataFrame({"cost": ["10", "-5", "abc", "-1,5"]})

    report = (
        DataQualityChecker("Stock", required_columns=[])
        .check_outliers("cost", min_val=0, parser=lambda v: float(str(v).replace(",", ".")) if v != "abc" else 0.0)
        .run(df)
    )

    [issue] = report.issues
    assert issue.count == 2
    assert issue.sample_values == ["-5", "-1,5"]


def test_duplicates_ignore_blank_keys():
    df = pd.DataFrame({"ean": ["1", "1", "", "", "2"]})

    report = DataQualityChecker("Listings", required_columns=[]).check_duplicates(["ean"]).run(df)

    [issue] = report.issues
    assert issue.count == 1
    assert issue.sample_values == ["1"]


def test_invalid_values_skip_blanks():
    df = pd.DataFrame({"rule": ["1", "9", None, " ", "x"]})

    report = (
        DataQualityChecker("Stock", required_columns=[])
        .check_invalid_values("rule", validator=lambda v: v in {"1", "2"}, severity="info")
        .run(df)
    )

    [issue] = report.issues
    assert issue.count == 2
    assert issue.severity == "info"
    assert report.critical_issues == []


def test_empty_frame_has_no_issues():
    report = DataQualityChecker("Stock").run(pd.DataFrame({"ean": []}))
    assert report.issues == []
    assert report.total_rows == 0
