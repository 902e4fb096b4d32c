"""
Data quality checks for the loaded exports.

Each loader runs a DataQualityChecker over its tabulated rows so operators
can see what was blank, dropped or out of range before trusting the prices.
"""

from dataclasses import dataclass, field
from typing import Callable, Any
import pandas as pd


@dataclass
class DataQualityIssue:
    """A single data quality issue found in the data."""

    column: str
    issue_type: str  # "missing", "dropped", "invalid_value", "outlier" or "duplicate"
    severity: str  # "critical", "warning", "info"
    count: int
    percentage: float
    sample_values: list[Any] = field(default_factory=list)
    description: str = ""


Check = Callable[[pd.DataFrame], list[DataQualityIssue]]


@dataclass
class DataQualityReport:
    """Issues found in one export."""

    source_name: str
    total_rows: int
    issues: list[DataQualityIssue] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "critical"]

    def add(self, issue: DataQualityIssue) -> None:
        self.issues.append(issue)


def _flag(
    total: int,
    column: str,
    issue_type: str,
    severity: str,
    offenders: pd.Series,
    description: str,
) -> list[DataQualityIssue]:
    """One issue for the offending values, or nothing when there are none."""
    count = len(offenders)
    if count == 0:
        return []
    return [
        DataQualityIssue(
            column=column,
            issue_type=issue_type,
            severity=severity,
            count=count,
            percentage=(count / total) * 100 if total else 0.0,
            sample_values=offenders.head(5).tolist(),
            description=description.format(count=count),
        )
    ]


def _missing_severity(percentage: float) -> str:
    if percentage > 20:
        return "critical"
    if percentage > 5:
        return "warning"
    return "info"


class DataQualityChecker:
    """
    Data quality checker for one export.

    Always checks the required columns for blanks; add duplicate, invalid
    value and range checks with the check_* builders, or any callable with
    add_check().

    Blank means NaN or an empty/whitespace string, since cells are tabulated
    as text before parsing.
    """

    def __init__(self, source_name: str, required_columns: list[str] | None = None):
        self.source_name = source_name
        # None means every column is required
        self.required_columns = required_columns
        self._checks: list[Check] = [self._check_missing_values]

    def add_check(self, check_fn: Check) -> "DataQualityChecker":
        self._checks.append(check_fn)
        return self

    @staticmethod
    def _blank_mask(values: pd.Series) -> pd.Series:
        return values.isna() | values.astype(str).str.strip().eq("")

    def _check_missing_values(self, df: pd.DataFrame) -> list[DataQualityIssue]:
        columns = self.required_columns if self.required_columns is not None else list(df.columns)
        issues = []
        for col in columns:
            if col not in df.columns:
                continue
            blank = self._blank_mask(df[col])
            missing = int(blank.sum())
            pct = (missing / len(df)) * 100 if len(df) else 0.0
            issues += _flag(
                len(df), col, "missing", _missing_severity(pct), df.loc[blank, col],
                f"{missing:,} blank values ({pct:.1f}%)",
            )
        return issues

    def check_duplicates(
        self, key_columns: list[str], severity: str = "warning", ignore_blank: bool = True
    ) -> "DataQualityChecker":
        """Flag rows whose key repeats an earlier row; the first occurrence is kept."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            keyed = df
            if ignore_blank:
                blank = pd.Series(False, index=df.index)
                for col in key_columns:
                    blank |= self._blank_mask(df[col])
                keyed = df[~blank]

            repeated = keyed.duplicated(subset=key_columns, keep="first")
            return _flag(
                len(df), ", ".join(key_columns), "duplicate", severity,
                keyed.loc[repeated, key_columns[0]],
                "{count:,} rows repeat an earlier key and will never be matched",
            )

        return self.add_check(check)

    def check_invalid_values(
        self,
        column: str,
        validator: Callable[[Any], bool],
        severity: str = "warning",
        description: str = "invalid values",
    ) -> "DataQualityChecker":
        """Flag non-blank values the validator rejects."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column not in df.columns:
                return []
            present = df.loc[~self._blank_mask(df[column]), column]
            rejected = present[~present.apply(validator).astype(bool)]
            return _flag(len(df), column, "invalid_value", severity, rejected, "{count:,} " + description)

        return self.add_check(check)

    def check_outliers(
        self,
        column: str,
        min_val: float | None = None,
        max_val: float | None = None,
        severity: str = "warning",
        parser: Callable[[Any], float] | None = None,
    ) -> "DataQualityChecker":
        """Flag values that parse to a number outside [min_val, max_val]."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column not in df.columns:
                return []
            values = df[column].apply(parser) if parser else pd.to_numeric(df[column], errors="coerce")
            out_of_range = pd.Series(False, index=df.index)
            if min_val is not None:
                out_of_range |= values < min_val
            if max_val is not None:
                out_of_range |= values > max_val
            return _flag(
                len(df), column, "outlier", severity, df.loc[out_of_range, column],
                "{count:,} values outside expected range",
            )

        return self.add_check(check)

    def run(self, df: pd.DataFrame) -> DataQualityReport:
        """Run all checks and return a quality report."""
        report = DataQualityReport(source_name=self.source_name, total_rows=len(df))
        for check_fn in self._checks:
            report.issues.extend(check_fn(df))
        return report
