"""
Cleaning stage: period and quantity typing, text tidy-up, missing code/name pairs.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from nhs_dispensing.config import (
    UNKNOWN_SENTINEL, THOUSANDS_SEPARATOR, MALFORMED_ROW_TOLERANCE, PAIR_POLICY,
)
from nhs_dispensing.data.schemas import (
    Column, CLEAN_COLUMNS, TEXT_COLUMNS, PAIRED_COLUMNS, IDENTIFYING_COLUMNS,
    PairPolicy, RowIssue,
)
from nhs_dispensing.errors import CleaningError, ConfigError, FormatError, InconsistencyError

_PERIOD_RE = r"\d{4}-(?:0[1-9]|1[0-2])"
# Plain digits, or digits grouped in threes by the thousands separator
_QUANTITY_RE = rf"\d+|\d{{1,3}}(?:{re.escape(THOUSANDS_SEPARATOR)}\d{{3}})+"
_INT64_MAX = np.iinfo("int64").max


@dataclass
class CleaningResult:
    clean: pd.DataFrame
    issues: list[RowIssue] = field(default_factory=list)

    @property
    def format_issues(self) -> list[RowIssue]:
        return [i for i in self.issues if i.kind == "format"]

    @property
    def inconsistency_issues(self) -> list[RowIssue]:
        return [i for i in self.issues if i.kind == "inconsistency"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _identifiers(raw: pd.DataFrame, idx: int) -> dict[str, str | None]:
    """Original identifying fields of a raw row, for error reports."""
    out = {}
    for col in IDENTIFYING_COLUMNS:
        val = raw.at[idx, col.value] if col.value in raw.columns else None
        out[col.value] = None if pd.isna(val) else str(val)
    return out


def _format_issues(
    raw: pd.DataFrame,
    bad: pd.Series,
    column: Column,
    message: str,
) -> list[RowIssue]:
    issues = []
    for idx in raw.index[bad]:
        val = raw.at[idx, column.value]
        issues.append(RowIssue(
            row=int(idx),
            column=column.value,
            kind="format",
            value=None if pd.isna(val) else str(val),
            message=message,
            identifiers=_identifiers(raw, idx),
        ))
    return issues


def _strip_text(s: pd.Series) -> pd.Series:
    """Strip whitespace; blank strings become missing."""
    s = s.astype(object).str.strip()
    return s.replace("", np.nan)


def resolve_pair_policy(value: str | PairPolicy) -> PairPolicy:
    try:
        return PairPolicy(value)
    except ValueError:
        valid = ", ".join(p.value for p in PairPolicy)
        raise ConfigError(f"Invalid pair policy: {value!r} (expected one of {valid})")


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def parse_periods(raw: pd.DataFrame) -> tuple[pd.Series, list[RowIssue]]:
    """"YYYY-MM" text → first-of-month datetime; bad values become NaT."""
    text = raw[Column.YEAR_MONTH.value].astype("string").str.strip()
    valid = text.str.fullmatch(_PERIOD_RE).fillna(False).astype(bool)
    issues = _format_issues(raw, ~valid, Column.YEAR_MONTH, "period is not YYYY-MM")
    dates = pd.to_datetime(text.where(valid) + "-01", format="%Y-%m-%d", errors="coerce")
    return dates, issues


def parse_quantities(raw: pd.DataFrame) -> tuple[pd.Series, list[RowIssue]]:
    """ "1,200" → 1200 as nullable Int64; malformed or out-of-range values become <NA>."""
    text = raw[Column.VALUE.value].astype("string").str.strip()
    valid = text.str.fullmatch(_QUANTITY_RE).fillna(False).astype(bool)
    digits = text.str.replace(THOUSANDS_SEPARATOR, "", regex=False)

    too_large = pd.Series(False, index=text.index)
    too_large[valid] = [int(s) > _INT64_MAX for s in digits[valid]]

    issues = _format_issues(raw, ~valid, Column.VALUE, "quantity is not a non-negative integer")
    issues += _format_issues(raw, too_large, Column.VALUE, "quantity exceeds the 64-bit integer range")
    issues.sort(key=lambda i: i.row)

    ok = valid & ~too_large
    quantities = pd.Series(pd.NA, index=text.index, dtype="Int64")
    quantities[ok] = [int(s) for s in digits[ok]]
    return quantities, issues


def fill_missing_pairs(
    df: pd.DataFrame,
    raw: pd.DataFrame,
    policy: PairPolicy,
) -> list[RowIssue]:
    """Set code/name pairs that are both missing to the sentinel, in place.

    Half-missing pairs are returned as issues; with PairPolicy.FILL the missing
    half is also set to the sentinel.
    """
    issues = []
    for code_col, name_col in PAIRED_COLUMNS:
        code, name = code_col.value, name_col.value
        code_missing = df[code].isna()
        name_missing = df[name].isna()

        both = code_missing & name_missing
        if both.any():
            df.loc[both, [code, name]] = UNKNOWN_SENTINEL
            print(f"  Cleaning: {int(both.sum()):,} rows with no {code}/{name} set to '{UNKNOWN_SENTINEL}'")

        partial = code_missing ^ name_missing
        for idx in df.index[partial]:
            missing, present = (code, name) if code_missing[idx] else (name, code)
            issues.append(RowIssue(
                row=int(idx),
                column=missing,
                kind="inconsistency",
                value=None,
                message=f"{missing} missing while {present} is {df.at[idx, present]!r}",
                identifiers=_identifiers(raw, idx),
            ))

        if policy == PairPolicy.FILL and partial.any():
            df.loc[partial & code_missing, code] = UNKNOWN_SENTINEL
            df.loc[partial & name_missing, name] = UNKNOWN_SENTINEL
    return issues


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------

def clean_dispensing_data(
    raw: pd.DataFrame,
    *,
    tolerance: int = MALFORMED_ROW_TOLERANCE,
    pair_policy: str | PairPolicy = PAIR_POLICY,
) -> CleaningResult:
    """Derive the clean table from the raw one; ``raw`` is never modified.

    Rules, in order: period text → date, quantity text → integer, text
    tidy-up, missing code/name pairs. Malformed period/quantity rows are
    collected; more than ``tolerance`` of them raises FormatError, otherwise
    their cells are left missing and the rows are kept. Half-missing pairs
    are handled according to ``pair_policy``.
    """
    policy = resolve_pair_policy(pair_policy)
    if tolerance < 0:
        raise ConfigError(f"Malformed row tolerance must be >= 0, got {tolerance}")

    raw = raw.reset_index(drop=True)
    df = raw.copy(deep=True)

    dates, period_issues = parse_periods(raw)
    quantities, quantity_issues = parse_quantities(raw)
    format_issues = period_issues + quantity_issues

    bad_rows = {i.row for i in format_issues}
    if len(bad_rows) > tolerance:
        raise FormatError(
            f"{len(bad_rows):,} malformed rows exceed the tolerance of {tolerance:,}",
            format_issues,
        )
    for issue in format_issues:
        print(f"  Warning: {issue}")

    periods = dates.dropna().unique()
    if len(periods) > 1:
        labels = ", ".join(sorted(f"{p:%Y-%m}" for p in pd.DatetimeIndex(periods)))
        raise FormatError(f"Expected a single reporting period, found {len(periods)}: {labels}")

    df[Column.YEAR_MONTH.value] = dates
    df[Column.PRODUCTS_DISPENSED.value] = quantities
    df = df.drop(columns=[Column.VALUE.value])

    for col in TEXT_COLUMNS:
        df[col.value] = _strip_text(df[col.value])

    pair_issues = fill_missing_pairs(df, raw, policy)
    if pair_issues and policy == PairPolicy.RAISE:
        raise InconsistencyError(
            f"{len(pair_issues):,} rows have a code/name pair that is only partially missing",
            pair_issues,
        )
    for issue in pair_issues:
        print(f"  Warning: {issue}")

    if len(df) != len(raw):
        raise CleaningError(f"Row count changed during cleaning: {len(raw):,} → {len(df):,}")

    clean = df[[c.value for c in CLEAN_COLUMNS]]
    return CleaningResult(clean=clean, issues=format_issues + pair_issues)
