"""
Table audits — missing values, distinct counts, quantity summary.
"""
from __future__ import annotations

import pandas as pd

from nhs_dispensing.config import UNKNOWN_SENTINEL
from nhs_dispensing.data.schemas import Column, AUDITED_COLUMNS, CATEGORICAL_COLUMNS


def missing_value_audit(df: pd.DataFrame) -> dict:
    """Total records plus missing values per audited column.

    Works on the raw table (audits ``value``) as well as the clean one
    (audits ``products_dispensed``).
    """
    columns = [c for c in AUDITED_COLUMNS + (Column.VALUE,) if c.value in df.columns]
    audit = {"total_records": len(df)}
    for col in columns:
        audit[f"missing_{col.value}"] = int(df[col.value].isna().sum())
    return audit


def missing_values(df: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame([missing_value_audit(df)])


def distinct_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Distinct values per categorical column, not counting missing or the sentinel."""
    counts = {}
    for col in CATEGORICAL_COLUMNS:
        s = df[col.value]
        counts[f"{col.value}_count"] = int(s[s != UNKNOWN_SENTINEL].nunique())
    return pd.DataFrame([counts])


def quantity_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Record count, max, min, mean and total of products dispensed."""
    q = df[Column.PRODUCTS_DISPENSED.value]
    has_values = q.notna().any()
    return pd.DataFrame([{
        "record_count": len(df),
        "max_products_dispensed": int(q.max()) if has_values else None,
        "min_products_dispensed": int(q.min()) if has_values else None,
        "avg_products_dispensed": float(q.mean()) if has_values else None,
        "total_products_dispensed": int(q.sum()),
    }])
