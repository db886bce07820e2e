"""
Group roll-ups: sums, counts, percentage of total, top-N ranking.

Groups keep missing keys and first-appearance order, and every sort is
stable, so ties stay in input order.
"""
from __future__ import annotations

from typing import Optional

import pandas as pd

from nhs_dispensing.analytics.common import share_of_total
from nhs_dispensing.data.schemas import Column, RowFilter

TOTAL = "total_products_dispensed"
PCT = "pct_of_national_total"


def _names(keys) -> list[str]:
    if isinstance(keys, (Column, str)):
        keys = [keys]
    return [k.value if isinstance(k, Column) else k for k in keys]


def _filtered(df: pd.DataFrame, where: Optional[RowFilter]) -> pd.DataFrame:
    return df if where is None else where.apply(df)


def rank_desc(df: pd.DataFrame, by: str, n: int | None = None) -> pd.DataFrame:
    """Stable descending sort on one column, optionally truncated to n rows."""
    out = df.sort_values(by, ascending=False, kind="mergesort")
    if n is not None:
        out = out.head(n)
    return out.reset_index(drop=True)


def group_sum(
    df: pd.DataFrame,
    keys,
    *,
    name: str = TOTAL,
    where: Optional[RowFilter] = None,
) -> pd.DataFrame:
    """Sum products_dispensed per group (unsorted, first-appearance order)."""
    keys = _names(keys)
    base = _filtered(df, where)
    return (
        base.groupby(keys, sort=False, dropna=False)[Column.PRODUCTS_DISPENSED.value]
        .sum()
        .astype("int64")
        .reset_index(name=name)
    )


def rollup(
    df: pd.DataFrame,
    keys,
    *,
    name: str = TOTAL,
    pct_name: str | None = PCT,
    n: int | None = None,
    where: Optional[RowFilter] = None,
) -> pd.DataFrame:
    """Group, sum, add percentage of the grand total, sort descending, truncate.

    The grand total is taken once over every group before truncation, so a
    top-N table shows each group's share of the whole table.
    """
    grouped = group_sum(df, keys, name=name, where=where)
    if pct_name:
        grouped[pct_name] = share_of_total(grouped[name])
    return rank_desc(grouped, name, n)


def group_count(
    df: pd.DataFrame,
    keys,
    *,
    column: Column | None = None,
    name: str = "count",
    where: Optional[RowFilter] = None,
) -> pd.DataFrame:
    """Rows per group, or non-missing ``column`` values per group, descending."""
    keys = _names(keys)
    grouped = _filtered(df, where).groupby(keys, sort=False, dropna=False)
    counts = grouped.size() if column is None else grouped[column.value].count()
    return rank_desc(counts.astype("int64").reset_index(name=name), name)


def group_distinct(
    df: pd.DataFrame,
    keys,
    counts: dict[str, Column],
    *,
    sort_by: str | None = None,
    extra_sums: dict[str, Column] | None = None,
) -> pd.DataFrame:
    """Distinct non-missing values per group for each output column in ``counts``."""
    keys = _names(keys)
    agg = {out: (col.value, "nunique") for out, col in counts.items()}
    for out, col in (extra_sums or {}).items():
        agg[out] = (col.value, "sum")
    out = df.groupby(keys, sort=False, dropna=False).agg(**agg).reset_index()
    for col in agg:
        out[col] = out[col].astype("int64")
    return rank_desc(out, sort_by or next(iter(counts)))
