"""
Content analytics — content groups, contents and what was dispensed.
"""
from __future__ import annotations

from typing import Optional

import pandas as pd

from nhs_dispensing.config import TOP_N
from nhs_dispensing.data.schemas import Column, RowFilter
from nhs_dispensing.analytics.rollups import group_count, rollup


def content_group_counts(df: pd.DataFrame, where: Optional[RowFilter] = None) -> pd.DataFrame:
    """Rows with a content, per content group."""
    return group_count(df, Column.CONTENT_GROUP, column=Column.CONTENT, name="content_count", where=where)


def content_counts(df: pd.DataFrame, where: Optional[RowFilter] = None) -> pd.DataFrame:
    return group_count(df, Column.CONTENT, column=Column.CONTENT, name="content_count", where=where)


def content_occurrences(df: pd.DataFrame) -> pd.DataFrame:
    return group_count(df, Column.CONTENT, name="occurrence_count")


def top_contents(df: pd.DataFrame, n: int = TOP_N) -> pd.DataFrame:
    return rollup(df, Column.CONTENT, pct_name=None, n=n)


def contents_dispensed(df: pd.DataFrame, where: Optional[RowFilter] = None) -> pd.DataFrame:
    """Products dispensed per content group and content, largest first."""
    return rollup(df, [Column.CONTENT_GROUP, Column.CONTENT], pct_name=None, where=where)
