"""
Pharmacy analytics — contractors and pharmacy account types.
"""
from __future__ import annotations

from typing import Optional

import pandas as pd

from nhs_dispensing.config import TOP_N
from nhs_dispensing.data.schemas import Column, RowFilter
from nhs_dispensing.analytics.rollups import PCT, TOTAL, group_distinct, rollup


def contractor_account_types(df: pd.DataFrame) -> pd.DataFrame:
    """Distinct contractor / account type pairs, by contractor name."""
    cols = [Column.CONTRACTOR_NAME.value, Column.PHARMACY_ACCOUNT_TYPE.value]
    return (
        df[cols]
        .drop_duplicates()
        .sort_values(Column.CONTRACTOR_NAME.value, kind="mergesort", na_position="last")
        .reset_index(drop=True)
    )


def account_type_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Pharmacies and products dispensed per account type."""
    return group_distinct(
        df,
        Column.PHARMACY_ACCOUNT_TYPE,
        {"pharmacy_count": Column.CONTRACTOR_NAME},
        extra_sums={TOTAL: Column.PRODUCTS_DISPENSED},
    )


def contractor_ranking(
    df: pd.DataFrame,
    *,
    n: int = TOP_N,
    where: Optional[RowFilter] = None,
    with_share: bool = True,
) -> pd.DataFrame:
    """Top contractors (with account type) by products dispensed."""
    return rollup(
        df,
        [Column.CONTRACTOR_NAME, Column.PHARMACY_ACCOUNT_TYPE],
        pct_name=PCT if with_share else None,
        n=n,
        where=where,
    )
