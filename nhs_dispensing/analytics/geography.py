"""
Geography analytics — ICBs, LPCs and postcodes.
"""
from __future__ import annotations

import pandas as pd

from nhs_dispensing.config import TOP_N
from nhs_dispensing.data.schemas import Column
from nhs_dispensing.analytics.rollups import group_distinct, rollup


def icb_overview(df: pd.DataFrame) -> pd.DataFrame:
    """LPCs and pharmacies overseen by each ICB, most pharmacies first."""
    return group_distinct(
        df,
        Column.ICB_NAME,
        {"lpc_count": Column.LPC_NAME, "pharmacy_count": Column.CONTRACTOR_NAME},
        sort_by="pharmacy_count",
    )


def icb_totals(df: pd.DataFrame) -> pd.DataFrame:
    return rollup(df, Column.ICB_NAME, pct_name=None)


def icb_share(df: pd.DataFrame) -> pd.DataFrame:
    """Each ICB's products dispensed and share of the national total."""
    return rollup(df, Column.ICB_NAME, name="icb_items")


def lpc_pharmacies(df: pd.DataFrame) -> pd.DataFrame:
    return group_distinct(
        df,
        [Column.LPC_NAME, Column.LPC_CODE],
        {"pharmacy_count": Column.CONTRACTOR_NAME},
    )


def top_postcodes(df: pd.DataFrame, n: int = TOP_N) -> pd.DataFrame:
    """Postcodes (with their ICB) by products dispensed and share of the national total."""
    return rollup(df, [Column.POSTCODE, Column.ICB_NAME], n=n)
