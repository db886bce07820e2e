"""
Percentage arithmetic and JSON-safe conversion shared by the analytics modules.
"""
from __future__ import annotations

import datetime as dt
import math
from decimal import Decimal, ROUND_HALF_UP

import numpy as np
import pandas as pd


def round_half_away(value: Decimal | float, places: int = 2) -> float:
    """Round half away from zero (2.345 → 2.35, -2.345 → -2.35)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def pct_of_total(part, total, places: int = 2) -> float:
    """round(100 * part / total, places), exact for integer sums. 0.0 when total is 0."""
    if pd.isna(total) or pd.isna(part) or total == 0:
        return 0.0
    ratio = Decimal(int(part) * 100) / Decimal(int(total))
    return round_half_away(ratio, places)


def share_of_total(values: pd.Series, total=None, places: int = 2) -> pd.Series:
    """Percentage of total for each value; the total is taken once over the whole Series."""
    if total is None:
        total = values.sum()
    return values.map(lambda v: pct_of_total(v, total, places)).astype(float)


def sanitize_for_json(obj):
    """Native Python for json.dumps: numpy scalars unwrapped, dates as ISO, missing → None."""
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple, np.ndarray)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, pd.Timestamp):
        return None if pd.isna(obj) else obj.date().isoformat()
    if isinstance(obj, (dt.date, dt.datetime)):
        return obj.isoformat()
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return None
    if obj is not None and pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj


def frame_to_records(df: pd.DataFrame) -> list[dict]:
    """DataFrame rows as dicts of native Python values (missing → None)."""
    records = df.astype(object).where(df.notna(), None).to_dict("records")
    return [sanitize_for_json(r) for r in records]
