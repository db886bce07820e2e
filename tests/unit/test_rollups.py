from __future__ import annotations

import pandas as pd
import pytest

from nhs_dispensing.analytics.common import pct_of_total, round_half_away, sanitize_for_json, share_of_total
from nhs_dispensing.analytics.rollups import PCT, TOTAL, group_count, group_sum, rank_desc, rollup
from nhs_dispensing.data.schemas import Column, RowFilter


def frame(pairs: list[tuple[str, int]]) -> pd.DataFrame:
    return pd.DataFrame({
        "content": [k for k, _ in pairs],
        "products_dispensed": pd.array([v for _, v in pairs], dtype="Int64"),
    })


@pytest.mark.parametrize(
    "part, total, expected",
    [(300, 1000, 30.0), (1, 3, 33.33), (2, 3, 66.67), (1, 8, 12.5), (1, 200, 0.5), (5, 0, 0.0)],
)
def test_pct_of_total(part, total, expected):
    assert pct_of_total(part, total) == expected


def test_round_half_away_from_zero():
    assert round_half_away(2.345) == 2.35
    assert round_half_away(2.5, 0) == 3.0
    assert round_half_away(-2.345) == -2.35


def test_share_of_total_two_groups():
    assert share_of_total(pd.Series([300, 700])).tolist() == [30.0, 70.0]


def test_share_of_total_sums_to_hundred():
    shares = share_of_total(pd.Series([1, 1, 1, 4, 9, 13]))
    assert abs(shares.sum() - 100) <= 0.01 * len(shares)


def test_group_sum_keeps_first_appearance_order():
    out = group_sum(frame([("b", 1), ("a", 2), ("b", 3)]), Column.CONTENT)
    assert out["content"].tolist() == ["b", "a"]
    assert out[TOTAL].tolist() == [4, 2]


def test_group_sum_keeps_missing_keys():
    df = frame([("a", 1), ("b", 2)])
    df.loc[1, "content"] = None
    out = group_sum(df, Column.CONTENT)
    assert len(out) == 2
    assert out[TOTAL].sum() == 3


def test_rollup_sorted_descending_with_share():
    out = rollup(frame([("a", 300), ("b", 700)]), Column.CONTENT)
    assert out["content"].tolist() == ["b", "a"]
    assert out[TOTAL].tolist() == [700, 300]
    assert out[PCT].tolist() == [70.0, 30.0]


def test_rollup_ties_keep_input_order():
    out = rollup(frame([("x", 5), ("y", 10), ("z", 5)]), Column.CONTENT, pct_name=None)
    assert out["content"].tolist() == ["y", "x", "z"]
    assert PCT not in out.columns


def test_rollup_top_n_shares_use_whole_total():
    pairs = [(f"c{i:02d}", 10) for i in range(12)]
    out = rollup(frame(pairs), Column.CONTENT, n=10)
    assert len(out) == 10
    assert out["content"].tolist() == [f"c{i:02d}" for i in range(10)]
    assert (out[PCT] == 8.33).all()


def test_rollup_top_n_shorter_table():
    out = rollup(frame([("a", 1), ("b", 2)]), Column.CONTENT, n=10)
    assert len(out) == 2


def test_rollup_with_filter():
    df = frame([("a", 1), ("b", 2), ("a", 3)])
    out = rollup(df, Column.CONTENT, where=RowFilter(Column.CONTENT, ("a",)))
    assert out.to_dict("records") == [{"content": "a", TOTAL: 4, PCT: 100.0}]


def test_group_count_rows_and_values():
    df = frame([("a", 1), ("b", 2), ("a", 3)])
    out = group_count(df, Column.CONTENT, name="n")
    assert out.to_dict("records") == [{"content": "a", "n": 2}, {"content": "b", "n": 1}]


def test_rank_desc_is_stable():
    df = pd.DataFrame({"k": ["p", "q", "r", "s"], "v": [1, 2, 1, 2]})
    assert rank_desc(df, "v")["k"].tolist() == ["q", "s", "p", "r"]
    assert rank_desc(df, "v", 3)["k"].tolist() == ["q", "s", "p"]


def test_sanitize_for_json():
    out = sanitize_for_json({
        "period": pd.Timestamp("2025-09-01"),
        "count": pd.Series([3]).iloc[0],
        "mean": float("nan"),
        "missing": pd.NA,
        "names": ("a", None),
    })
    assert out == {"period": "2025-09-01", "count": 3, "mean": None, "missing": None, "names": ["a", None]}
    assert type(out["count"]) is int
