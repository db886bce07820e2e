from __future__ import annotations

import datetime as dt

import pandas as pd

from nhs_dispensing.data.schemas import (
    CLEAN_COLUMNS,
    SOURCE_COLUMNS,
    Column,
    DispensingRecord,
    RowFilter,
    RowIssue,
)


def test_column_groups():
    assert len(SOURCE_COLUMNS) == 18
    assert SOURCE_COLUMNS[-1] is Column.VALUE
    assert Column.VALUE not in CLEAN_COLUMNS
    assert CLEAN_COLUMNS[-1] is Column.PRODUCTS_DISPENSED


def test_record_from_row_converts_pandas_values():
    row = {c.value: None for c in CLEAN_COLUMNS}
    row.update({
        "year_month": pd.Timestamp("2025-09-01"),
        "contractor_name": "BOOTS",
        "address_2": float("nan"),
        "products_dispensed": pd.array([1200], dtype="Int64")[0],
    })
    record = DispensingRecord.from_row(row)
    assert record.year_month == dt.date(2025, 9, 1)
    assert record.address_2 is None
    assert record.products_dispensed == 1200
    assert record.to_dict()["contractor_name"] == "BOOTS"


def test_row_issue_str_quotes_identifiers():
    issue = RowIssue(
        row=7,
        column="value",
        kind="format",
        value="abc",
        message="quantity is not a non-negative integer",
        identifiers={"contractor_code": "FA001", "postcode": None},
    )
    assert str(issue) == "row 7 [value] quantity is not a non-negative integer (contractor_code=FA001)"


def test_row_filter():
    df = pd.DataFrame({"contractor_name": ["BOOTS", "OTHER", "BOOTS THE CHEMIST"]})
    where = RowFilter(Column.CONTRACTOR_NAME, ("BOOTS", "BOOTS THE CHEMIST"))
    assert where.mask(df).tolist() == [True, False, True]
    assert len(where.apply(df)) == 2
    assert where.label == "contractor_name in (BOOTS, BOOTS THE CHEMIST)"
