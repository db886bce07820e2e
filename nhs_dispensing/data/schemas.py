"""
Column schema, dispensing record, row issues and row filters.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

import pandas as pd


class Column(str, Enum):
    """Source columns, in file order."""
    YEAR_MONTH = "year_month"
    ICB_CODE = "icb_code"
    ICB_NAME = "icb_name"
    HWB_CODE = "hwb_code"
    HWB_NAME = "hwb_name"
    LPC_CODE = "lpc_code"
    LPC_NAME = "lpc_name"
    PHARMACY_ACCOUNT_TYPE = "pharmacy_account_type"
    CONTRACTOR_CODE = "contractor_code"
    CONTRACTOR_NAME = "contractor_name"
    ADDRESS_1 = "address_1"
    ADDRESS_2 = "address_2"
    ADDRESS_3 = "address_3"
    ADDRESS_4 = "address_4"
    POSTCODE = "postcode"
    CONTENT_GROUP = "content_group"
    CONTENT = "content"
    VALUE = "value"
    # Derived by cleaning, replaces VALUE in the clean table
    PRODUCTS_DISPENSED = "products_dispensed"


SOURCE_COLUMNS: tuple[Column, ...] = tuple(c for c in Column if c is not Column.PRODUCTS_DISPENSED)

CLEAN_COLUMNS: tuple[Column, ...] = tuple(
    c for c in Column if c is not Column.VALUE
)

TEXT_COLUMNS: tuple[Column, ...] = tuple(
    c for c in SOURCE_COLUMNS if c not in (Column.YEAR_MONTH, Column.VALUE)
)

CATEGORICAL_COLUMNS: tuple[Column, ...] = (
    Column.ICB_CODE,
    Column.ICB_NAME,
    Column.HWB_CODE,
    Column.HWB_NAME,
    Column.LPC_CODE,
    Column.LPC_NAME,
    Column.PHARMACY_ACCOUNT_TYPE,
    Column.CONTRACTOR_CODE,
    Column.CONTRACTOR_NAME,
    Column.POSTCODE,
    Column.CONTENT_GROUP,
    Column.CONTENT,
)

AUDITED_COLUMNS: tuple[Column, ...] = CATEGORICAL_COLUMNS + (Column.PRODUCTS_DISPENSED,)

PAIRED_COLUMNS: tuple[tuple[Column, Column], ...] = (
    (Column.HWB_CODE, Column.HWB_NAME),
    (Column.LPC_CODE, Column.LPC_NAME),
)

IDENTIFYING_COLUMNS: tuple[Column, ...] = (
    Column.CONTRACTOR_CODE,
    Column.CONTRACTOR_NAME,
    Column.POSTCODE,
    Column.ICB_CODE,
)


class PairPolicy(str, Enum):
    RAISE = "raise"
    REPORT = "report"
    FILL = "fill"


def _native(value: Any) -> Any:
    """Convert a pandas cell to a plain Python value (missing → None)."""
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if hasattr(value, "item"):
        return value.item()
    return value


@dataclass(frozen=True)
class DispensingRecord:
    """One cleaned source row."""
    year_month: Optional[dt.date]
    icb_code: Optional[str]
    icb_name: Optional[str]
    hwb_code: Optional[str]
    hwb_name: Optional[str]
    lpc_code: Optional[str]
    lpc_name: Optional[str]
    pharmacy_account_type: Optional[str]
    contractor_code: Optional[str]
    contractor_name: Optional[str]
    address_1: Optional[str]
    address_2: Optional[str]
    address_3: Optional[str]
    address_4: Optional[str]
    postcode: Optional[str]
    content_group: Optional[str]
    content: Optional[str]
    products_dispensed: Optional[int]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DispensingRecord":
        return cls(**{c.value: _native(row.get(c.value)) for c in CLEAN_COLUMNS})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RowIssue:
    """A malformed or inconsistent source row, quoted by its identifying fields."""
    row: int                    # 0-based data row (header excluded)
    column: str
    kind: str                   # "format" | "inconsistency"
    value: Optional[str]
    message: str
    identifiers: dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        ids = ", ".join(f"{k}={v}" for k, v in self.identifiers.items() if v is not None)
        return f"row {self.row} [{self.column}] {self.message} ({ids})"


@dataclass(frozen=True)
class RowFilter:
    """Keep rows whose column value is one of ``values``."""
    column: Column
    values: tuple[str, ...]

    def mask(self, df: pd.DataFrame) -> pd.Series:
        return df[self.column.value].isin(self.values)

    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        return df[self.mask(df)]

    @property
    def label(self) -> str:
        return f"{self.column.value} in ({', '.join(self.values)})"
