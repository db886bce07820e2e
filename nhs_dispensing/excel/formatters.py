"""
Cell-level helpers: number formats, header and data cell styling, column widths, KPI cards.
"""
from __future__ import annotations

import pandas as pd
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from nhs_dispensing.excel.styles import (
    CENTER, LEFT, RIGHT,
    DATA_FONT, HEADER_FONT, KPI_LABEL_FONT, KPI_VALUE_FONT,
    GRID_BORDER, HEADER_BORDER, HEADER_FILL, STRIPE_FILL,
    HIGHLIGHT_FILLS,
)

# Percentages are stored as 0-100 values, not fractions
NUMBER_FORMATS = {
    "count": "#,##0",
    "percent": '0.00"%"',
    "mean": "#,##0.00",
    "period": "yyyy-mm",
}

NUMERIC_KINDS = ("count", "percent", "mean")


def cell_kind(name: str, series: pd.Series) -> str:
    """Pick a cell format for a result column from its name and dtype."""
    if name.startswith("pct_"):
        return "percent"
    if pd.api.types.is_datetime64_any_dtype(series):
        return "period"
    if pd.api.types.is_integer_dtype(series):
        return "count"
    if pd.api.types.is_float_dtype(series):
        return "mean"
    values = series.dropna()
    if len(values) and values.map(lambda v: isinstance(v, int) and not isinstance(v, bool)).all():
        return "count"
    return "text"


def style_header(ws: Worksheet, row: int, ncols: int) -> None:
    for col in range(1, ncols + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER
        cell.alignment = CENTER


def write_cell(ws: Worksheet, row: int, col: int, value, kind: str = "text", highlight: str | None = None) -> None:
    """Write one table cell: missing → blank, striped rows, optional highlight fill."""
    if value is not None and pd.api.types.is_scalar(value) and pd.isna(value):
        value = None
    cell = ws.cell(row=row, column=col, value=value)
    cell.font = DATA_FONT
    cell.border = GRID_BORDER
    cell.alignment = RIGHT if kind in NUMERIC_KINDS else LEFT
    if kind in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[kind]
    if highlight in HIGHLIGHT_FILLS:
        cell.fill = HIGHLIGHT_FILLS[highlight]
    elif row % 2 == 0:
        cell.fill = STRIPE_FILL


def fit_columns(ws: Worksheet, min_width: int = 10, max_width: int = 50) -> None:
    """Size each column to its longest value."""
    for cells in ws.iter_cols():
        longest = max((len(str(c.value)) for c in cells if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(cells[0].column)].width = min(max(longest + 2, min_width), max_width)


def kpi_card(ws: Worksheet, row: int, col: int, value, label: str, kind: str = "count") -> None:
    """Large value with a small label underneath."""
    top = ws.cell(row=row, column=col, value=value)
    top.font = KPI_VALUE_FONT
    top.alignment = CENTER
    if kind in NUMBER_FORMATS:
        top.number_format = NUMBER_FORMATS[kind]

    bottom = ws.cell(row=row + 1, column=col, value=label)
    bottom.font = KPI_LABEL_FONT
    bottom.alignment = CENTER
