"""
ExcelWriter — builds the EDA workbook: summary sheet blocks and one table per query result.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from nhs_dispensing.excel.formatters import cell_kind, fit_columns, kpi_card, style_header, write_cell
from nhs_dispensing.excel.styles import (
    DATA_FONT, LEGEND_FONT, NOTE_BODY_FONT, NOTE_TITLE_FONT, SECTION_FONT, SUBTITLE_FONT, TITLE_FONT,
    GRID_BORDER, LEGEND_FILL, WRAP,
)

# (row index, row values) → highlight name or None
HighlightFn = Callable[[int, dict], Optional[str]]

_BAD_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")
_ACRONYMS = {"icb": "ICB", "lpc": "LPC", "hwb": "HWB"}


def column_label(name: str) -> str:
    """ "pct_of_national_total" → "% of National Total"."""
    if name.startswith("pct_"):
        return "% " + column_label(name[4:]).replace("Of ", "of ", 1)
    words = [_ACRONYMS.get(w, w.capitalize()) for w in name.split("_")]
    return " ".join(words).replace(" Of ", " of ")


class ExcelWriter:
    """Accumulates sheets in one openpyxl Workbook until save()."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._fresh = True

    def add_sheet(self, title: str) -> Worksheet:
        """New sheet; the workbook's default sheet is reused for the first one.

        Excel forbids []:*?/\\ in titles and caps them at 31 characters.
        """
        title = _BAD_TITLE_CHARS.sub("-", title)[:31]
        if self._fresh:
            self._fresh = False
            ws = self.wb.active
            ws.title = title
            return ws
        return self.wb.create_sheet(title=title)

    # ------------------------------------------------------------------
    # Summary blocks (each returns the next free row)
    # ------------------------------------------------------------------

    def write_title(self, ws: Worksheet, title: str, subtitle: str, width: int = 8) -> int:
        for row, text, font in ((1, title, TITLE_FONT), (2, subtitle, SUBTITLE_FONT)):
            ws.cell(row=row, column=1, value=text).font = font
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=width)
        for col in range(1, width + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18
        return 4

    def write_section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1, value=title).font = SECTION_FONT
        return row + 2

    def write_kpi_row(self, ws: Worksheet, row: int, kpis: list[tuple], spacing: int = 2) -> int:
        """kpis: [(value, label, kind), ...], one card every ``spacing`` columns."""
        for i, (value, label, kind) in enumerate(kpis):
            kpi_card(ws, row, 1 + i * spacing, value, label, kind)
        return row + 3

    def write_note(self, ws: Worksheet, row: int, title: str, body: str, width: int = 8) -> int:
        ws.cell(row=row, column=1, value=title).font = NOTE_TITLE_FONT
        ws.cell(row=row + 1, column=1, value=body).font = NOTE_BODY_FONT
        ws.merge_cells(start_row=row + 1, start_column=1, end_row=row + 1, end_column=width)
        return row + 3

    def write_legend(self, ws: Worksheet, row: int, items: list[tuple[str, str]],
                     headers: tuple[str, str] = ("Sheet", "Query")) -> int:
        """Two-column key/description table."""
        for col, text in enumerate(headers, 1):
            ws.cell(row=row, column=col, value=text)
        style_header(ws, row, 2)
        for offset, pair in enumerate(items, 1):
            for col, text in enumerate(pair, 1):
                cell = ws.cell(row=row + offset, column=col, value=text)
                cell.font = LEGEND_FONT if col == 1 else DATA_FONT
                cell.fill = LEGEND_FILL
                cell.border = GRID_BORDER
                if col == 2:
                    cell.alignment = WRAP
        ws.column_dimensions["A"].width = 32
        ws.column_dimensions["B"].width = 40
        return row + len(items) + 2

    # ------------------------------------------------------------------
    # Result tables
    # ------------------------------------------------------------------

    def write_frame(
        self,
        ws: Worksheet,
        start_row: int,
        df: pd.DataFrame,
        highlight_fn: HighlightFn | None = None,
    ) -> int:
        """Header row plus one row per record, typed by column; freezes below the header."""
        names = [str(c) for c in df.columns]
        kinds = [cell_kind(name, df[col]) for name, col in zip(names, df.columns)]

        for col, name in enumerate(names, 1):
            ws.cell(row=start_row, column=col, value=column_label(name))
        style_header(ws, start_row, len(names))

        row = start_row
        for idx, record in enumerate(df.to_dict("records")):
            row += 1
            highlight = highlight_fn(idx, record) if highlight_fn else None
            for col, (key, kind) in enumerate(zip(df.columns, kinds), 1):
                write_cell(ws, row, col, record[key], kind, highlight)

        fit_columns(ws)
        ws.freeze_panes = f"A{start_row + 1}"
        return row + 1

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
