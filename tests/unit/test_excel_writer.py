from __future__ import annotations

import pandas as pd
from openpyxl import load_workbook

from nhs_dispensing.excel.writer import ExcelWriter, column_label


def test_column_label():
    assert column_label("icb_name") == "ICB Name"
    assert column_label("pct_of_national_total") == "% of National Total"
    assert column_label("total_products_dispensed") == "Total Products Dispensed"


def test_sheet_titles_follow_excel_rules(tmp_path):
    ew = ExcelWriter()
    ws = ew.add_sheet("Contents: appliance / boots [top] with a very long name")
    assert len(ws.title) <= 31
    assert not set("[]:*?/\\") & set(ws.title)


def test_write_frame_round_trips_values(tmp_path):
    df = pd.DataFrame({
        "icb_name": ["NHS A", None],
        "total_products_dispensed": [10, 5],
        "pct_of_national_total": [66.67, 33.33],
    })
    ew = ExcelWriter()
    ws = ew.add_sheet("Totals")
    ew.write_frame(ws, 1, df)
    path = ew.save(tmp_path / "out.xlsx")

    sheet = load_workbook(path)["Totals"]
    values = [[c.value for c in row] for row in sheet.iter_rows(min_row=1, max_row=3, max_col=3)]
    assert values[0] == ["ICB Name", "Total Products Dispensed", "% of National Total"]
    assert values[1] == ["NHS A", 10, 66.67]
    assert values[2] == [None, 5, 33.33]
