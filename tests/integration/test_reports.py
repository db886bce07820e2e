from __future__ import annotations

import json
from pathlib import Path

import pytest
from openpyxl import load_workbook

from nhs_dispensing.data.store import DataStore
from nhs_dispensing.reports import eda_report

from tests.helpers import make_row, sample_rows, write_csv


@pytest.mark.integration
def test_generate_json(store: DataStore):
    report = eda_report.generate_json(store)
    assert report["source"] == "dispensing_data_202509.csv"
    assert report["reporting_period"] == "2025-09-01"
    assert report["raw_rows"] == report["clean_rows"] == 4
    assert report["backup_intact"] is True
    assert report["raw_missing_values"]["missing_hwb_code"] == 1
    assert len(report["queries"]) == 18

    share = report["queries"]["icb_share"]
    assert share["columns"] == ["icb_name", "icb_items", "pct_of_national_total"]
    assert share["rows"][0]["pct_of_national_total"] == 83.33
    json.dumps(report)


@pytest.mark.integration
def test_generate_json_subset(store: DataStore):
    report = eda_report.generate_json(store, ["top_postcodes"])
    assert list(report["queries"]) == ["top_postcodes"]


@pytest.mark.integration
def test_generate_excel(store: DataStore, tmp_path: Path):
    path = eda_report.generate_excel(store, tmp_path / "report.xlsx")
    assert path.exists()

    wb = load_workbook(path)
    assert wb.sheetnames[0] == "Executive Summary"
    assert "ICB share of national total" in wb.sheetnames
    assert "Issues" not in wb.sheetnames
    assert len(wb.sheetnames) == 19


@pytest.mark.integration
def test_generate_excel_lists_issues(tmp_path: Path):
    path = write_csv(tmp_path / "dispensing_data_202509.csv", sample_rows() + [make_row(value="n/a")])
    store = DataStore(tolerance=1).load(path)

    out = eda_report.generate_excel(store, tmp_path / "report.xlsx", ["icb_share"])
    wb = load_workbook(out)
    assert wb.sheetnames == ["Executive Summary", "ICB share of national total", "Issues"]
    assert wb["Issues"]["A2"].value == 4
