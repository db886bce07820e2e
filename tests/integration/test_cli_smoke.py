from __future__ import annotations

from pathlib import Path

import pytest

from nhs_dispensing.cli import EXIT_HARD_FAIL, EXIT_ISSUES, EXIT_SUCCESS, build_parser, main

from tests.helpers import HEADER, make_row, sample_rows, write_csv


def test_parse_args_defaults():
    args = build_parser().parse_args(["validate"])
    assert args.command == "validate"
    assert args.source is None
    assert args.pair_policy == "raise"
    assert args.tolerance == 0


def test_parse_args_rejects_unknown_pair_policy():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["validate", "--pair-policy", "ignore"])


@pytest.mark.integration
def test_validate_clean_file(sample_csv: Path, capsys):
    assert main(["validate", "--source", str(sample_csv)]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "September 2025" in out
    assert "No issues." in out


@pytest.mark.integration
def test_validate_reports_issues(tmp_path: Path, capsys):
    path = write_csv(tmp_path / "dispensing_data_202509.csv", sample_rows() + [make_row(lpc_code="")])
    assert main(["validate", "--source", str(path), "--pair-policy", "report"]) == EXIT_ISSUES
    assert "lpc_code missing" in capsys.readouterr().out


@pytest.mark.integration
def test_validate_halts_on_inconsistency(tmp_path: Path, capsys):
    path = write_csv(tmp_path / "dispensing_data_202509.csv", sample_rows() + [make_row(lpc_code="")])
    assert main(["validate", "--source", str(path)]) == EXIT_HARD_FAIL
    assert "INCONSISTENCY_ERROR" in capsys.readouterr().out


@pytest.mark.integration
def test_validate_bad_header(tmp_path: Path, capsys):
    path = write_csv(tmp_path / "data.csv", sample_rows(), header=HEADER[:-1] + ["QTY"])
    assert main(["validate", "--source", str(path)]) == EXIT_HARD_FAIL
    assert "LOAD_ERROR" in capsys.readouterr().out


@pytest.mark.integration
def test_list(capsys):
    assert main(["list"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    assert "QUERIES (18)" in out
    assert "boots_contents" in out


@pytest.mark.integration
def test_query(sample_csv: Path, capsys):
    assert main(["query", "top_contents", "--source", str(sample_csv)]) == EXIT_SUCCESS
    assert "Paracetamol" in capsys.readouterr().out


@pytest.mark.integration
def test_query_unknown(sample_csv: Path, capsys):
    assert main(["query", "nope", "--source", str(sample_csv)]) == EXIT_HARD_FAIL
    assert "QUERY_ERROR" in capsys.readouterr().out


@pytest.mark.integration
def test_report(sample_csv: Path, tmp_path: Path):
    out = tmp_path / "reports"
    code = main(["report", "--source", str(sample_csv), "--output", str(out), "--workers", "2"])
    assert code == EXIT_SUCCESS
    assert (out / "Dispensing_EDA_Report.xlsx").exists()
    assert (out / "dispensing_eda_report.json").exists()
