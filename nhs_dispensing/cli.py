#!/usr/bin/env python3
"""
NHS Dispensing EDA CLI — load, validate, query and report on one month of dispensing data.

USAGE:
  python -m nhs_dispensing.cli validate --source dispensing_data_202509.csv
  python -m nhs_dispensing.cli validate --pair-policy report --tolerance 5

  python -m nhs_dispensing.cli list                          # Query catalog
  python -m nhs_dispensing.cli query icb_share               # One result table
  python -m nhs_dispensing.cli query top_postcodes --source ./data.csv

  python -m nhs_dispensing.cli report                        # Excel + JSON report
  python -m nhs_dispensing.cli report --output ./out --queries icb_share top_contents

  python -m nhs_dispensing.cli serve --port 8000             # Start API server
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd

from nhs_dispensing.config import (
    REPORTS_FOLDER, DELIMITER, ENCODING, MALFORMED_ROW_TOLERANCE, PAIR_POLICY, QUERY_WORKERS,
)
from nhs_dispensing.data.schemas import PairPolicy
from nhs_dispensing.data.store import DataStore
from nhs_dispensing.errors import DispensingError, CleaningError

EXIT_SUCCESS = 0
EXIT_ISSUES = 10
EXIT_HARD_FAIL = 20


def _load_store(args) -> DataStore:
    store = DataStore(
        tolerance=args.tolerance,
        pair_policy=args.pair_policy,
        workers=getattr(args, "workers", QUERY_WORKERS),
    )
    return store.load(args.source, delimiter=args.delimiter, encoding=args.encoding)


def _print_issues(err_or_store) -> None:
    issues = err_or_store.issues
    for issue in issues[:20]:
        print(f"    {issue}")
    if len(issues) > 20:
        print(f"    ... and {len(issues) - 20:,} more")


def cmd_validate(args) -> int:
    """Load, back up and clean; report counts, missing values and issues."""
    print("\n" + "=" * 70)
    print("  NHS DISPENSING — LOAD & CLEAN VALIDATION")
    print("=" * 70)

    store = _load_store(args)
    print(f"\n  Source:            {store.source_name()}")
    print(f"  Reporting period:  {store.period_label()}")
    print(f"  Raw rows:          {store.raw_row_count():,}")
    print(f"  Clean rows:        {store.row_count():,}")
    print(f"  Backup intact:     {'yes' if store.verify_backup() else 'NO'}")

    print("\n  Missing values (raw):")
    for key, count in store.raw_audit().items():
        if key != "total_records":
            print(f"    {key:<38}{count:>10,}")

    if store.issues:
        print(f"\n  {len(store.issues):,} issues reported:")
        _print_issues(store)
        return EXIT_ISSUES
    print("\n  No issues.\n")
    return EXIT_SUCCESS


def cmd_list(args) -> int:
    from nhs_dispensing.analytics.catalog import QUERY_CATALOG
    print(f"\nQUERIES ({len(QUERY_CATALOG)}):\n")
    for i, spec in enumerate(QUERY_CATALOG.values(), 1):
        where = f"  [{spec.where.label}]" if spec.where else ""
        print(f"{i:<4}{spec.name:<30}{spec.title}{where}")
    return EXIT_SUCCESS


def cmd_query(args) -> int:
    store = _load_store(args)
    result = store.run_query(args.name)
    print(f"\n{result.title} ({len(result):,} rows)\n")
    with pd.option_context("display.max_rows", args.limit, "display.width", 200):
        print(result.frame.head(args.limit).to_string(index=False))
    print()
    return EXIT_ISSUES if store.issues else EXIT_SUCCESS


def _write_json(path: Path, data) -> None:
    """Write sanitised JSON to path, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
        f.write("\n")


def cmd_report(args) -> int:
    """Write the Excel workbook and JSON payload for the query catalog."""
    print("\n" + "=" * 70)
    print("  NHS DISPENSING — EDA REPORT")
    print("=" * 70)
    print(f"  Started: {datetime.now():%Y-%m-%d %H:%M:%S}")

    from nhs_dispensing.reports import eda_report

    store = _load_store(args)
    if args.output:
        output_folder = Path(args.output)
    else:
        output_folder = REPORTS_FOLDER / datetime.now().strftime("%Y%m%d_%H%M%S")
    output_folder.mkdir(parents=True, exist_ok=True)

    print(f"\n  Period: {store.period_label()}")
    print("  Generating reports...\n")

    eda_report.generate_excel(store, output_folder / "Dispensing_EDA_Report.xlsx", args.queries)
    print("   Dispensing_EDA_Report.xlsx")

    _write_json(output_folder / "dispensing_eda_report.json", eda_report.generate_json(store, args.queries))
    print("   dispensing_eda_report.json")

    print(f"\n  Reports saved to: {output_folder}")
    print("=" * 70 + "\n")
    return EXIT_ISSUES if store.issues else EXIT_SUCCESS


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting NHS Dispensing EDA API on port {args.port}...")
    uvicorn.run("nhs_dispensing.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return EXIT_SUCCESS


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--source", default=None, help="Dispensing CSV (default: newest file in inbox)")
    p.add_argument("--delimiter", default=DELIMITER, help="Field delimiter")
    p.add_argument("--encoding", default=ENCODING, help="File encoding")
    p.add_argument("--tolerance", type=int, default=MALFORMED_ROW_TOLERANCE,
                   help="Malformed rows allowed before cleaning halts")
    p.add_argument("--pair-policy", default=PAIR_POLICY, choices=[policy.value for policy in PairPolicy],
                   help="Handling of half-missing HWB/LPC code/name pairs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="NHS Dispensing EDA — descriptive analysis of pharmacy dispensing data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    validate_parser = subparsers.add_parser("validate", help="Load and clean, report issues")
    _add_source_args(validate_parser)
    validate_parser.set_defaults(func=cmd_validate)

    list_parser = subparsers.add_parser("list", help="List catalog queries")
    list_parser.set_defaults(func=cmd_list)

    query_parser = subparsers.add_parser("query", help="Run one catalog query")
    query_parser.add_argument("name", help="Query name (see 'list')")
    query_parser.add_argument("--limit", type=int, default=50, help="Rows to print (default 50)")
    _add_source_args(query_parser)
    query_parser.set_defaults(func=cmd_query)

    report_parser = subparsers.add_parser("report", help="Generate Excel + JSON report")
    report_parser.add_argument("--output", default=None, help="Output directory")
    report_parser.add_argument("--queries", nargs="*", default=None, help="Subset of query names")
    report_parser.add_argument("--workers", type=int, default=QUERY_WORKERS, help="Query threads")
    _add_source_args(report_parser)
    report_parser.set_defaults(func=cmd_report)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_SUCCESS

    try:
        return args.func(args)
    except CleaningError as exc:
        print(f"\n  [{exc.error_code}] {exc}")
        _print_issues(exc)
        return EXIT_HARD_FAIL
    except DispensingError as exc:
        print(f"\n  [{exc.error_code}] {exc}")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
