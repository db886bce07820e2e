"""
Dispensing EDA Report — every catalog query, plus data-quality context.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from nhs_dispensing.config import UNKNOWN_SENTINEL
from nhs_dispensing.data.store import DataStore
from nhs_dispensing.analytics.common import sanitize_for_json
from nhs_dispensing.analytics.catalog import QUERY_CATALOG
from nhs_dispensing.excel.writer import ExcelWriter


def generate_json(store: DataStore, names: list[str] | None = None) -> dict:
    results = store.run_all(names)
    return sanitize_for_json({
        "source": store.source_name(),
        "reporting_period": store.reporting_period(),
        "period_label": store.period_label(),
        "raw_rows": store.raw_row_count(),
        "clean_rows": store.row_count(),
        "backup_intact": store.verify_backup(),
        "raw_missing_values": store.raw_audit(),
        "issues": [i.to_dict() for i in store.issues],
        "queries": {
            name: {
                "title": r.title,
                "columns": r.columns,
                "rows": r.to_records(),
            }
            for name, r in results.items()
        },
    })


def _sentinel_rows(idx: int, row: dict) -> str | None:
    return "sentinel" if any(isinstance(v, str) and v == UNKNOWN_SENTINEL for v in row.values()) else None


def generate_excel(
    store: DataStore,
    output_path: str | Path,
    names: list[str] | None = None,
) -> Path:
    results = store.run_all(names)
    ew = ExcelWriter()

    # Executive Summary
    ws = ew.add_sheet("Executive Summary")
    ew.write_title(ws, "NHS PHARMACY DISPENSING",
                   f"Dispensing EDA Report  |  {store.period_label()}  |  Generated {pd.Timestamp.now():%B %d, %Y}")

    summary = store.run_query("quantity_summary").to_records()[0]
    distinct = store.run_query("distinct_counts").to_records()[0]

    row = ew.write_section(ws, 5, "PRODUCTS DISPENSED")
    row = ew.write_kpi_row(ws, row, [
        (summary["total_products_dispensed"], "TOTAL PRODUCTS", "count"),
        (summary["record_count"], "RECORDS", "count"),
        (summary["avg_products_dispensed"], "MEAN PER RECORD", "mean"),
        (summary["max_products_dispensed"], "MAX PER RECORD", "count"),
        (summary["min_products_dispensed"], "MIN PER RECORD", "count"),
    ])

    row = ew.write_section(ws, row, "COVERAGE")
    row = ew.write_kpi_row(ws, row, [
        (distinct["icb_name_count"], "ICBs", "count"),
        (distinct["lpc_name_count"], "LPCs", "count"),
        (distinct["contractor_name_count"], "CONTRACTORS", "count"),
        (distinct["content_count"], "CONTENTS", "count"),
    ])

    if store.issues:
        row = ew.write_note(
            ws, row, "DATA QUALITY",
            f"{len(store.issues):,} rows were reported during cleaning — see the Issues sheet.",
        )

    row = ew.write_section(ws, row, "SHEETS")
    ew.write_legend(ws, row, [(QUERY_CATALOG[name].title, name) for name in results],
                    headers=("Sheet", "Query"))

    # One sheet per query
    for name, result in results.items():
        ws_q = ew.add_sheet(result.title)
        ew.write_frame(ws_q, 1, result.frame, highlight_fn=_sentinel_rows)

    if store.issues:
        ws_i = ew.add_sheet("Issues")
        issues = pd.DataFrame([
            {"row": i.row, "column": i.column, "kind": i.kind, "value": i.value,
             "message": i.message, **i.identifiers}
            for i in store.issues
        ])
        ew.write_frame(ws_i, 1, issues, highlight_fn=lambda idx, r: "warning")

    return ew.save(output_path)
