"""
DataStore — raw snapshot, backup and clean table held in memory with pandas.

Loaded once at startup, queried on every request.
"""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Iterator, Optional

import pandas as pd

from nhs_dispensing.config import (
    INBOX_FOLDER, SOURCE_PATH, DELIMITER, ENCODING, MALFORMED_ROW_TOLERANCE, PAIR_POLICY,
    QUERY_WORKERS,
)
from nhs_dispensing.data.cleaning import clean_dispensing_data
from nhs_dispensing.data.loader import RawSnapshot, discover_sources, load_dispensing_csv
from nhs_dispensing.data.schemas import Column, DispensingRecord, PairPolicy, RowIssue
from nhs_dispensing.errors import LoadError


class DataStore:
    """One month of dispensing data: raw, backup and clean tables."""

    def __init__(
        self,
        tolerance: int = MALFORMED_ROW_TOLERANCE,
        pair_policy: str | PairPolicy = PAIR_POLICY,
        workers: int = QUERY_WORKERS,
    ) -> None:
        self.tolerance = tolerance
        self.pair_policy = pair_policy
        self.workers = workers
        self.snapshot: Optional[RawSnapshot] = None
        self.clean: pd.DataFrame = pd.DataFrame()
        self.issues: list[RowIssue] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_source(path: str | Path | None = None, inbox: Path = INBOX_FOLDER) -> Path:
        """Explicit path, else NHS_DISPENSING_SOURCE, else newest inbox file."""
        if path is None and SOURCE_PATH:
            path = SOURCE_PATH
        if path is not None:
            return Path(path)
        sources = discover_sources(inbox)
        if not sources:
            raise LoadError(f"No dispensing_data_YYYYMM.csv files found in {inbox}")
        return sources[0]

    def load(
        self,
        path: str | Path | None = None,
        *,
        inbox: Path = INBOX_FOLDER,
        delimiter: str = DELIMITER,
        encoding: str = ENCODING,
    ) -> "DataStore":
        """Load the source CSV, back it up and clean it."""
        source = self.resolve_source(path, inbox)
        print(f"Loading dispensing data from {source}...")
        self.snapshot = load_dispensing_csv(source, delimiter=delimiter, encoding=encoding)
        self.reclean()
        self._loaded = True
        return self

    def reclean(self) -> pd.DataFrame:
        """Re-derive the clean table from the untouched raw snapshot."""
        if self.snapshot is None:
            raise LoadError("No raw snapshot loaded")
        result = clean_dispensing_data(
            self.snapshot.raw,
            tolerance=self.tolerance,
            pair_policy=self.pair_policy,
        )
        self.clean = result.clean
        self.issues = result.issues
        print(f"  Cleaned {len(self.clean):,} rows ({len(self.issues):,} issues reported)")
        return self.clean

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def raw(self) -> pd.DataFrame:
        return self.snapshot.raw if self.snapshot is not None else pd.DataFrame()

    @property
    def backup(self) -> pd.DataFrame:
        return self.snapshot.backup if self.snapshot is not None else pd.DataFrame()

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def row_count(self) -> int:
        return len(self.clean)

    def raw_row_count(self) -> int:
        return len(self.raw)

    def source_name(self) -> str:
        return self.snapshot.source.name if self.snapshot is not None else "N/A"

    def reporting_period(self) -> Optional[dt.date]:
        if self.clean.empty:
            return None
        periods = self.clean[Column.YEAR_MONTH.value].dropna()
        if periods.empty:
            return None
        return periods.iloc[0].date()

    def period_label(self) -> str:
        period = self.reporting_period()
        return f"{period:%B %Y}" if period else "N/A"

    def verify_backup(self) -> bool:
        """True while the raw table still matches its backup."""
        return self.snapshot is not None and self.snapshot.raw.equals(self.snapshot.backup)

    def raw_audit(self) -> dict:
        """Missing values in the raw table, before any cleaning."""
        from nhs_dispensing.analytics.audit import missing_value_audit
        return missing_value_audit(self.raw)

    def records(self) -> Iterator[DispensingRecord]:
        for row in self.clean.to_dict("records"):
            yield DispensingRecord.from_row(row)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def run_query(self, name: str):
        from nhs_dispensing.analytics.catalog import run_query
        return run_query(self.clean, name)

    def run_all(self, names=None, workers: int | None = None):
        from nhs_dispensing.analytics.catalog import run_catalog
        return run_catalog(self.clean, names, workers=self.workers if workers is None else workers)
