"""
Source discovery, CSV loading and load validation.
"""
from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from nhs_dispensing.config import (
    INBOX_FOLDER, DELIMITER, ENCODING, COLUMN_TYPES, SOURCE_FILE_PATTERN,
)
from nhs_dispensing.data.schemas import SOURCE_COLUMNS
from nhs_dispensing.errors import LoadError


@dataclass(frozen=True)
class RawSnapshot:
    """The loaded source table plus an untouched deep copy."""
    source: Path
    raw: pd.DataFrame
    backup: pd.DataFrame
    row_count: int
    expected_rows: int


# ---------------------------------------------------------------------------
# Source discovery
# ---------------------------------------------------------------------------

_SOURCE_RE = re.compile(SOURCE_FILE_PATTERN, re.IGNORECASE)


def _source_period(filepath: Path) -> str | None:
    """Extract the YYYYMM period from "dispensing_data_202509.csv"."""
    m = _SOURCE_RE.search(filepath.stem)
    return m.group(1) if m else None


def discover_sources(inbox: Path = INBOX_FOLDER) -> list[Path]:
    """Recursively find dispensing CSVs in inbox, newest period first."""
    if not inbox.exists():
        return []
    matches = [p for p in inbox.rglob("*.csv") if _source_period(p)]
    matches.sort(key=lambda p: _source_period(p) or "000000", reverse=True)
    return matches


# ---------------------------------------------------------------------------
# Header handling
# ---------------------------------------------------------------------------

def normalize_header(name: str) -> str:
    """ " ICB_CODE " → "icb_code"; "Year Month" → "year_month"."""
    return re.sub(r"\s+", "_", str(name).lstrip("\ufeff").strip()).lower()


def _read_header(path: Path, delimiter: str, encoding: str) -> list[str]:
    with path.open("r", encoding=encoding, newline="") as f:
        reader = csv.reader(f, delimiter=delimiter)
        return next(reader, [])


def validate_header(header: list[str], expected: list[str] | None = None) -> dict[str, str]:
    """Map raw header names to column names; raise LoadError on any mismatch."""
    expected = expected or [c.value for c in SOURCE_COLUMNS]
    found = [normalize_header(raw) for raw in header]
    mapping = dict(zip(header, found))

    dupes = sorted({name for name in found if found.count(name) > 1})
    missing = sorted(set(expected) - set(found))
    unknown = sorted(set(found) - set(expected))
    problems = []
    if dupes:
        problems.append(f"duplicate columns: {', '.join(dupes)}")
    if missing:
        problems.append(f"missing columns: {', '.join(missing)}")
    if unknown:
        problems.append(f"unexpected columns: {', '.join(unknown)}")
    if problems:
        raise LoadError("Header does not match the dispensing schema — " + "; ".join(problems))
    return mapping


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _dtype_map(mapping: dict[str, str], column_types: dict[str, str]) -> dict[str, str]:
    # pandas drops a leading BOM from the first name, the csv module keeps it
    return {raw.lstrip("\ufeff"): column_types[name] for raw, name in mapping.items()}


def count_source_records(path: Path, delimiter: str = DELIMITER, encoding: str = ENCODING) -> int:
    """Count data records in the file (header and blank lines excluded).

    A line holding only whitespace is blank, as pandas skips it too.
    """
    with path.open("r", encoding=encoding, newline="") as f:
        reader = csv.reader(f, delimiter=delimiter)
        next(reader, None)
        return sum(1 for row in reader if row and not (len(row) == 1 and not row[0].strip()))


def load_dispensing_csv(
    path: str | Path,
    *,
    delimiter: str = DELIMITER,
    encoding: str = ENCODING,
    column_types: dict[str, str] | None = None,
) -> RawSnapshot:
    """Load one month's dispensing CSV as text columns and back it up.

    Raises LoadError if the file is missing or unreadable, the header is not
    the 18-column dispensing schema, the file has no data rows, or the loaded
    row count differs from the record count of the file.
    """
    path = Path(path)
    column_types = column_types or COLUMN_TYPES
    if not path.is_file():
        raise LoadError(f"Source file not found: {path}")

    try:
        header = _read_header(path, delimiter, encoding)
        mapping = validate_header(header, list(column_types.keys()))
        df = pd.read_csv(
            path,
            sep=delimiter,
            encoding=encoding,
            dtype=_dtype_map(mapping, column_types),
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=True,
        )
        expected_rows = count_source_records(path, delimiter, encoding)
    except UnicodeDecodeError as exc:
        raise LoadError(f"Cannot decode {path.name} as {encoding}: {exc}") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error) as exc:
        raise LoadError(f"Cannot parse {path.name}: {exc}") from exc

    df.columns = [normalize_header(c) for c in df.columns]
    df = df[[c for c in column_types.keys()]]

    row_count = len(df)
    if row_count == 0:
        raise LoadError(f"No data rows in {path.name}")
    if row_count != expected_rows:
        raise LoadError(
            f"Row count mismatch for {path.name}: loaded {row_count:,}, "
            f"file has {expected_rows:,} records"
        )

    print(f"  Loaded {path.name}: {row_count:,} rows ({expected_rows:,} records in file)")
    return RawSnapshot(
        source=path,
        raw=df,
        backup=df.copy(deep=True),
        row_count=row_count,
        expected_rows=expected_rows,
    )
