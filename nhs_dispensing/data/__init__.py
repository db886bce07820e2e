"""Data loading, cleaning, and in-memory store."""
from .loader import discover_sources, load_dispensing_csv, RawSnapshot
from .cleaning import clean_dispensing_data, CleaningResult
from .store import DataStore
from .schemas import Column, DispensingRecord, PairPolicy, RowFilter, RowIssue
