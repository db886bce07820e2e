"""Domain errors and failure typing."""
from __future__ import annotations


class DispensingError(Exception):
    """Base class for load, cleaning and query failures."""

    error_code = "DISPENSING_ERROR"


class ConfigError(DispensingError):
    """Raised for invalid configuration values."""

    error_code = "CONFIG_ERROR"


class LoadError(DispensingError):
    """Raised when the source file cannot be loaded as a dispensing table."""

    error_code = "LOAD_ERROR"


class CleaningError(DispensingError):
    """Base class for cleaning failures; carries the offending rows."""

    error_code = "CLEANING_ERROR"

    def __init__(self, message: str, issues: list | None = None) -> None:
        super().__init__(message)
        self.issues = list(issues or [])


class FormatError(CleaningError):
    """Raised for unparseable period or quantity fields."""

    error_code = "FORMAT_ERROR"


class InconsistencyError(CleaningError):
    """Raised when a code/name pair is only partially missing."""

    error_code = "INCONSISTENCY_ERROR"


class QueryError(DispensingError):
    """Raised for unknown query names."""

    error_code = "QUERY_ERROR"
