"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    source: str
    reporting_period: Optional[str]
    raw_rows: int
    clean_rows: int
    issues: int
    backup_intact: bool


class QueryInfo(BaseModel):
    name: str
    title: str
    filter: Optional[str] = None


class QueriesResponse(BaseModel):
    queries: list[QueryInfo]
    count: int


class QueryResultResponse(BaseModel):
    name: str
    title: str
    columns: list[str]
    rows: list[dict[str, Any]]
    row_count: int
