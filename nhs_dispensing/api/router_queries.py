"""
Query endpoints — catalog listing, single result tables, full report.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from nhs_dispensing.data.store import DataStore
from nhs_dispensing.errors import QueryError
from nhs_dispensing.analytics.catalog import QUERY_CATALOG
from nhs_dispensing.api.dependencies import get_store
from nhs_dispensing.api.response_models import QueriesResponse, QueryInfo, QueryResultResponse
from nhs_dispensing.reports import eda_report

router = APIRouter(prefix="/api", tags=["queries"])


@router.get("/queries", response_model=QueriesResponse)
def list_queries():
    queries = [
        QueryInfo(name=spec.name, title=spec.title, filter=spec.where.label if spec.where else None)
        for spec in QUERY_CATALOG.values()
    ]
    return QueriesResponse(queries=queries, count=len(queries))


@router.get("/queries/{name}", response_model=QueryResultResponse)
def get_query_result(name: str, store: DataStore = Depends(get_store)):
    try:
        result = store.run_query(name)
    except QueryError as exc:
        raise HTTPException(404, str(exc))
    return QueryResultResponse(
        name=result.name,
        title=result.title,
        columns=result.columns,
        rows=result.to_records(),
        row_count=len(result),
    )


@router.get("/report")
def full_report(store: DataStore = Depends(get_store)):
    """Every catalog query plus load and cleaning context."""
    return eda_report.generate_json(store)
