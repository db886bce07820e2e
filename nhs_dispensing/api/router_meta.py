"""
Meta endpoints: health.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from nhs_dispensing.data.store import DataStore
from nhs_dispensing.api.dependencies import get_store_or_empty
from nhs_dispensing.api.response_models import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    period = store.reporting_period()
    return HealthResponse(
        status="ok" if store.is_loaded else "empty",
        source=store.source_name(),
        reporting_period=period.isoformat() if period else None,
        raw_rows=store.raw_row_count(),
        clean_rows=store.row_count(),
        issues=len(store.issues),
        backup_intact=store.verify_backup(),
    )
