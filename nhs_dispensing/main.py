"""
NHS Dispensing EDA — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nhs_dispensing import __version__
from nhs_dispensing.data.store import DataStore
from nhs_dispensing.errors import DispensingError
from nhs_dispensing.api.dependencies import set_store
from nhs_dispensing.api.router_meta import router as meta_router
from nhs_dispensing.api.router_queries import router as queries_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load and clean the dispensing data at startup."""
    from nhs_dispensing.config import INBOX_FOLDER, SOURCE_PATH
    print(f"  NHS_DISPENSING_SOURCE = {SOURCE_PATH or '(not set)'}")
    print(f"  INBOX_FOLDER = {INBOX_FOLDER}")

    store = DataStore()
    try:
        store.load()
    except DispensingError as exc:
        print(f"  Startup load failed [{exc.error_code}]: {exc}")
    set_store(store)

    if store.is_loaded:
        print(f"\nNHS Dispensing EDA ready — {store.row_count():,} rows, {store.period_label()}\n")
    else:
        print("\nNHS Dispensing EDA ready — no data loaded.\n")
    yield


def create_app(load_on_startup: bool = True) -> FastAPI:
    app = FastAPI(
        title="NHS Dispensing EDA API",
        description="Pharmacy and appliance contractor dispensing — descriptive query catalog",
        version=__version__,
        lifespan=lifespan if load_on_startup else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(queries_router)
    return app


app = create_app()
