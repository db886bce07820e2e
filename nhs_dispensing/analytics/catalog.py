"""
Query catalog — named, parameterless report queries over the clean table.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable

import pandas as pd

from nhs_dispensing.config import (
    APPLIANCE_ACCOUNT_TYPE, BOOTS_CONTRACTOR_NAMES, QUERY_WORKERS,
)
from nhs_dispensing.data.schemas import Column, RowFilter
from nhs_dispensing.errors import QueryError
from nhs_dispensing.analytics import audit, contents, geography, pharmacies
from nhs_dispensing.analytics.common import frame_to_records

APPLIANCE_FILTER = RowFilter(Column.PHARMACY_ACCOUNT_TYPE, (APPLIANCE_ACCOUNT_TYPE,))
BOOTS_FILTER = RowFilter(Column.CONTRACTOR_NAME, tuple(BOOTS_CONTRACTOR_NAMES))


@dataclass(frozen=True)
class QuerySpec:
    name: str
    title: str
    func: Callable[[pd.DataFrame], pd.DataFrame]
    where: RowFilter | None = None


@dataclass(frozen=True)
class QueryResult:
    """A named result table."""
    name: str
    title: str
    frame: pd.DataFrame

    @property
    def columns(self) -> list[str]:
        return [str(c) for c in self.frame.columns]

    def to_records(self) -> list[dict]:
        return frame_to_records(self.frame)

    def __len__(self) -> int:
        return len(self.frame)


def _spec(name: str, title: str, func, where: RowFilter | None = None, **params) -> QuerySpec:
    if where is not None:
        params["where"] = where
    bound = partial(func, **params) if params else func
    return QuerySpec(name=name, title=title, func=bound, where=where)


# Report order
QUERY_CATALOG: dict[str, QuerySpec] = {
    spec.name: spec for spec in [
        _spec("missing_values", "Missing values by column", audit.missing_values),
        _spec("distinct_counts", "Distinct values by column", audit.distinct_counts),
        _spec("quantity_summary", "Products dispensed summary", audit.quantity_summary),
        _spec("icb_overview", "LPCs and pharmacies per ICB", geography.icb_overview),
        _spec("icb_totals", "Products dispensed per ICB", geography.icb_totals),
        _spec("icb_share", "ICB share of national total", geography.icb_share),
        _spec("lpc_pharmacies", "Pharmacies per LPC", geography.lpc_pharmacies),
        _spec("contractor_account_types", "Contractor account types", pharmacies.contractor_account_types),
        _spec("account_type_summary", "Pharmacies per account type", pharmacies.account_type_summary),
        _spec("content_group_counts", "Contents per content group", contents.content_group_counts),
        _spec("content_occurrences", "Content occurrences", contents.content_occurrences),
        _spec("top_contents", "Top 10 contents", contents.top_contents),
        _spec("top_contractors", "Top 10 contractors", pharmacies.contractor_ranking),
        _spec("top_appliance_contractors", "Top 10 appliance contractors",
              pharmacies.contractor_ranking, where=APPLIANCE_FILTER, with_share=False),
        _spec("top_postcodes", "Top 10 postcodes", geography.top_postcodes),
        _spec("appliance_content_groups", "Appliance content groups",
              contents.content_group_counts, where=APPLIANCE_FILTER),
        _spec("appliance_contents", "Appliance contents", contents.content_counts, where=APPLIANCE_FILTER),
        _spec("boots_contents", "Boots products by content", contents.contents_dispensed, where=BOOTS_FILTER),
    ]
}


def query_names() -> list[str]:
    return list(QUERY_CATALOG)


def get_query(name: str) -> QuerySpec:
    spec = QUERY_CATALOG.get(name)
    if spec is None:
        raise QueryError(f"Unknown query: {name}. Valid: {', '.join(QUERY_CATALOG)}")
    return spec


def run_query(clean: pd.DataFrame, name: str) -> QueryResult:
    spec = get_query(name)
    return QueryResult(name=spec.name, title=spec.title, frame=spec.func(clean))


def run_catalog(
    clean: pd.DataFrame,
    names: Iterable[str] | None = None,
    workers: int = QUERY_WORKERS,
) -> dict[str, QueryResult]:
    """Run the named queries (all by default), results in catalog order.

    Queries only read ``clean``, so with workers > 1 they share it across a
    thread pool.
    """
    selected = list(names) if names is not None else query_names()
    for name in selected:
        get_query(name)
    ordered = [n for n in QUERY_CATALOG if n in selected]

    if workers > 1 and len(ordered) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda n: run_query(clean, n), ordered))
    else:
        results = [run_query(clean, n) for n in ordered]
    return {r.name: r for r in results}
