"""
Resource query engine.

Structured filters (type, category, topic, year, month) and the sort order
are pushed down to the repository. Each returned record is then normalized,
and the free-text query runs last over the normalized resources so it sees
defaulted fields.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..models.resources import ALL, DEFAULT_SORT, Resource, ResourceType, SearchFilters
from ..repositories.base import ResourceRepository, SortDirection, SortField, StoreQuery
from .normalizer import Diagnostic, DiagnosticsCollector, normalize_record

logger = logging.getLogger(__name__)

SORT_OPTIONS: dict[str, tuple[SortField, SortDirection]] = {
    "name_asc": ("name", "asc"),
    "name_desc": ("name", "desc"),
    "date_asc": ("updatedDate", "asc"),
    "date_desc": ("updatedDate", "desc"),
}


@dataclass
class QueryResult:
    resources: list[Resource] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    failed: bool = False


def _is_constraint(value: Any) -> bool:
    return value is not None and value != "" and value != 0 and value != ALL


def build_store_query(filters: SearchFilters | None) -> StoreQuery:
    """Translate the structured part of the filters into a StoreQuery."""
    filters = filters or SearchFilters()
    equals: dict[str, Any] = {}

    if _is_constraint(filters.type):
        equals["type"] = (
            filters.type.value if isinstance(filters.type, ResourceType) else filters.type
        )
    if _is_constraint(filters.category):
        equals["category"] = filters.category
    if _is_constraint(filters.topic):
        equals["topic"] = filters.topic
    if _is_constraint(filters.filterYear):
        equals["manualLastUpdateYear"] = int(filters.filterYear)
    if _is_constraint(filters.filterMonth):
        equals["manualLastUpdateMonth"] = int(filters.filterMonth)

    sort_field, direction = SORT_OPTIONS.get(filters.sortBy or DEFAULT_SORT, SORT_OPTIONS[DEFAULT_SORT])
    return StoreQuery(equals=equals, sort_field=sort_field, direction=direction)


def matches_text(resource: Resource, query: str) -> bool:
    """Case-insensitive substring match on name, tags, category and topic."""
    needle = query.lower()
    return (
        needle in resource.name.lower()
        or any(needle in tag.lower() for tag in resource.tags)
        or needle in resource.category.lower()
        or needle in resource.topic.lower()
    )


def filter_by_text(resources: Iterable[Resource], query: str | None) -> list[Resource]:
    """Keep the resources matching the free-text query; an empty query keeps all."""
    if not query:
        return list(resources)
    return [resource for resource in resources if matches_text(resource, query)]


async def run_query(repository: ResourceRepository, filters: SearchFilters | None = None) -> QueryResult:
    """
    Execute a search.

    Never raises: a store failure produces an empty, failed result carrying a
    diagnostic that describes the failure.
    """
    filters = filters or SearchFilters()
    store_query = build_store_query(filters)
    diagnostics = DiagnosticsCollector()

    try:
        records = await repository.query(store_query)
    except Exception as e:
        logger.error(
            "Error fetching resources from store",
            extra={"filters": store_query.equals, "sort_field": store_query.sort_field, "error": str(e)},
            exc_info=True,
        )
        diagnostics.add("*", "store", f"Query failed: {type(e).__name__}")
        return QueryResult(resources=[], diagnostics=list(diagnostics), failed=True)

    resources = [normalize_record(record, diagnostics).resource for record in records]
    resources = filter_by_text(resources, filters.query)

    return QueryResult(resources=resources, diagnostics=list(diagnostics))
