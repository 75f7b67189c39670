"""
Service for resource catalog management.

This module handles:
- Validation of create/update input and conversion to the stored shape
- CRUD against the configured repository, with read-back after writes
- Filtered/sorted listing through the query engine
- Distinct category/topic values for the filter controls

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from ..models.resources import (
    FilterOptionsResponse,
    Resource,
    ResourceForm,
    SearchFilters,
    parse_manual_last_update,
)
from ..repositories.base import RawRecord, ResourceRepository
from ..utils.exceptions import ResourceValidationError, field_errors_from
from ..utils.metrics import NORMALIZATION_DIAGNOSTICS
from .distinct_values import distinct_values
from .normalizer import Diagnostic, normalize_record
from .query_engine import run_query

logger = logging.getLogger(__name__)


def log_diagnostics(diagnostics: Iterable[Diagnostic]) -> None:
    """Write normalization diagnostics to the log and the metrics counter."""
    for diagnostic in diagnostics:
        NORMALIZATION_DIAGNOSTICS.labels(field=diagnostic.field).inc()
        logger.warning(
            f"Resource {diagnostic.record_id}: {diagnostic.message}",
            extra={"record_id": diagnostic.record_id, "field": diagnostic.field},
        )


def validate_form(data: ResourceForm | Mapping[str, Any], action: str = "save") -> ResourceForm:
    """
    Validate caller input.

    Raises:
        ResourceValidationError: with a field -> messages mapping
    """
    if isinstance(data, ResourceForm):
        return data
    try:
        return ResourceForm.model_validate(data)
    except ValidationError as e:
        raise ResourceValidationError(
            field_errors_from(e.errors()),
            message=f"Validation failed. Could not {action} resource.",
        ) from e


def prepare_data_for_store(form: ResourceForm) -> dict[str, Any]:
    """Convert a validated form into the persisted record shape."""
    data: dict[str, Any] = {
        "name": form.name,
        "relativeUrl": form.relativeUrl or None,
        "fullUrl": form.fullUrl,
        "tags": list(form.tags),
        "duration": form.duration or None,
        "type": form.type.value,
        "category": form.category,
        "topic": form.topic,
        "manualLastUpdateString": None,
        "manualLastUpdateMonth": None,
        "manualLastUpdateYear": None,
    }

    parts = parse_manual_last_update(form.manualLastUpdate)
    if parts:
        month, year = parts
        data["manualLastUpdateString"] = form.manualLastUpdate
        data["manualLastUpdateMonth"] = month
        data["manualLastUpdateYear"] = year

    return data


def _to_resource(record: RawRecord) -> Resource:
    result = normalize_record(record)
    log_diagnostics(result.diagnostics)
    return result.resource


async def create_resource(
    repository: ResourceRepository, data: ResourceForm | Mapping[str, Any]
) -> Resource:
    """
    Create a resource and return it as stored.

    The store assigns id and updatedDate; the record is read back after the
    write and may lag behind it on an eventually consistent store.
    """
    form = validate_form(data, action="create")
    created = await repository.add(prepare_data_for_store(form))

    stored = await repository.get(created.id)
    if stored is None:
        logger.warning(
            "Created resource not visible on read-back; returning write result",
            extra={"record_id": created.id},
        )
        stored = created

    logger.info(f"Resource created: {created.id}", extra={"record_id": created.id})
    return _to_resource(stored)


async def update_resource(
    repository: ResourceRepository,
    resource_id: str,
    data: ResourceForm | Mapping[str, Any],
) -> Resource | None:
    """
    Replace a resource's fields and refresh its updatedDate.

    Returns:
        The resource as stored after the update, or None if it does not exist
    """
    form = validate_form(data, action="update")

    if await repository.get(resource_id) is None:
        return None

    if not await repository.update(resource_id, prepare_data_for_store(form)):
        # Deleted between the existence check and the write
        return None

    stored = await repository.get(resource_id)
    if stored is None:
        return None

    logger.info(f"Resource updated: {resource_id}", extra={"record_id": resource_id})
    return _to_resource(stored)


async def delete_resource(repository: ResourceRepository, resource_id: str) -> bool:
    """Delete a resource permanently. Returns False if it does not exist."""
    deleted = await repository.delete(resource_id)
    if deleted:
        logger.info(f"Resource deleted: {resource_id}", extra={"record_id": resource_id})
    return deleted


async def get_resources(
    repository: ResourceRepository, filters: SearchFilters | None = None
) -> list[Resource]:
    """List resources matching the filters. Returns an empty list if the store fails."""
    result = await run_query(repository, filters)
    log_diagnostics(result.diagnostics)
    return result.resources


async def get_resource_by_id(repository: ResourceRepository, resource_id: str) -> Resource | None:
    """Get a single resource, or None if it does not exist."""
    record = await repository.get(resource_id)
    if record is None:
        return None
    return _to_resource(record)


async def get_distinct_categories(repository: ResourceRepository) -> list[str]:
    """Sorted distinct categories across all stored records."""
    return distinct_values(await repository.list_all(), "category")


async def get_distinct_topics(repository: ResourceRepository) -> list[str]:
    """Sorted distinct topics across all stored records."""
    return distinct_values(await repository.list_all(), "topic")


async def get_filter_options(repository: ResourceRepository) -> FilterOptionsResponse:
    """Categories and topics for the filter controls, from a single scan."""
    records = await repository.list_all()
    return FilterOptionsResponse(
        categories=distinct_values(records, "category"),
        topics=distinct_values(records, "topic"),
    )
