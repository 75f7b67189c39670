"""
Resource routes.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Response, status

from ..dependencies import RepositoryDep
from ..models.resources import (
    FilterOptionsResponse,
    Resource,
    ResourceForm,
    ResourceListResponse,
    ResourceType,
    SearchFilters,
    SortOption,
)
from ..services import resource_service
from ..utils.exceptions import ResourceHubError, ResourceNotFoundError, ResourceValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/resources", tags=["resources"])


@router.get("", response_model=ResourceListResponse)
async def list_resources(
    repository: RepositoryDep,
    query: str | None = Query(None, max_length=255, description="Free-text search"),
    type: ResourceType | Literal["All"] | None = Query(None, description="Filter by resource type"),
    category: str | None = Query(None, description="Filter by category (exact match)"),
    topic: str | None = Query(None, description="Filter by topic (exact match)"),
    sortBy: SortOption = Query("date_desc"),
    filterYear: int | Literal["All"] | None = Query(None, description="Content last-updated year"),
    filterMonth: int | Literal["All"] | None = Query(None, description="Content last-updated month"),
):
    """
    List resources with structured filters, free-text search and sorting.

    Never fails because of the store: an unreachable store yields an empty list.
    """
    if isinstance(filterMonth, int) and not 1 <= filterMonth <= 12:
        raise ResourceValidationError(
            {"filterMonth": ["Month must be between 1 and 12."]},
            message="Invalid search filters.",
        )

    filters = SearchFilters(
        query=query,
        type=type,
        category=category,
        topic=topic,
        sortBy=sortBy,
        filterYear=filterYear,
        filterMonth=filterMonth,
    )
    items = await resource_service.get_resources(repository, filters)
    return ResourceListResponse(items=items, total=len(items))


@router.get("/filter-options", response_model=FilterOptionsResponse)
async def get_filter_options(repository: RepositoryDep):
    """Distinct categories and topics for the filter controls."""
    try:
        return await resource_service.get_filter_options(repository)
    except Exception as e:
        logger.error(
            "Error fetching filter options",
            extra={"error": str(e)},
            exc_info=True,
        )
        return FilterOptionsResponse(categories=[], topics=[])


@router.get("/categories", response_model=list[str])
async def get_categories(repository: RepositoryDep):
    """Sorted distinct categories."""
    try:
        return await resource_service.get_distinct_categories(repository)
    except Exception as e:
        logger.error("Error fetching categories", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch categories",
        )


@router.get("/topics", response_model=list[str])
async def get_topics(repository: RepositoryDep):
    """Sorted distinct topics."""
    try:
        return await resource_service.get_distinct_topics(repository)
    except Exception as e:
        logger.error("Error fetching topics", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch topics",
        )


@router.get("/{resource_id}", response_model=Resource)
async def get_resource(resource_id: str, repository: RepositoryDep):
    """Get a single resource."""
    try:
        resource = await resource_service.get_resource_by_id(repository, resource_id)
    except ResourceHubError:
        raise
    except Exception as e:
        logger.error(
            "Error fetching resource",
            extra={"resource_id": resource_id, "error": str(e)},
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch resource",
        )

    if not resource:
        raise ResourceNotFoundError(resource_id)
    return resource


@router.post("", response_model=Resource, status_code=status.HTTP_201_CREATED)
async def create_resource(data: ResourceForm, repository: RepositoryDep):
    """Create a new resource."""
    try:
        return await resource_service.create_resource(repository, data)
    except ResourceHubError:
        raise
    except Exception as e:
        logger.error(
            "Error creating resource",
            extra={"name": data.name, "error": str(e)},
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create resource",
        )


@router.put("/{resource_id}", response_model=Resource)
async def update_resource(resource_id: str, data: ResourceForm, repository: RepositoryDep):
    """Replace a resource's fields."""
    try:
        resource = await resource_service.update_resource(repository, resource_id, data)
    except ResourceHubError:
        raise
    except Exception as e:
        logger.error(
            "Error updating resource",
            extra={"resource_id": resource_id, "error": str(e)},
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update resource",
        )

    if not resource:
        raise ResourceNotFoundError(resource_id)
    return resource


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(resource_id: str, repository: RepositoryDep):
    """Delete a resource."""
    try:
        deleted = await resource_service.delete_resource(repository, resource_id)
    except ResourceHubError:
        raise
    except Exception as e:
        logger.error(
            "Error deleting resource",
            extra={"resource_id": resource_id, "error": str(e)},
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete resource",
        )

    if not deleted:
        raise ResourceNotFoundError(resource_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
