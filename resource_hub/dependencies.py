"""
Dependency injection system.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from typing import Annotated

from fastapi import Depends

from .config import Settings, get_settings
from .repositories.base import ResourceRepository
from .repositories.memory_repository import InMemoryResourceRepository
from .services.metadata_service import MetadataInferenceService, metadata_service

logger = logging.getLogger(__name__)

# Common dependencies
SettingsDep = Annotated[Settings, Depends(get_settings)]

_repository: ResourceRepository | None = None


def build_repository(settings: Settings) -> ResourceRepository:
    """Create the repository selected by STORE_BACKEND."""
    if settings.STORE_BACKEND == "prisma":
        # Imported here so the memory backend works without a generated Prisma client
        from .repositories.prisma_repository import PrismaResourceRepository

        return PrismaResourceRepository()
    return InMemoryResourceRepository()


def get_repository() -> ResourceRepository:
    """Get the process-wide repository, creating it on first use."""
    global _repository
    if _repository is None:
        settings = get_settings()
        _repository = build_repository(settings)
        logger.info(
            "Resource repository initialized",
            extra={"backend": settings.STORE_BACKEND},
        )
    return _repository


def reset_repository() -> None:
    """Forget the cached repository (used on shutdown and in tests)."""
    global _repository
    _repository = None


RepositoryDep = Annotated[ResourceRepository, Depends(get_repository)]


def get_metadata_service() -> MetadataInferenceService:
    """Get metadata inference service dependency."""
    return metadata_service


MetadataServiceDep = Annotated[MetadataInferenceService, Depends(get_metadata_service)]
