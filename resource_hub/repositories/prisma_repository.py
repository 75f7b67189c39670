"""
Prisma (PostgreSQL) resource repository.

The Resource table keeps every column nullable so that legacy or partially
written rows can still be loaded and normalized.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from prisma.errors import PrismaError, RecordNotFoundError

from ..core.database import check_db_health, connect_db, disconnect_db, get_db
from ..utils.exceptions import StoreUnavailableError
from .base import RawRecord, ResourceRepository, StoreQuery

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

# Columns the caller may write; id and updatedDate are managed by the database
WRITABLE_FIELDS = (
    "name",
    "relativeUrl",
    "fullUrl",
    "tags",
    "duration",
    "type",
    "category",
    "topic",
    "manualLastUpdateString",
    "manualLastUpdateMonth",
    "manualLastUpdateYear",
)


def _writable(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key in WRITABLE_FIELDS}


def _to_raw(record: Any) -> RawRecord:
    return RawRecord(id=record.id, data=record.model_dump(exclude={"id"}))


class PrismaResourceRepository(ResourceRepository):
    """Repository backed by the Prisma `Resource` model."""

    def __init__(self, db_client: "Prisma | None" = None) -> None:
        self.db = db_client if db_client is not None else get_db()

    async def connect(self) -> None:
        await connect_db(self.db)

    async def disconnect(self) -> None:
        await disconnect_db(self.db)

    async def health_check(self) -> dict[str, Any]:
        return await check_db_health(self.db)

    async def add(self, data: Mapping[str, Any]) -> RawRecord:
        try:
            record = await self.db.resource.create(data=_writable(data))
        except PrismaError as e:
            logger.error(f"Failed to create resource record: {e}", exc_info=True)
            raise StoreUnavailableError("add", detail=str(e)) from e
        return _to_raw(record)

    async def get(self, record_id: str) -> RawRecord | None:
        try:
            record = await self.db.resource.find_unique(where={"id": record_id})
        except PrismaError as e:
            logger.error(f"Failed to fetch resource {record_id}: {e}", exc_info=True)
            raise StoreUnavailableError("get", detail=str(e)) from e
        return _to_raw(record) if record else None

    async def update(self, record_id: str, data: Mapping[str, Any]) -> bool:
        try:
            # updatedDate is refreshed by @updatedAt
            record = await self.db.resource.update(
                where={"id": record_id},
                data=_writable(data),
            )
        except RecordNotFoundError:
            return False
        except PrismaError as e:
            logger.error(f"Failed to update resource {record_id}: {e}", exc_info=True)
            raise StoreUnavailableError("update", detail=str(e)) from e
        return record is not None

    async def delete(self, record_id: str) -> bool:
        try:
            record = await self.db.resource.delete(where={"id": record_id})
        except RecordNotFoundError:
            return False
        except PrismaError as e:
            logger.error(f"Failed to delete resource {record_id}: {e}", exc_info=True)
            raise StoreUnavailableError("delete", detail=str(e)) from e
        return record is not None

    async def query(self, store_query: StoreQuery) -> list[RawRecord]:
        try:
            records = await self.db.resource.find_many(
                where=dict(store_query.equals),
                order=[
                    {store_query.sort_field: store_query.direction},
                    {"id": "asc"},
                ],
            )
        except PrismaError as e:
            logger.error(f"Failed to query resources: {e}", exc_info=True)
            raise StoreUnavailableError("query", detail=str(e)) from e
        return [_to_raw(record) for record in records]

    async def list_all(self) -> list[RawRecord]:
        try:
            records = await self.db.resource.find_many()
        except PrismaError as e:
            logger.error(f"Failed to list resources: {e}", exc_info=True)
            raise StoreUnavailableError("list_all", detail=str(e)) from e
        return [_to_raw(record) for record in records]
