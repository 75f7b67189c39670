"""
In-memory resource repository for local development and tests.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import copy
import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from ..services.normalizer import DEFAULT_NAME, EPOCH
from .base import RawRecord, ResourceRepository, StoreQuery

logger = logging.getLogger(__name__)


def _sort_key(data: Mapping[str, Any], sort_field: str) -> Any:
    """Sort value for a raw record, using the normalizer defaults for bad values."""
    value = data.get(sort_field)
    if sort_field == "name":
        return value if isinstance(value, str) and value else DEFAULT_NAME
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return EPOCH


class InMemoryResourceRepository(ResourceRepository):
    """Dictionary-backed repository. Records are deep-copied on the way in and out."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._records)

    async def health_check(self) -> dict[str, Any]:
        return {"status": "healthy", "type": "memory", "records": len(self._records)}

    def insert_raw(self, data: Mapping[str, Any], record_id: str | None = None) -> str:
        """
        Store a record verbatim, without touching updatedDate.

        Used for imports and tests that need legacy or malformed records.
        """
        record_id = record_id or str(uuid.uuid4())
        self._records[record_id] = copy.deepcopy(dict(data))
        return record_id

    async def add(self, data: Mapping[str, Any]) -> RawRecord:
        record_id = str(uuid.uuid4())
        stored = copy.deepcopy(dict(data))
        stored["updatedDate"] = datetime.now(timezone.utc)
        self._records[record_id] = stored
        logger.debug("Resource record added", extra={"record_id": record_id})
        return RawRecord(id=record_id, data=copy.deepcopy(stored))

    async def get(self, record_id: str) -> RawRecord | None:
        stored = self._records.get(record_id)
        if stored is None:
            return None
        return RawRecord(id=record_id, data=copy.deepcopy(stored))

    async def update(self, record_id: str, data: Mapping[str, Any]) -> bool:
        stored = self._records.get(record_id)
        if stored is None:
            return False
        stored.update(copy.deepcopy(dict(data)))
        stored["updatedDate"] = datetime.now(timezone.utc)
        return True

    async def delete(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    async def query(self, store_query: StoreQuery) -> list[RawRecord]:
        matches = [
            (record_id, stored)
            for record_id, stored in self._records.items()
            if all(stored.get(name) == value for name, value in store_query.equals.items())
        ]

        # Secondary key first; the primary sort is stable in both directions
        matches.sort(key=lambda item: item[0])
        matches.sort(
            key=lambda item: _sort_key(item[1], store_query.sort_field),
            reverse=store_query.direction == "desc",
        )

        return [RawRecord(id=record_id, data=copy.deepcopy(stored)) for record_id, stored in matches]

    async def list_all(self) -> list[RawRecord]:
        return [
            RawRecord(id=record_id, data=copy.deepcopy(stored))
            for record_id, stored in self._records.items()
        ]
