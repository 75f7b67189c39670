"""
Backing-store interface for resource records.

Repositories deal only in raw, loosely-typed records. Turning those into
Resource models is the job of the normalizer.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

SortField = Literal["name", "updatedDate"]
SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class RawRecord:
    """A stored record exactly as the backing store returned it."""

    id: str
    data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StoreQuery:
    """
    Structured filters and ordering a store can execute natively.

    `equals` maps stored field names to the value they must equal; all
    constraints are combined with AND. Results are ordered by `sort_field`
    in `direction`, then by id ascending.
    """

    equals: Mapping[str, Any] = field(default_factory=dict)
    sort_field: SortField = "updatedDate"
    direction: SortDirection = "desc"


class ResourceRepository(ABC):
    """Abstract async repository for resource records."""

    async def connect(self) -> None:
        """Open any connection the store needs."""

    async def disconnect(self) -> None:
        """Release the store connection."""

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Report store connectivity."""

    @abstractmethod
    async def add(self, data: Mapping[str, Any]) -> RawRecord:
        """Insert a record, assigning its id and updatedDate."""

    @abstractmethod
    async def get(self, record_id: str) -> RawRecord | None:
        """Fetch one record, or None if it does not exist."""

    @abstractmethod
    async def update(self, record_id: str, data: Mapping[str, Any]) -> bool:
        """Overwrite the given fields and refresh updatedDate. False if missing."""

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Remove a record permanently. False if missing."""

    @abstractmethod
    async def query(self, store_query: StoreQuery) -> list[RawRecord]:
        """Return records matching the structured filters, in order."""

    @abstractmethod
    async def list_all(self) -> list[RawRecord]:
        """Return every stored record, unordered."""
