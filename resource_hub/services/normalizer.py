"""
Record normalization.

Turns a raw stored record (any shape, possibly missing fields, wrong types
or legacy layouts) into a fully populated Resource. Normalization never
fails: every bad value is replaced by a default, and anomalies are reported
as diagnostics returned next to the result so callers decide how to surface
them.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..models.resources import (
    RESOURCE_TYPES,
    Resource,
    ResourceType,
    format_manual_last_update,
    parse_manual_last_update,
)
from ..repositories.base import RawRecord

DEFAULT_NAME = "Unnamed Resource"
DEFAULT_FULL_URL = "https://example.com/invalid-url"
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_TOPIC = "General"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal data-quality note about one field of one record."""

    record_id: str
    field: str
    message: str


@dataclass
class DiagnosticsCollector:
    """Accumulates diagnostics across one or more normalizations."""

    items: list[Diagnostic] = field(default_factory=list)

    def add(self, record_id: str, field_name: str, message: str) -> None:
        self.items.append(Diagnostic(record_id=record_id, field=field_name, message=message))

    def extend(self, diagnostics: "DiagnosticsCollector | list[Diagnostic]") -> None:
        self.items.extend(diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)


@dataclass(frozen=True)
class NormalizationResult:
    resource: Resource
    diagnostics: list[Diagnostic]


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _normalize_type(record_id: str, value: Any, diagnostics: DiagnosticsCollector) -> ResourceType:
    default = RESOURCE_TYPES[0]
    if value is None:
        return default
    try:
        return ResourceType(value)
    except ValueError:
        diagnostics.add(
            record_id,
            "type",
            f"Invalid type {value!r}. Defaulting to '{default.value}'.",
        )
        return default


def _normalize_updated_date(
    record_id: str, value: Any, diagnostics: DiagnosticsCollector
) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if value is not None:
        diagnostics.add(
            record_id,
            "updatedDate",
            f"Invalid updatedDate {value!r}. Defaulting to epoch.",
        )
    return EPOCH


def _normalize_tags(record_id: str, value: Any, diagnostics: DiagnosticsCollector) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    tags = [tag for tag in value if _non_empty_string(tag) and tag.strip()]
    if len(tags) != len(value):
        diagnostics.add(
            record_id,
            "tags",
            f"Dropped {len(value) - len(tags)} tag(s) that were not non-empty strings.",
        )
    return tags


def _normalize_manual_last_update(
    record_id: str, data: Mapping[str, Any], diagnostics: DiagnosticsCollector
) -> str | None:
    stored = data.get("manualLastUpdateString")
    if stored:
        if parse_manual_last_update(stored) is not None:
            return stored
        diagnostics.add(
            record_id,
            "manualLastUpdate",
            f"Invalid manualLastUpdateString {stored!r}. Expected MM/YYYY.",
        )

    month = data.get("manualLastUpdateMonth")
    year = data.get("manualLastUpdateYear")
    if month is not None and year is not None:
        return format_manual_last_update(month, year)
    return None


def normalize_record(
    record: RawRecord, diagnostics: DiagnosticsCollector | None = None
) -> NormalizationResult:
    """
    Build a Resource from a raw record.

    Args:
        record: The raw record from the store
        diagnostics: Optional collector shared across several records; the
            diagnostics raised for this record are appended to it as well

    Returns:
        NormalizationResult with the resource and this record's diagnostics
    """
    local = DiagnosticsCollector()
    data: Mapping[str, Any] = record.data if isinstance(record.data, Mapping) else {}
    record_id = record.id

    name = data.get("name")
    if not _non_empty_string(name):
        local.add(record_id, "name", f"Missing name. Defaulting to '{DEFAULT_NAME}'.")
        name = DEFAULT_NAME

    full_url = data.get("fullUrl")
    if not _non_empty_string(full_url):
        local.add(record_id, "fullUrl", f"Missing fullUrl. Defaulting to '{DEFAULT_FULL_URL}'.")
        full_url = DEFAULT_FULL_URL

    relative_url = data.get("relativeUrl")
    duration = data.get("duration")
    category = data.get("category")
    topic = data.get("topic")

    resource = Resource(
        id=record_id,
        name=name,
        relativeUrl=relative_url if isinstance(relative_url, str) else "",
        fullUrl=full_url,
        tags=_normalize_tags(record_id, data.get("tags"), local),
        duration=duration if isinstance(duration, str) else "",
        type=_normalize_type(record_id, data.get("type"), local),
        category=category if _non_empty_string(category) else DEFAULT_CATEGORY,
        topic=topic if _non_empty_string(topic) else DEFAULT_TOPIC,
        updatedDate=_normalize_updated_date(record_id, data.get("updatedDate"), local),
        manualLastUpdate=_normalize_manual_last_update(record_id, data, local),
    )

    if diagnostics is not None:
        diagnostics.extend(local)

    return NormalizationResult(resource=resource, diagnostics=list(local))
