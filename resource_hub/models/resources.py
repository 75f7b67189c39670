"""
Resource models for request/response schemas.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    computed_field,
    field_validator,
)


class ResourceType(str, Enum):
    """Resource type enum values. The first member is the fallback for unknown values."""

    ARTICLE = "Article"
    VIDEO = "Video"
    COURSE = "Course"
    TOOL = "Tool"
    DOCUMENTATION = "Documentation"


RESOURCE_TYPES: list[ResourceType] = list(ResourceType)

# Sentinel meaning "no constraint" for a structured filter
ALL = "All"

SortOption = Literal["name_asc", "name_desc", "date_asc", "date_desc"]
DEFAULT_SORT: SortOption = "date_desc"

# MM/YYYY, month 01-12
MANUAL_LAST_UPDATE_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/\d{4}$")

_url_adapter = TypeAdapter(AnyUrl)


def parse_manual_last_update(value: Any) -> tuple[int, int] | None:
    """Split a MM/YYYY string into (month, year), or None if it is not one."""
    if not isinstance(value, str) or not MANUAL_LAST_UPDATE_PATTERN.match(value):
        return None
    month, year = value.split("/")
    return int(month), int(year)


def _as_whole_number(value: Any) -> int | None:
    # Imported documents often store numbers as doubles (1.0, 2024.0)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def format_manual_last_update(month: Any, year: Any) -> str | None:
    """Build the canonical MM/YYYY string from numeric parts, or None if they are invalid."""
    month = _as_whole_number(month)
    year = _as_whole_number(year)
    if month is None or year is None:
        return None
    if not 1 <= month <= 12 or not 0 <= year <= 9999:
        return None
    return f"{month:02d}/{year:04d}"


def _is_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


# --------------------------------------------------
# Domain / Response Models
# --------------------------------------------------


class Resource(BaseModel):
    """A catalog entry as served to clients."""

    id: str
    name: str
    relativeUrl: str = ""
    fullUrl: str
    tags: list[str] = Field(default_factory=list)
    duration: str = ""
    type: ResourceType
    category: str
    topic: str
    updatedDate: datetime
    manualLastUpdate: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def manualLastUpdateMonth(self) -> int | None:
        parts = parse_manual_last_update(self.manualLastUpdate)
        return parts[0] if parts else None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def manualLastUpdateYear(self) -> int | None:
        parts = parse_manual_last_update(self.manualLastUpdate)
        return parts[1] if parts else None


class ResourceListResponse(BaseModel):
    """List of resources matching a search."""

    items: list[Resource]
    total: int


class FilterOptionsResponse(BaseModel):
    """Distinct values used to populate the filter controls."""

    categories: list[str]
    topics: list[str]


# --------------------------------------------------
# Request Models
# --------------------------------------------------


class SearchFilters(BaseModel):
    """
    Filter and sort specification for listing resources.

    Any structured field left unset (or set to "All") places no constraint.
    """

    query: str | None = Field(None, max_length=255)
    type: ResourceType | Literal["All"] | None = None
    category: str | None = None
    topic: str | None = None
    sortBy: SortOption = DEFAULT_SORT
    filterYear: int | Literal["All"] | None = None
    filterMonth: Annotated[int, Field(ge=1, le=12)] | Literal["All"] | None = None


class ResourceForm(BaseModel):
    """
    Caller input for creating or updating a resource.

    Tags may be sent either as a list or as a comma-separated string.
    """

    name: str
    relativeUrl: str | None = None
    fullUrl: str
    tags: list[str]
    duration: str | None = None
    type: ResourceType
    category: str
    topic: str
    manualLastUpdate: str | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Name must be at least 3 characters long.")
        return value

    @field_validator("fullUrl")
    @classmethod
    def _validate_full_url(cls, value: str) -> str:
        value = value.strip()
        if not _is_url(value):
            raise ValueError("Please enter a valid URL.")
        return value

    @field_validator("relativeUrl")
    @classmethod
    def _validate_relative_url(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not _is_url(value):
            raise ValueError("Please enter a valid URL.")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            cleaned = [tag.strip() if isinstance(tag, str) else tag for tag in value]
            cleaned = [tag for tag in cleaned if tag != ""]
            if not cleaned:
                raise ValueError("At least one tag is required.")
            return cleaned
        return value

    @field_validator("duration")
    @classmethod
    def _blank_duration(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Category must be at least 2 characters long.")
        return value

    @field_validator("topic")
    @classmethod
    def _validate_topic(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Topic must be at least 2 characters long.")
        return value

    @field_validator("manualLastUpdate")
    @classmethod
    def _validate_manual_last_update(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not MANUAL_LAST_UPDATE_PATTERN.match(value):
            raise ValueError("Format must be MM/YYYY")
        return value


# --------------------------------------------------
# Metadata Inference Models
# --------------------------------------------------


class MetadataInferenceRequest(BaseModel):
    """Name and URL of the resource to analyze."""

    name: str = Field("", max_length=300)
    url: str = Field("", max_length=2000)


class ResourceMetadataGuess(BaseModel):
    """Best-effort metadata inferred from a resource's name and URL."""

    duration: str | None = Field(
        None,
        description='The estimated time to consume the resource (e.g., "15m", "2h").',
    )
    manualLastUpdate: str | None = Field(
        None,
        description="The estimated last update date of the content in MM/YYYY format.",
    )


class MetadataInferenceResponse(BaseModel):
    """Outcome of a metadata inference request."""

    success: bool
    data: ResourceMetadataGuess | None = None
    message: str | None = None
