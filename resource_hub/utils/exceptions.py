"""
Application exception hierarchy.

Every error raised on purpose by the service derives from ResourceHubError,
which carries everything the global exception handler needs to build a
standardized ErrorResponse.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from collections.abc import Iterable
from typing import Any


class ResourceHubError(Exception):
    """
    Base class for application errors.

    Attributes:
        message: User-friendly error message safe for display
        code: Application-specific error code for programmatic handling
        status_code: HTTP status code to respond with
        detail: Optional internal details (only exposed in DEBUG mode)
    """

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail


class ResourceValidationError(ResourceHubError):
    """Caller input failed validation; carries a field -> messages mapping."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(
        self,
        errors: dict[str, list[str]],
        message: str = "Validation failed.",
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.errors = errors


class ResourceNotFoundError(ResourceHubError):
    """The targeted resource does not exist."""

    status_code = 404
    code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Resource '{resource_id}' not found")
        self.resource_id = resource_id


class StoreUnavailableError(ResourceHubError):
    """The backing store could not be reached or rejected the operation."""

    status_code = 503
    code = "STORE_UNAVAILABLE"

    def __init__(self, operation: str, detail: str | None = None) -> None:
        super().__init__(
            "The resource store is temporarily unavailable. Please try again later.",
            detail=detail,
        )
        self.operation = operation


class MetadataInferenceError(ResourceHubError):
    """The metadata inference provider failed or is not configured."""

    status_code = 502
    code = "METADATA_INFERENCE_FAILED"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            "An unexpected error occurred during the scraping process.",
            detail=detail,
        )


def field_errors_from(errors: Iterable[dict[str, Any]]) -> dict[str, list[str]]:
    """
    Flatten pydantic error dicts into a field -> messages mapping.

    Location prefixes added by FastAPI ("body", "query", "path") are dropped so
    that service-level and request-level validation report the same keys.
    Errors without a field location are reported under "_form".
    """
    flattened: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        field = loc[0] if loc else "_form"
        message = str(error.get("msg", "Invalid value"))
        # pydantic prefixes custom ValueError messages
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        flattened.setdefault(field, []).append(message)
    return flattened
