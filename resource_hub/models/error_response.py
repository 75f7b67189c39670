"""
Error body shared by every failing endpoint.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """
    JSON body returned by the exception handlers.

    `errors` is only present for validation failures and maps each form field
    to its messages (`_form` for errors not tied to one field). `detail` is
    only filled in when DEBUG is on.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status_code": 400,
                "code": "VALIDATION_ERROR",
                "message": "Validation failed. Could not create resource.",
                "errors": {
                    "name": ["Name must be at least 3 characters long."],
                    "tags": ["At least one tag is required."],
                },
            }
        }
    )

    status_code: int = Field(..., description="HTTP status code")
    code: str = Field(..., description="Machine-readable error code, e.g. RESOURCE_NOT_FOUND")
    message: str = Field(..., description="Message safe to show to the user")
    detail: str | None = Field(None, description="Debug detail, omitted unless DEBUG is on")
    errors: dict[str, list[str]] | None = Field(None, description="Per-field validation messages")
