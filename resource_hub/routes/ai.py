"""
AI-assisted resource routes.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging

from fastapi import APIRouter

from ..dependencies import MetadataServiceDep
from ..models.resources import MetadataInferenceRequest, MetadataInferenceResponse
from ..utils.exceptions import MetadataInferenceError
from ..utils.metrics import METADATA_INFERENCE_COUNTER

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


@router.post("/infer-metadata", response_model=MetadataInferenceResponse)
async def infer_metadata(request: MetadataInferenceRequest, service: MetadataServiceDep):
    """
    Guess a resource's duration and last content update from its name and URL.

    Always answers 200; `success` is false when nothing useful was found or
    the provider failed.
    """
    name = request.name.strip()
    url = request.url.strip()
    if not name or not url:
        return MetadataInferenceResponse(
            success=False,
            message="URL and name are required for scraping.",
        )

    try:
        guess = await service.infer_metadata(name=name, url=url)
    except MetadataInferenceError as e:
        METADATA_INFERENCE_COUNTER.labels(outcome="error").inc()
        logger.error(
            "Metadata inference failed",
            extra={"url": url, "detail": e.detail},
        )
        return MetadataInferenceResponse(success=False, message=e.message)

    if not guess.duration and not guess.manualLastUpdate:
        METADATA_INFERENCE_COUNTER.labels(outcome="empty").inc()
        return MetadataInferenceResponse(
            success=False,
            message="Could not extract any new information from the resource.",
        )

    METADATA_INFERENCE_COUNTER.labels(outcome="found").inc()
    return MetadataInferenceResponse(success=True, data=guess)
