"""
AI metadata inference for resources.

Asks Gemini to guess how long a resource takes to consume and when its
content was last updated, given only its name and URL. The output is a
best-effort suggestion for the resource form; nothing in the catalog depends
on it being present or correct.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
from typing import Any

from google import genai
from google.genai import types

from ..config import get_settings
from ..models.resources import MANUAL_LAST_UPDATE_PATTERN, ResourceMetadataGuess
from ..utils.exceptions import MetadataInferenceError

logger = logging.getLogger(__name__)

METADATA_PROMPT = """You are an intelligent web content analyzer. Analyze the resource name and URL below and infer details about its content.

Resource Name: {name}
Resource URL: {url}

Provide your best estimate for these fields:
1. duration: the time required to consume this resource (for example "3.5 hours of video on demand" or "30 minutes"). It usually follows a "This course includes:" or "Este curso incluye:" label. Return "Xh" for hours and "Xm" for minutes.
2. manualLastUpdate: the date the content was last updated, strictly in MM/YYYY format. It usually follows a "Last updated" or "Última actualización" label.

If you cannot confidently determine a value, leave it empty. Do not invent information. Respond only with the requested JSON."""


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def sanitize_guess(guess: ResourceMetadataGuess) -> ResourceMetadataGuess:
    """Drop blank values and any manualLastUpdate that is not MM/YYYY."""
    duration = _clean(guess.duration)
    manual_last_update = _clean(guess.manualLastUpdate)
    if manual_last_update and not MANUAL_LAST_UPDATE_PATTERN.match(manual_last_update):
        logger.info(
            "Discarding inferred manualLastUpdate with unexpected format",
            extra={"value": manual_last_update},
        )
        manual_last_update = None
    return ResourceMetadataGuess(duration=duration, manualLastUpdate=manual_last_update)


def _parse_response(response: Any) -> ResourceMetadataGuess:
    parsed = getattr(response, "parsed", None)
    if isinstance(parsed, ResourceMetadataGuess):
        return parsed
    if isinstance(parsed, dict):
        return ResourceMetadataGuess.model_validate(parsed)

    text = (getattr(response, "text", None) or "").strip()
    if not text:
        return ResourceMetadataGuess()
    # Remove markdown code fence if present
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return ResourceMetadataGuess.model_validate_json(text.strip())


class MetadataInferenceService:
    """Gemini-backed metadata inference."""

    def __init__(self, client: Any = None, model: str | None = None) -> None:
        self._client = client
        self._model = model

    @property
    def model(self) -> str:
        return self._model or get_settings().GEMINI_MODEL

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = get_settings().GEMINI_API_KEY
            if not api_key:
                raise MetadataInferenceError(detail="GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def infer_metadata(self, name: str, url: str) -> ResourceMetadataGuess:
        """
        Infer duration and last-update date for a resource.

        Raises:
            MetadataInferenceError: if the provider is not configured, fails,
                or returns something that is not the expected JSON
        """
        client = self._get_client()
        prompt = METADATA_PROMPT.format(name=name, url=url)

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=ResourceMetadataGuess,
                    temperature=0.0,
                ),
            )
            guess = _parse_response(response)
        except Exception as e:
            logger.error(f"Metadata inference failed for {url}: {e}", exc_info=True)
            raise MetadataInferenceError(detail=str(e)) from e

        return sanitize_guess(guess)


# Global service instance
metadata_service = MetadataInferenceService()
