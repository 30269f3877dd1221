"""Gemini client lifecycle for listing generation.

This module provides :class:`GeminiListingModel`, the single point of
contact with the hosted multimodal model.  It mirrors the lifecycle of a
model manager: the SDK client is created lazily on first use, reused for
every request, and dropped on shutdown.

Key Responsibilities
--------------------
- **Lazy client creation**: ``google.genai`` is imported and the client
  built only when the first generation request arrives.
- **Structured output**: every request asks for ``application/json`` so
  the model replies with the listing object and nothing else.
- **Multimodal contents**: the prompt text is followed by one inline part
  per product image.

The model's reply is returned as raw text.  Parsing and error reporting are
left to the caller (:mod:`smartlister.api.main`) so that unparseable output
can be reported together with the raw text.

Usage
-----
::

    from smartlister.core.config import config
    from smartlister.core.listing_model import GeminiListingModel

    model = GeminiListingModel(config)
    text = await model.generate(
        "Product features: handmade silver ring",
        images=[("image/jpeg", jpeg_bytes)],
        system_instruction=SYSTEM_INSTRUCTION,
    )
"""

from __future__ import annotations

import logging
from typing import Any

from smartlister.core.config import SmartListerConfig

logger = logging.getLogger(__name__)


class ListingModelError(Exception):
    """The generation backend is unavailable or rejected the request."""

    pass


class GeminiListingModel:
    """Lazily constructed wrapper around ``google.genai.Client``.

    Attributes:
        _config (SmartListerConfig):
            Application configuration (API key and model name).
        _client:
            The SDK client, or ``None`` until first use.
    """

    def __init__(self, config: SmartListerConfig) -> None:
        self._config = config
        self._client: Any | None = None

    @property
    def available(self) -> bool:
        """Whether an API key is configured."""
        return bool(self._config.gemini_api_key)

    @property
    def model_name(self) -> str:
        return self._config.gemini_model

    def _get_client(self):
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self._config.gemini_api_key)
            logger.info("Gemini client created for model=%s", self.model_name)
        return self._client

    async def generate(
        self,
        prompt: str,
        images: list[tuple[str, bytes]],
        *,
        system_instruction: str,
    ) -> str:
        """Ask the model for a listing.

        Args:
            prompt: User prompt text.
            images: ``(mime_type, raw_bytes)`` pairs in display order.
            system_instruction: Fixed instruction describing the output schema.

        Returns:
            The model's text reply (expected to be a JSON object).

        Raises:
            ListingModelError: If no API key is configured.
        """
        if not self.available:
            raise ListingModelError("GEMINI_API_KEY is not set")

        from google.genai import types

        client = self._get_client()
        contents: list[Any] = [prompt]
        contents.extend(
            types.Part.from_bytes(data=data, mime_type=mime_type) for mime_type, data in images
        )

        logger.info(
            "Generating listing via Gemini model=%s images=%d prompt_chars=%d",
            self.model_name,
            len(images),
            len(prompt),
        )
        response = await client.aio.models.generate_content(
            model=self.model_name,
            contents=contents,
            config={
                "system_instruction": system_instruction,
                "response_mime_type": "application/json",
            },
        )
        return response.text or ""

    def close(self) -> None:
        """Drop the SDK client."""
        if self._client is not None:
            logger.info("Gemini client released.")
        self._client = None
