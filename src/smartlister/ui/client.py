"""HTTP client for the generation endpoint.

:class:`GenerationClient` performs one request/response exchange per call
and reports the outcome as a value rather than raising:

- :class:`~smartlister.ui.models.GenerationSuccess` with the listing, or
- :class:`~smartlister.ui.models.GenerationFailure` whose ``kind`` tells a
  transport problem apart from a reply that could not be parsed.

There is no retry and, by default, no timeout.  Abandoning the awaiting
task (page reload, session teardown) simply discards the result.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .models import FailureKind, GenerationFailure, GenerationOutcome, GenerationSuccess, ListingResult

logger = logging.getLogger(__name__)

_GENERIC_FAILURE = "Generation failed."


class GenerationClient:
    """Client for ``POST /api/generate``.

    Attributes:
        endpoint: Absolute URL of the generation endpoint
        timeout: Seconds to wait for the whole exchange (None = no limit)
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: Absolute URL of the generation endpoint
            timeout: Request timeout in seconds, or None to wait indefinitely
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    async def generate(self, request: dict[str, Any]) -> GenerationOutcome:
        """Send one generation request.

        Args:
            request: Body produced by :func:`smartlister.ui.prompt.assemble_request`

        Returns:
            GenerationSuccess with the listing, or GenerationFailure
        """
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(self.endpoint, json=request)
        except httpx.HTTPError as e:
            logger.error(f"Generation request failed: {e!r}")
            return GenerationFailure(kind=FailureKind.TRANSPORT, message=str(e) or _GENERIC_FAILURE)

        if not response.is_success:
            logger.error(f"Generation endpoint returned {response.status_code}")
            return GenerationFailure(
                kind=FailureKind.TRANSPORT,
                message=response.text or _GENERIC_FAILURE,
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            logger.error("Generation endpoint returned a body that is not a JSON object")
            return GenerationFailure(
                kind=FailureKind.RESPONSE_SHAPE,
                message="The response could not be parsed.",
                raw=response.text,
            )

        return GenerationSuccess(result=ListingResult.from_payload(payload))
