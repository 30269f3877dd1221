"""Request body assembly for the generation endpoint."""

from __future__ import annotations

from typing import Any


def assemble_request(keyword: str | None, images: list[str] | None) -> dict[str, Any]:
    """Shape the ``POST /api/generate`` body from the current inputs.

    Empty values are omitted instead of being sent as ``""`` or ``[]``.
    No validation happens here; callers make sure at least one field is
    present before sending.

    Args:
        keyword: Keyword text (trimmed here)
        images: Encoded images, data URIs or bare base64, passed through as-is

    Returns:
        Dictionary with ``keyword`` and/or ``images`` keys
    """
    request: dict[str, Any] = {}

    kept_images = [image for image in images or [] if image]
    if kept_images:
        request["images"] = kept_images

    trimmed = (keyword or "").strip()
    if trimmed:
        request["keyword"] = trimmed

    return request
