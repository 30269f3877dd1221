"""Rendering helpers that turn UI state into component values."""

import html
import io
import logging

from PIL import Image

from smartlister.core.images import decode_data_uri

from .models import FailureKind, GenerationStatus, ListerState
from .notifications import Toast
from .validation import listing_warnings

logger = logging.getLogger(__name__)

_FAILURE_LABELS = {
    FailureKind.VALIDATION: "Input problem",
    FailureKind.PREPROCESSING: "Image processing failed",
    FailureKind.TRANSPORT: "Generation failed",
    FailureKind.RESPONSE_SHAPE: "Unreadable response",
}


def render_toasts(toasts: list[Toast]) -> str:
    """Render live toasts as HTML for the toast area.

    Args:
        toasts: Live toasts in display order

    Returns:
        HTML string (empty when there is nothing to show)
    """
    if not toasts:
        return ""

    items = []
    for toast in toasts:
        parts = []
        if toast.title:
            parts.append(f'<div class="toast-title">{html.escape(toast.title)}</div>')
        if toast.description:
            parts.append(f'<div class="toast-description">{html.escape(toast.description)}</div>')
        items.append(f'<div class="toast" data-toast-id="{toast.id}">{"".join(parts)}</div>')

    return f'<div class="toast-area">{"".join(items)}</div>'


def render_status(state: ListerState) -> str:
    """Render the generation status as markdown."""
    if state.status == GenerationStatus.GENERATING:
        return "⏳ **Generating...**"

    if state.status == GenerationStatus.SUCCEEDED and state.result is not None:
        warnings = listing_warnings(state.result)
        if warnings:
            return "✅ **Listing generated**\n\n" + "\n".join(f"- ⚠️ {w}" for w in warnings)
        return "✅ **Listing generated**"

    if state.status == GenerationStatus.FAILED and state.error is not None:
        label = _FAILURE_LABELS.get(state.error.kind, "Error")
        text = f"❌ **{label}**: {state.error.message}"
        if state.error.raw is not None:
            text += f"\n\n```\n{state.error.raw}\n```"
        return text

    count = len(state.images)
    if count:
        return f"{count} image(s) selected."
    return "Add product images or describe the product, then click **Generate listing**."


def render_result(state: ListerState) -> tuple[str, str, str, str]:
    """Return the title, tags, description and social post field values.

    Tags are joined with ``", "`` for copying.  All fields are empty unless
    the last request succeeded.
    """
    if state.status != GenerationStatus.SUCCEEDED or state.result is None:
        return "", "", "", ""

    result = state.result
    tags = ", ".join(str(tag) for tag in result.tags)
    return result.title, tags, result.description, result.sns_post


def image_previews(images: list[str]) -> list[Image.Image]:
    """Decode held images into thumbnails for the gallery component.

    Images that cannot be decoded are skipped.
    """
    previews = []
    for encoded in images:
        try:
            _, data = decode_data_uri(encoded)
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                previews.append(img.copy())
        except (ValueError, OSError) as e:
            logger.warning(f"Could not render image preview: {e}")
    return previews
