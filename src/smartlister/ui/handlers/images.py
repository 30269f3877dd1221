"""Image selection handlers."""

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from PIL import Image

from smartlister.core.config import SmartListerConfig, config
from smartlister.core.images import ImageProcessingError

from ..formatting import image_previews, render_status, render_toasts
from ..images import preprocess_images
from ..models import ListerState
from ..state import initialize_lister_state
from ..validation import ValidationError, validate_image_count

logger = logging.getLogger(__name__)

Preprocessor = Callable[[list[str | Path | bytes], SmartListerConfig], Awaitable[list[str]]]


async def add_images(
    state: ListerState,
    files: list[str | Path | bytes],
    preprocess: Preprocessor = preprocess_images,
) -> ListerState:
    """Compress a new selection and append it to the held images.

    The image limit is checked before any compression starts.  A failure
    in any single image discards the whole selection.

    Args:
        state: UI state
        files: Selected upload paths (or raw bytes)
        preprocess: Batch compressor (injectable for tests)

    Returns:
        Updated state
    """
    state = initialize_lister_state(state)
    toasts = state.toast_store

    if not files:
        return state

    if state.is_generating:
        toasts.add_toast(
            title="Please wait",
            description="Images cannot be changed while a listing is being generated.",
        )
        return state

    try:
        validate_image_count(len(state.images), len(files), config.max_images)
    except ValidationError as e:
        logger.info(f"Rejected image selection: {e}")
        toasts.add_toast(title=f"Up to {config.max_images} images", description=str(e))
        return state

    try:
        encoded = await preprocess(files, config)
    except ImageProcessingError as e:
        logger.error(f"Image preprocessing failed: {e}")
        toasts.add_toast(
            title="Image processing failed",
            description=(
                "An error occurred while compressing or reading the images. "
                "Please try again later."
            ),
        )
        return state

    state.images = [*state.images, *encoded]
    logger.info(f"Added {len(encoded)} image(s); holding {len(state.images)}")
    return state


def remove_image(state: ListerState, index: int | None) -> ListerState:
    """Remove the held image at ``index``.  Out-of-range indices are ignored."""
    state = initialize_lister_state(state)
    if index is None or state.is_generating:
        return state
    if 0 <= index < len(state.images):
        state.images = [img for i, img in enumerate(state.images) if i != index]
    return state


async def upload_images_handler(
    files: list[str] | None, state: ListerState
) -> tuple[list[Image.Image], str, str, None, ListerState]:
    """Gradio handler for the image upload control.

    Returns:
        Tuple of (gallery_previews, status_markdown, toast_html, cleared_upload, state)
    """
    state = await add_images(state, list(files or []))
    return (
        image_previews(state.images),
        render_status(state),
        render_toasts(state.toast_store.list_toasts()),
        None,
        state,
    )


def remove_image_handler(
    selected_index: int | None, state: ListerState
) -> tuple[list[Image.Image], str, None, ListerState]:
    """Gradio handler for the remove-selected-image button.

    Returns:
        Tuple of (gallery_previews, status_markdown, cleared_selection, state)
    """
    state = remove_image(state, selected_index)
    return image_previews(state.images), render_status(state), None, state
