"""Listing generation handlers."""

import logging

import gradio as gr

from ..formatting import render_result, render_status, render_toasts
from ..models import (
    FailureKind,
    GenerationFailure,
    GenerationStatus,
    GenerationSuccess,
    ListerState,
)
from ..prompt import assemble_request
from ..state import initialize_lister_state
from ..validation import ValidationError, validate_generation_input

logger = logging.getLogger(__name__)

_FAILURE_TITLES = {
    FailureKind.TRANSPORT: "An error occurred",
    FailureKind.RESPONSE_SHAPE: "The response could not be read",
}


async def generate_listing(state: ListerState, keyword: str | None) -> ListerState:
    """Run one generate cycle: validate, send, record the outcome.

    Transitions ``status`` from IDLE/SUCCEEDED/FAILED through GENERATING to
    SUCCEEDED or FAILED.  A call made while GENERATING is refused.  Empty
    input is rejected before any request is made.  Every outcome leaves a
    toast.

    Args:
        state: UI state
        keyword: Raw keyword text from the form

    Returns:
        Updated state
    """
    state = initialize_lister_state(state)
    toasts = state.toast_store

    if state.is_generating:
        toasts.add_toast(title="Please wait", description="A listing is already being generated.")
        return state

    trimmed = (keyword or "").strip()
    try:
        validate_generation_input(trimmed, state.images)
    except ValidationError as e:
        toasts.add_toast(title="Input is missing", description=str(e))
        return state

    state.keyword = trimmed
    state.status = GenerationStatus.GENERATING
    state.result = None
    state.error = None

    outcome = await state.client.generate(assemble_request(trimmed, state.images))

    if isinstance(outcome, GenerationSuccess):
        state.status = GenerationStatus.SUCCEEDED
        state.result = outcome.result
        toasts.add_toast(title="Generation complete", description="Your listing data is ready.")
        logger.info("Listing generated")
        return state

    state.status = GenerationStatus.FAILED
    state.error = outcome
    toasts.add_toast(
        title=_FAILURE_TITLES.get(outcome.kind, "An error occurred"),
        description=outcome.message,
    )
    logger.warning(f"Listing generation failed ({outcome.kind.value}): {outcome.message}")
    return state


def begin_generation_handler(state: ListerState) -> tuple[dict, dict, dict, str]:
    """Lock the form while a request is outstanding.

    Returns:
        Updates for (generate_button, upload, keyword, status_markdown)
    """
    return (
        gr.update(interactive=False, value="Generating..."),
        gr.update(interactive=False),
        gr.update(interactive=False),
        "⏳ **Generating...**",
    )


async def generate_listing_handler(
    keyword: str, state: ListerState
) -> tuple[str, str, str, str, str, str, dict, dict, dict, ListerState]:
    """Gradio handler for the generate button.

    Returns:
        Tuple of (title, tags, description, sns_post, status_markdown,
        toast_html, button_update, upload_update, keyword_update, state)
    """
    try:
        state = await generate_listing(state, keyword)
        title, tags, description, sns_post = render_result(state)
        status = render_status(state)
    except Exception as e:
        # Keep the form usable whatever happened
        logger.error(f"Unexpected error during generation: {e}", exc_info=True)
        state = initialize_lister_state(state)
        state.status = GenerationStatus.FAILED
        state.result = None
        state.error = GenerationFailure(kind=FailureKind.TRANSPORT, message=str(e))
        state.toast_store.add_toast(title="An error occurred", description=str(e))
        title, tags, description, sns_post = render_result(state)
        status = render_status(state)

    return (
        title,
        tags,
        description,
        sns_post,
        status,
        render_toasts(state.toast_store.list_toasts()),
        gr.update(interactive=True, value="Generate listing"),
        gr.update(interactive=True),
        gr.update(interactive=True),
        state,
    )


def refresh_toasts_handler(state: ListerState) -> str:
    """Re-render the toast area (driven by a ``gr.Timer``)."""
    if state is None or state.toast_store is None:
        return ""
    return render_toasts(state.toast_store.list_toasts())
