"""State management utilities for the Smart Lister UI.

This module handles the initialization and teardown of per-session UI
state: the toast store and the generation client.
"""

import logging

from smartlister.core.config import config

from .client import GenerationClient
from .models import ListerState
from .notifications import ToastStore

logger = logging.getLogger(__name__)


def initialize_lister_state(state: ListerState | None = None) -> ListerState:
    """Initialize or ensure UI state is ready.

    Args:
        state: Existing ListerState or None

    Returns:
        Initialized ListerState instance
    """
    if state is None:
        logger.info("Creating new ListerState")
        state = ListerState()

    if state.is_initialized():
        return state

    if state.toast_store is None:
        state.toast_store = ToastStore(default_duration=config.toast_duration_ms)

    if state.client is None:
        state.client = GenerationClient(config.generate_endpoint, timeout=config.request_timeout)

    logger.info(f"ListerState initialization complete: {state}")
    return state


def cleanup_lister_state(state: ListerState | None) -> None:
    """Release session resources.

    Registered as the ``delete_callback`` of the session's ``gr.State``.

    Args:
        state: UI state to clean up
    """
    if state is None:
        return

    logger.info("Cleaning up ListerState resources")

    if state.toast_store is not None:
        state.toast_store.close()

    state.toast_store = None
    state.client = None
    state.images.clear()
    state.result = None
    state.error = None
