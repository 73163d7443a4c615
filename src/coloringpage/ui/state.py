"""State management utilities for the Coloring Page Creator UI.

This module handles the initialization and reset of per-session UI state:
the generation client and the cached last-session store.
"""

import logging

from coloringpage.core.client import ImageTransformClient
from coloringpage.core.config import config
from coloringpage.core.session_store import SessionStore

from .models import UIState

logger = logging.getLogger(__name__)


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Creates the ImageTransformClient and SessionStore from the global
    configuration if they are missing.  No network call is made here; the
    Gemini SDK client is itself created on the first generation.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        logger.debug("UIState already initialized")
        return state

    logger.info("Initializing UIState components...")

    if state.client is None:
        logger.info(f"Initializing ImageTransformClient for model {config.model_id}")
        state.client = ImageTransformClient(config)

    if state.session_store is None:
        logger.info(f"Initializing SessionStore at {config.session_file}")
        state.session_store = SessionStore(config.session_file)

    logger.info(f"UIState initialization complete: {state}")
    return state


def reset_ui_state(state: UIState) -> UIState:
    """Forget the current upload and result ("Choose Another").

    Args:
        state: UI state

    Returns:
        Updated state
    """
    state = initialize_ui_state(state)
    state.session_store.clear()
    state.last_output_path = None
    logger.info("Cleared cached session")
    return state
