"""Data models and constants for the Coloring Page Creator UI."""

import logging
from dataclasses import dataclass
from typing import Any

from coloringpage.core.models import DetailLevel, LineThickness

logger = logging.getLogger(__name__)


@dataclass
class UIState:
    """Session state for the Gradio UI.

    Each browser session gets its own UIState instance.  The generation
    client and the session store are created lazily by
    :func:`~coloringpage.ui.state.initialize_ui_state`.

    Attributes
    ----------
    client : Any | None
        ImageTransformClient instance
    session_store : Any | None
        SessionStore instance caching the last upload and result
    last_output_path : str | None
        PNG file of the most recent coloring page (for download)
    """

    client: Any | None = None  # ImageTransformClient instance
    session_store: Any | None = None  # SessionStore instance
    last_output_path: str | None = None

    def is_initialized(self) -> bool:
        """Check if the state has been initialized with core components.

        Returns:
            True if the client and session store are available
        """
        return self.client is not None and self.session_store is not None

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"UIState(initialized={self.is_initialized()}, "
            f"last_output={self.last_output_path})"
        )


# Radio choices as (label, value) pairs
THICKNESS_CHOICES = [(option.label, option.value) for option in LineThickness]
DETAIL_CHOICES = [(option.label, option.value) for option in DetailLevel]

DEFAULT_THICKNESS = LineThickness.MEDIUM.value
DEFAULT_DETAIL = DetailLevel.MEDIUM.value

# User-facing messages
MISSING_UPLOAD_MESSAGE = "Please upload an image first."
INVALID_IMAGE_MESSAGE = "Please upload a valid image file (PNG, JPG, etc.)."
READY_MESSAGE = "*Upload a photo to convert it into a fun coloring page.*"
UPLOADED_MESSAGE = "✅ **Your image is ready.** Let's make it a coloring page!"
SUCCESS_MESSAGE = (
    "✅ **Your Coloring Page is Ready!**\n\n"
    "Download your new creation or start over with a new image."
)
RESTORED_MESSAGE = "↩️ Restored your last session."
