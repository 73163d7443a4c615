"""Event handlers for the Coloring Page Creator UI.

Every handler takes the per-session :class:`UIState` last and returns it last,
so Gradio keeps one state object per browser session.  Handlers never raise:
validation problems and generation failures are rendered into the status
markdown.
"""

import logging
from io import BytesIO
from pathlib import Path

import gradio as gr
from PIL import Image

from coloringpage.core.config import config
from coloringpage.core.models import DetailLevel, LineThickness, StyleOptions
from coloringpage.core.session_store import export_png

from .models import (
    READY_MESSAGE,
    RESTORED_MESSAGE,
    SUCCESS_MESSAGE,
    UPLOADED_MESSAGE,
    UIState,
)
from .state import initialize_ui_state, reset_ui_state
from .validation import ValidationError, load_upload

logger = logging.getLogger(__name__)

# Fixed output file for results restored from the session cache
RESTORED_OUTPUT_FILENAME = "last_session.png"


def _hidden_download() -> dict:
    return gr.update(value=None, visible=False)


def _validation_message(error: ValidationError) -> str:
    return f"❌ **Validation Error**\n\n{error}"


def handle_upload(image_path: str | None, state: UIState) -> tuple:
    """Validate and cache a newly uploaded image.

    A new upload invalidates the previous coloring page.

    Args:
        image_path: File path from the upload component
        state: UI state

    Returns:
        Tuple of (input_image_update, status_message, output_image,
        download_update, updated_state)
    """
    try:
        state = initialize_ui_state(state)
        state.last_output_path = None

        if not image_path:
            return gr.update(), READY_MESSAGE, None, _hidden_download(), state

        image = load_upload(image_path, config.max_upload_bytes)
        state.session_store.save_upload(image)
        logger.info(f"Accepted upload: {image.mime_type} ({len(image.data)} bytes)")

        return gr.update(), UPLOADED_MESSAGE, None, _hidden_download(), state

    except ValidationError as e:
        logger.warning(f"Upload rejected: {e}")
        return gr.update(value=None), _validation_message(e), None, _hidden_download(), state

    except Exception as e:
        logger.error(f"Error handling upload: {e}", exc_info=True)
        error_msg = f"❌ **Error**\n\nFailed to read the file.\n\n`{str(e)}`"
        return gr.update(value=None), error_msg, None, _hidden_download(), state


def generate_coloring_page(
    image_path: str | None,
    line_thickness: str,
    detail_level: str,
    state: UIState,
) -> tuple:
    """Generate a coloring page from the current upload.

    Args:
        image_path: File path from the upload component
        line_thickness: Selected thickness value (thin/medium/bold)
        detail_level: Selected detail value (low/medium/high)
        state: UI state

    Returns:
        Tuple of (output_image, download_update, status_message, updated_state)
    """
    try:
        state = initialize_ui_state(state)

        image = load_upload(image_path, config.max_upload_bytes)
        options = StyleOptions(
            line_thickness=LineThickness(line_thickness),
            detail_level=DetailLevel(detail_level),
        )

        result = state.client.generate(image, options)

        if not result.ok:
            error_msg = f"❌ **Generation Failed**\n\n{result.message}"
            return None, _hidden_download(), error_msg, state

        state.session_store.save_upload(image)
        state.session_store.save_result(result.b64)

        output_path = export_png(result.data, config.outputs_dir, options)
        state.last_output_path = str(output_path)

        info = (
            f"{SUCCESS_MESSAGE}\n\n"
            f"**Line Thickness:** {options.line_thickness.label} | "
            f"**Image Quality:** {options.detail_level.label}"
        )
        return (
            str(output_path),
            gr.update(value=str(output_path), visible=True),
            info,
            state,
        )

    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        return None, _hidden_download(), _validation_message(e), state

    except Exception as e:
        logger.error(f"Error generating coloring page: {e}", exc_info=True)
        error_msg = (
            f"❌ **Error**\n\nAn unexpected error occurred. "
            f"Check logs for details.\n\n`{str(e)}`"
        )
        return None, _hidden_download(), error_msg, state


def restore_session(state: UIState) -> tuple:
    """Restore the cached upload and coloring page on page load.

    Args:
        state: UI state

    Returns:
        Tuple of (input_image, output_image, download_update, status_message,
        updated_state)
    """
    try:
        state = initialize_ui_state(state)
        snapshot = state.session_store.load()

        if snapshot.is_empty:
            return None, None, _hidden_download(), READY_MESSAGE, state

        upload = None
        if snapshot.upload is not None:
            upload = Image.open(BytesIO(snapshot.upload.data))

        output_path = None
        download = _hidden_download()
        if snapshot.result:
            if state.last_output_path and Path(state.last_output_path).is_file():
                output_path = state.last_output_path
            else:
                output_path = str(
                    export_png(
                        snapshot.result_bytes,
                        config.outputs_dir,
                        filename=RESTORED_OUTPUT_FILENAME,
                    )
                )
            state.last_output_path = output_path
            download = gr.update(value=output_path, visible=True)

        logger.info("Restored cached session")
        return upload, output_path, download, RESTORED_MESSAGE, state

    except Exception as e:
        logger.error(f"Failed to restore cached session: {e}", exc_info=True)
        if state is not None and state.session_store is not None:
            state.session_store.clear()
        return None, None, _hidden_download(), READY_MESSAGE, state


def choose_another(state: UIState) -> tuple:
    """Clear the upload, the result and the cached session.

    Args:
        state: UI state

    Returns:
        Tuple of (input_image, output_image, download_update, status_message,
        updated_state)
    """
    try:
        state = reset_ui_state(state)
    except Exception as e:
        logger.error(f"Error resetting session: {e}", exc_info=True)
    return None, None, _hidden_download(), READY_MESSAGE, state
