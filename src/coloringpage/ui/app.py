"""Gradio UI for the Coloring Page Creator."""

import logging

import gradio as gr

from coloringpage.core.config import config

from .handlers import (
    choose_another,
    generate_coloring_page,
    handle_upload,
    restore_session,
)
from .models import (
    DEFAULT_DETAIL,
    DEFAULT_THICKNESS,
    DETAIL_CHOICES,
    READY_MESSAGE,
    THICKNESS_CHOICES,
    UIState,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> tuple[gr.Blocks, str]:
    """Create the Gradio UI.

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    custom_css = """
    .style-options {
        border: 1px solid #374151;
        border-radius: 6px;
        padding: 12px;
    }
    """

    app = gr.Blocks(title="Coloring Page Creator")

    with app:
        # Session state - one instance per user
        ui_state = gr.State(UIState())

        gr.Markdown(
            """
            # Coloring Page Creator
            ### Turn any photo into a printable coloring page
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                gr.Markdown("### Your Photo")

                input_image = gr.Image(
                    label="Upload Image",
                    type="filepath",
                    sources=["upload", "clipboard"],
                    height=400,
                )

                with gr.Group(elem_classes="style-options"):
                    thickness_radio = gr.Radio(
                        label="Line Thickness",
                        choices=THICKNESS_CHOICES,
                        value=DEFAULT_THICKNESS,
                    )
                    detail_radio = gr.Radio(
                        label="Image Quality",
                        choices=DETAIL_CHOICES,
                        value=DEFAULT_DETAIL,
                        info="Low suits young children, High suits adults",
                    )

                with gr.Row():
                    generate_btn = gr.Button(
                        "Generate Coloring Page",
                        variant="primary",
                        size="lg",
                    )
                    another_btn = gr.Button("Choose Another", variant="secondary")

            with gr.Column(scale=1):
                gr.Markdown("### Coloring Page")

                output_image = gr.Image(
                    label="Output",
                    type="filepath",
                    interactive=False,
                    height=400,
                )
                download_btn = gr.DownloadButton(
                    "Download Coloring Page",
                    visible=False,
                )
                status_output = gr.Markdown(value=READY_MESSAGE)

        gr.Markdown(
            f"""
            ---
            **Model:** {config.model_id}

            *Outputs saved to: {config.outputs_dir}*
            """
        )

        # Event handlers
        app.load(
            fn=restore_session,
            inputs=[ui_state],
            outputs=[input_image, output_image, download_btn, status_output, ui_state],
        )

        input_image.upload(
            fn=handle_upload,
            inputs=[input_image, ui_state],
            outputs=[input_image, status_output, output_image, download_btn, ui_state],
        )

        # Disable the button while a request is in flight
        generate_btn.click(
            fn=lambda: gr.update(interactive=False),
            outputs=[generate_btn],
            queue=False,
        ).then(
            fn=generate_coloring_page,
            inputs=[input_image, thickness_radio, detail_radio, ui_state],
            outputs=[output_image, download_btn, status_output, ui_state],
            concurrency_limit=1,
        ).then(
            fn=lambda: gr.update(interactive=True),
            outputs=[generate_btn],
            queue=False,
        )

        another_btn.click(
            fn=choose_another,
            inputs=[ui_state],
            outputs=[input_image, output_image, download_btn, status_output, ui_state],
        )

    return app, custom_css


def main():
    """Main entry point for the application."""
    logger.info("Starting Coloring Page Creator...")
    logger.info(f"Configuration: {config.model_dump(exclude={'api_key'})}")

    if not config.api_key:
        logger.warning("No API key configured; generation requests will fail")

    app, custom_css = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
        css=custom_css,
        allowed_paths=[str(config.outputs_dir), str(config.data_dir)],
    )


if __name__ == "__main__":
    main()
