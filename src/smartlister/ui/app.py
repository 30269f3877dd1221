"""Gradio UI for Smart Lister."""

import logging

import gradio as gr

from smartlister.core.config import config

from .handlers import (
    begin_generation_handler,
    generate_listing_handler,
    refresh_toasts_handler,
    remove_image_handler,
    upload_images_handler,
)
from .models import ListerState
from .state import cleanup_lister_state, initialize_lister_state

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
.toast-area {
    position: fixed;
    right: 16px;
    bottom: 16px;
    z-index: 50;
    width: 100%;
    max-width: 24rem;
}
.toast {
    border: 1px solid #334155;
    border-radius: 6px;
    padding: 12px 16px;
    background: #0f172a;
    color: #f8fafc;
    box-shadow: 0 10px 15px rgba(0, 0, 0, 0.3);
}
.toast-title {
    font-weight: 600;
}
.toast-description {
    font-size: 0.875rem;
    color: #94a3b8;
}
"""


def _select_gallery_image(evt: gr.SelectData) -> int:
    return evt.index


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app (mounted by :func:`smartlister.api.main.mount_ui`)
    """
    app = gr.Blocks(title="Smart Lister", css=CUSTOM_CSS)

    with app:
        # Session state - one instance per user, closed when the session ends
        lister_state = gr.State(ListerState(), delete_callback=cleanup_lister_state)
        selected_index = gr.State(None)

        gr.Markdown(
            """
            # Smart Lister
            ### Listing copy for international buyers from product photos and keywords
            """
        )

        with gr.Row():
            # Input column
            with gr.Column():
                upload = gr.File(
                    label=f"Product images (optional, up to {config.max_images})",
                    file_count="multiple",
                    file_types=["image"],
                    type="filepath",
                )
                gallery = gr.Gallery(
                    label="Selected images",
                    columns=5,
                    height="auto",
                    allow_preview=False,
                )
                remove_btn = gr.Button("Remove selected image", size="sm")
                keyword = gr.Textbox(
                    label="Product features (any language)",
                    lines=6,
                    placeholder=(
                        "e.g. Handmade silver ring. Minimal, simple design. "
                        "Great as a gift. Hypoallergenic."
                    ),
                    info="The more detail on materials, size, audience and use, the better.",
                )
                generate_btn = gr.Button("Generate listing", variant="primary")

            # Output column
            with gr.Column():
                status = gr.Markdown(
                    "Add product images or describe the product, then click **Generate listing**."
                )
                title_out = gr.Textbox(
                    label="Title",
                    info="SEO title, 140 characters max",
                    interactive=False,
                    show_copy_button=True,
                )
                tags_out = gr.Textbox(
                    label="SEO Tags",
                    info="Comma separated, 13 tags",
                    interactive=False,
                    show_copy_button=True,
                )
                description_out = gr.Textbox(
                    label="Description",
                    lines=10,
                    interactive=False,
                    show_copy_button=True,
                )
                sns_out = gr.Textbox(
                    label="SNS Post",
                    info="Short promotional post with hashtags",
                    lines=3,
                    interactive=False,
                    show_copy_button=True,
                )

        toast_html = gr.HTML()
        toast_timer = gr.Timer(config.toast_refresh_interval)

        # Event wiring
        app.load(
            fn=initialize_lister_state,
            inputs=[lister_state],
            outputs=[lister_state],
        )

        upload.upload(
            fn=upload_images_handler,
            inputs=[upload, lister_state],
            outputs=[gallery, status, toast_html, upload, lister_state],
        )

        gallery.select(fn=_select_gallery_image, inputs=None, outputs=[selected_index])

        remove_btn.click(
            fn=remove_image_handler,
            inputs=[selected_index, lister_state],
            outputs=[gallery, status, selected_index, lister_state],
        )

        generate_btn.click(
            fn=begin_generation_handler,
            inputs=[lister_state],
            outputs=[generate_btn, upload, keyword, status],
        ).then(
            fn=generate_listing_handler,
            inputs=[keyword, lister_state],
            outputs=[
                title_out,
                tags_out,
                description_out,
                sns_out,
                status,
                toast_html,
                generate_btn,
                upload,
                keyword,
                lister_state,
            ],
        )

        toast_timer.tick(
            fn=refresh_toasts_handler,
            inputs=[lister_state],
            outputs=[toast_html],
            show_progress="hidden",
        )

    return app


def main():
    """Launch the UI on its own, without the API routes.

    The UI still posts to ``config.generate_endpoint``, so the API server
    must be running there.
    """
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Launching Gradio UI on {config.server_host}:{config.server_port + 1}")

    create_ui().launch(
        server_name=config.server_host,
        server_port=config.server_port + 1,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
