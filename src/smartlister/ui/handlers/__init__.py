"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events:
- images: Image selection, compression and removal
- generation: Listing generation and toast refresh
"""

from .generation import (
    begin_generation_handler,
    generate_listing,
    generate_listing_handler,
    refresh_toasts_handler,
)
from .images import (
    add_images,
    remove_image,
    remove_image_handler,
    upload_images_handler,
)

__all__ = [
    # Image handlers
    "add_images",
    "remove_image",
    "remove_image_handler",
    "upload_images_handler",
    # Generation handlers
    "begin_generation_handler",
    "generate_listing",
    "generate_listing_handler",
    "refresh_toasts_handler",
]
