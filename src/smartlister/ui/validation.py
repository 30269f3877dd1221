"""Validation utilities for Smart Lister UI inputs."""

import logging

from .models import TAG_COUNT, TITLE_MAX_LENGTH, ListingResult

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_image_count(existing: int, added: int, max_images: int) -> None:
    """Check that a new selection keeps the held images within the limit.

    Args:
        existing: Number of images already held
        added: Number of images in the new selection
        max_images: Upper bound on held images

    Raises:
        ValidationError: If the total would exceed ``max_images``
    """
    if existing + added > max_images:
        raise ValidationError(
            f"You can upload up to {max_images} images (max {max_images}). "
            f"{existing} already selected, {added} more chosen. "
            "Please reduce the number and try again."
        )


def validate_generation_input(keyword: str, images: list[str]) -> None:
    """Check that a generate request has something to send.

    Args:
        keyword: Keyword text, already trimmed
        images: Encoded images held in the session

    Raises:
        ValidationError: If both are empty
    """
    if not keyword and not images:
        raise ValidationError("Please add at least one image or describe the product.")


def listing_warnings(result: ListingResult) -> list[str]:
    """List the places where a listing breaks the marketplace rules.

    The generation endpoint is trusted to follow its instructions, so these
    are advisory only and never reject a result.

    Args:
        result: Listing returned by the endpoint

    Returns:
        Human-readable warnings (empty if the listing conforms)
    """
    warnings: list[str] = []

    if len(result.title) > TITLE_MAX_LENGTH:
        warnings.append(
            f"Title is {len(result.title)} characters (limit {TITLE_MAX_LENGTH})."
        )

    if len(result.tags) != TAG_COUNT:
        warnings.append(f"Got {len(result.tags)} tags (expected {TAG_COUNT}).")

    if warnings:
        logger.warning(f"Listing does not follow marketplace rules: {warnings}")

    return warnings
