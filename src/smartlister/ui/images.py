"""Batch preprocessing of uploaded product images."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from smartlister.core.config import SmartListerConfig
from smartlister.core.images import ImageProcessingError, compress_image

logger = logging.getLogger(__name__)


def _compress_file(source: str | Path | bytes, config: SmartListerConfig) -> str:
    if isinstance(source, bytes):
        data, name = source, "<bytes>"
    else:
        path = Path(source)
        name = path.name
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImageProcessingError(f"{name}: could not read file: {e}") from e

    try:
        return compress_image(
            data,
            max_dimension=config.max_image_dimension,
            max_bytes=config.max_image_bytes,
        )
    except ImageProcessingError as e:
        raise ImageProcessingError(f"{name}: {e}") from e


async def preprocess_images(
    files: list[str | Path | bytes], config: SmartListerConfig
) -> list[str]:
    """Compress a batch of images concurrently.

    Every file is compressed on a worker thread and the results are
    awaited together.  The output keeps the input order.

    Args:
        files: Upload paths (or raw bytes) in selection order
        config: Supplies the dimension and size bounds

    Returns:
        Encoded images (data URIs), one per input

    Raises:
        ImageProcessingError: If any single file fails; no partial result is returned
    """
    if not files:
        return []

    logger.info(f"Preprocessing {len(files)} image(s)")
    encoded = await asyncio.gather(
        *(asyncio.to_thread(_compress_file, source, config) for source in files)
    )
    return list(encoded)
