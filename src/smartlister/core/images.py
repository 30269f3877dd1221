"""Image downscaling, compression and data URI encoding.

Product photos are shrunk before they leave the browser session so that a
batch of ten stays well below typical request limits.  Every encoded image
produced here satisfies two bounds:

- the longest side is at most ``max_dimension`` pixels (aspect ratio kept)
- the encoded payload is at most ``max_bytes`` bytes

Compression Strategy
--------------------
1. Apply the EXIF orientation and downscale with LANCZOS.
2. Encode as JPEG (or PNG when the image carries transparency).
3. While the payload is too large, lower the JPEG quality in steps of 10
   down to ``_MIN_JPEG_QUALITY``, then shrink the dimensions by 10% per step.
4. Give up with :class:`ImageProcessingError` after ``max_iterations`` steps.

Encoded Image Format
--------------------
Either ``data:<mime>;base64,<payload>`` or a bare base64 string, which is
read as ``image/png``.
"""

from __future__ import annotations

import base64
import io
import logging
import re

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"

_DATA_URI_RE = re.compile(r"^data:(.+?);base64,(.*)$", re.DOTALL)

_INITIAL_JPEG_QUALITY = 90
_MIN_JPEG_QUALITY = 40
_SHRINK_FACTOR = 0.9

# Pillow reports bad input through several unrelated exception types
_DECODE_ERRORS = (
    UnidentifiedImageError,
    OSError,
    ValueError,
    SyntaxError,
    Image.DecompressionBombError,
)


class ImageProcessingError(Exception):
    """An image could not be decoded or compressed within its bounds."""

    pass


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Wrap raw bytes in a ``data:<mime>;base64,`` string."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_uri(value: str) -> tuple[str, str]:
    """Split an encoded image into its mime type and base64 body.

    Args:
        value: A data URI or a bare base64 string

    Returns:
        Tuple of (mime_type, base64_body).  Bare base64 is reported as PNG.
    """
    match = _DATA_URI_RE.match(value)
    if match:
        return match.group(1), match.group(2)
    return DEFAULT_MIME_TYPE, value


def decode_data_uri(value: str) -> tuple[str, bytes]:
    """Decode an encoded image into its mime type and raw bytes.

    Raises:
        ValueError: If the body is not valid base64
    """
    mime_type, body = split_data_uri(value)
    try:
        return mime_type, base64.b64decode(body, validate=True)
    except ValueError as e:
        raise ValueError(f"Image payload is not valid base64 ({mime_type})") from e


def _has_transparency(img: Image.Image) -> bool:
    if img.mode in ("RGBA", "LA"):
        return True
    return img.mode == "P" and "transparency" in img.info


def _encode(img: Image.Image, fmt: str, quality: int) -> bytes:
    buffer = io.BytesIO()
    if fmt == "JPEG":
        img.save(buffer, format="JPEG", quality=quality, optimize=True)
    else:
        img.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


def compress_image(
    data: bytes,
    *,
    max_dimension: int = 1024,
    max_bytes: int = 524288,
    max_iterations: int = 20,
) -> str:
    """Downscale and compress one image into a bounded data URI.

    Args:
        data: Raw bytes of any image format Pillow can read
        max_dimension: Longest allowed side in pixels
        max_bytes: Largest allowed encoded payload
        max_iterations: Number of quality/size reduction steps to attempt

    Returns:
        ``data:image/jpeg;base64,...`` (or ``image/png`` for transparent images)

    Raises:
        ImageProcessingError: If the bytes are not a readable image or the
            payload cannot be brought under ``max_bytes``
    """
    try:
        with Image.open(io.BytesIO(data)) as opened:
            opened.load()
            img = ImageOps.exif_transpose(opened)
    except _DECODE_ERRORS as e:
        raise ImageProcessingError(f"Could not read image: {e}") from e

    if _has_transparency(img):
        fmt, mime_type = "PNG", "image/png"
    else:
        fmt, mime_type = "JPEG", "image/jpeg"

    try:
        img = img.convert("RGBA" if fmt == "PNG" else "RGB")
        img.thumbnail((max_dimension, max_dimension), Image.LANCZOS)
        img, payload, iterations = _shrink_to_fit(img, fmt, max_bytes, max_iterations)
    except _DECODE_ERRORS as e:
        raise ImageProcessingError(f"Could not encode image: {e}") from e

    logger.debug(
        f"Compressed image to {img.size[0]}x{img.size[1]} {fmt}, "
        f"{len(payload)} bytes in {iterations} steps"
    )
    return encode_data_uri(payload, mime_type)


def _shrink_to_fit(
    img: Image.Image, fmt: str, max_bytes: int, max_iterations: int
) -> tuple[Image.Image, bytes, int]:
    quality = _INITIAL_JPEG_QUALITY
    payload = _encode(img, fmt, quality)

    iterations = 0
    while len(payload) > max_bytes:
        if iterations >= max_iterations:
            raise ImageProcessingError(
                f"Image is still {len(payload)} bytes after {iterations} compression steps "
                f"(limit {max_bytes})"
            )
        iterations += 1

        if fmt == "JPEG" and quality > _MIN_JPEG_QUALITY:
            quality -= 10
        else:
            width, height = img.size
            new_size = (max(1, int(width * _SHRINK_FACTOR)), max(1, int(height * _SHRINK_FACTOR)))
            img = img.resize(new_size, Image.LANCZOS)

        payload = _encode(img, fmt, quality)

    return img, payload, iterations
