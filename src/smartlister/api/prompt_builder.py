"""Prompt compilation for listing generation.

Every request to the model consists of a fixed system instruction, which
describes the JSON object to return and the marketplace rules each field
must follow, plus a short user prompt assembled from what the seller
supplied.

User Prompt Structure
---------------------
::

    [Keyword line]          (only when a keyword was given)
    [Image analysis line]   (only when images were attached)
    [Closing directive]     (always)

Lines are joined with single newlines.  The images themselves travel as
separate inline parts after the prompt text.

Usage
-----
::

    prompt = build_user_prompt("handmade silver ring", has_images=True)
    parts = decode_images(["data:image/jpeg;base64,..."])
"""

from __future__ import annotations

from smartlister.core.images import decode_data_uri

# ---------------------------------------------------------------------------
# Fixed instruction.
# The field rules here are the only place the 13-tag and 140-character
# limits are expressed; nothing downstream enforces them.
# ---------------------------------------------------------------------------

SYSTEM_INSTRUCTION = """\
You are a top-seller consultant for Etsy and a professional native English copywriter.
Analyse all of the product images and keywords supplied by the seller together. When
several images are attached they show variations of the product, the contents of a set,
or examples of use. Capture everything the images reveal (colour variants, item counts,
bonuses and so on) and produce the best-selling English listing data for Etsy following
the JSON structure below.

Output format: a JSON object with exactly these keys.
{
  "title": "SEO-aware English title. Never use emoji. Avoid the special characters %, & and :. Separate words and phrases with a pipe (|), comma (,) or hyphen (-). Strictly 140 characters or fewer (aim for 120 to 135) with the most important search terms first.",
  "tags": ["tag1", "tag2"],
  "description": "Appealing, natural English product description. Keep bullet points to a minimum and never nest them. Prefer natural paragraphs, or short headings followed by short sentences. Open some paragraphs with a tasteful emoji for a clean, readable layout. Include an introduction that conveys the appeal, the set contents, use cases, and notes for digital products where relevant.",
  "snsPost": "English promotional text for X (formerly Twitter). Strictly 200 characters or fewer including hashtags, emoji and spaces. Keep the body to about 130 characters and end with only two or three short hashtags."
}

Rules for "tags": exactly 13 English SEO tags, each 20 characters or fewer. Multi-word
phrases such as "custom digital art" are preferred.
"""

_KEYWORD_LINE = "Product features and keywords from the seller (may be written in Japanese): {keyword}"

_IMAGE_LINE = (
    "From the attached product images, infer the features, materials, colours, style, "
    "use scenes, variations and set contents, and combine them with the text to create "
    "the best listing data."
)

_CLOSING_LINE = (
    "Use natural English that follows Etsy search trends and encourages purchases. "
    "Avoid inaccurate statements and exaggerated claims. "
    "Return only the specified JSON structure."
)


def build_user_prompt(keyword: str, has_images: bool) -> str:
    """Compile the user prompt for a generation request.

    Args:
        keyword: Trimmed keyword text (empty string when absent).
        has_images: Whether image parts accompany the prompt.

    Returns:
        The prompt lines joined with newlines.
    """
    lines: list[str] = []

    if keyword:
        lines.append(_KEYWORD_LINE.format(keyword=keyword))

    if has_images:
        lines.append(_IMAGE_LINE)

    lines.append(_CLOSING_LINE)

    return "\n".join(lines)


def decode_images(images: list[str]) -> list[tuple[str, bytes]]:
    """Decode encoded images into ``(mime_type, raw_bytes)`` pairs.

    Empty entries are skipped.  Bare base64 strings are read as PNG.

    Args:
        images: Encoded images from the request body.

    Returns:
        Decoded images in request order.

    Raises:
        ValueError: If an entry is not valid base64.  The message names the
            1-based position of the offending image.
    """
    parts: list[tuple[str, bytes]] = []
    for index, image in enumerate(images, start=1):
        if not image:
            continue
        try:
            parts.append(decode_data_uri(image))
        except ValueError as e:
            raise ValueError(f"Image {index}: {e}") from e
    return parts
