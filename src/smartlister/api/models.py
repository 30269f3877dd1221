"""Pydantic request and response models for the Smart Lister API.

These models define the JSON schema for the API endpoints.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.

Models
------
GenerateRequest
    Payload for ``POST /api/generate``: product images and/or keywords.
ListingResponse
    Documented shape of a successful generation.  The endpoint passes the
    model's JSON through unchanged, so this model only describes it.
ErrorResponse
    Body of every error reply from ``/api/generate`` and ``/api/login``.
LoginRequest
    Payload for ``POST /api/login``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    At least one of the two fields must carry content; the endpoint checks
    this after dropping empty images and trimming the keyword.

    Attributes:
        images: Encoded product images, either ``data:<mime>;base64,...``
            strings or bare base64 (read as PNG).
        keyword: Free-text product features, in any language.
    """

    images: list[str] | None = Field(
        default=None,
        description="Encoded product images (data URIs or bare base64).",
    )
    keyword: str | None = Field(
        default=None,
        description="Free-text product features and keywords.",
    )


class ListingResponse(BaseModel):
    """Listing copy produced by the generation backend.

    Attributes:
        title: SEO title, at most 140 characters.
        tags: Exactly 13 short SEO tags.
        description: Product description.
        sns_post: Short promotional post for social media (``snsPost`` on
            the wire).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="SEO title (140 characters max).")
    tags: list[str] = Field(..., description="13 SEO tags.")
    description: str = Field(..., description="Product description.")
    sns_post: str = Field(..., alias="snsPost", description="Social media post.")


class ErrorResponse(BaseModel):
    """Error body returned with 4xx/5xx statuses.

    Attributes:
        error: Human-readable message.
        raw: Unparseable model output, present only when the backend's
            reply could not be read as JSON.
    """

    error: str
    raw: str | None = None


class LoginRequest(BaseModel):
    """Request body for the ``POST /api/login`` endpoint.

    Attributes:
        license_key: License key as typed by the user.
    """

    license_key: str = Field(
        default="",
        description="License key issued to the seller.",
    )
