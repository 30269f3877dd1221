"""Data models for Smart Lister UI state and generation outcomes."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 140
TAG_COUNT = 13


class GenerationStatus(str, Enum):
    """Where the view is in the generate cycle."""

    IDLE = "idle"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Why a generation attempt did not produce a listing."""

    VALIDATION = "validation"  # nothing to send, or too many images
    PREPROCESSING = "preprocessing"  # an image could not be compressed
    TRANSPORT = "transport"  # network error or non-2xx reply
    RESPONSE_SHAPE = "response_shape"  # 2xx reply that is not a JSON object


def _as_text(value: Any) -> str:
    # null and missing values both become ""
    return "" if value is None else str(value)


@dataclass
class ListingResult:
    """Listing copy returned by the generation endpoint.

    Values are taken from the response body as they are.  Missing or null
    keys fall back to empty values rather than failing the request, and
    non-string values are converted to text.
    """

    title: str = ""
    tags: list[str] = field(default_factory=list)
    description: str = ""
    sns_post: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ListingResult":
        """Build a result from a parsed response body.

        Args:
            payload: Parsed JSON object with ``title``, ``tags``,
                ``description`` and ``snsPost`` keys

        Returns:
            ListingResult carrying the same values
        """
        tags = payload.get("tags") or []
        if not isinstance(tags, list):
            tags = [tags]

        return cls(
            title=_as_text(payload.get("title")),
            tags=[str(tag) for tag in tags if tag is not None],
            description=_as_text(payload.get("description")),
            sns_post=_as_text(payload.get("snsPost")),
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the wire representation (``snsPost`` key)."""
        return {
            "title": self.title,
            "tags": list(self.tags),
            "description": self.description,
            "snsPost": self.sns_post,
        }


@dataclass(frozen=True)
class GenerationSuccess:
    """A listing was produced."""

    result: ListingResult


@dataclass(frozen=True)
class GenerationFailure:
    """A generation attempt failed.

    Attributes:
        kind: Failure category
        message: User-facing detail (the response body for non-2xx replies)
        raw: Unparseable response text, kept for diagnostics
    """

    kind: FailureKind
    message: str
    raw: str | None = None


GenerationOutcome = GenerationSuccess | GenerationFailure


@dataclass
class ListerState:
    """Session state for the Gradio UI.

    Each browser session gets its own ListerState instance.  The toast store
    and generation client are created lazily by
    :func:`smartlister.ui.state.initialize_lister_state`, so the empty
    default instance can be deep-copied by Gradio.

    Attributes
    ----------
    images : list[str]
        Encoded images held for the next request, in upload order
    keyword : str
        Keyword text of the last generate request
    status : GenerationStatus
        Current point in the generate cycle
    result : ListingResult | None
        Listing from the last successful request
    error : GenerationFailure | None
        Failure from the last unsuccessful request
    toast_store : Any | None
        ToastStore instance for feedback messages
    client : Any | None
        GenerationClient instance
    """

    images: list[str] = field(default_factory=list)
    keyword: str = ""
    status: GenerationStatus = GenerationStatus.IDLE
    result: ListingResult | None = None
    error: GenerationFailure | None = None

    toast_store: Any | None = None  # ToastStore instance
    client: Any | None = None  # GenerationClient instance

    def is_initialized(self) -> bool:
        """Check if the toast store and client have been created."""
        return self.toast_store is not None and self.client is not None

    @property
    def is_generating(self) -> bool:
        return self.status == GenerationStatus.GENERATING

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"ListerState(initialized={self.is_initialized()}, "
            f"images={len(self.images)}, status={self.status.value})"
        )
