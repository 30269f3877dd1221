"""Unit tests for UI data models."""

import copy

from smartlister.ui.models import (
    FailureKind,
    GenerationFailure,
    GenerationStatus,
    ListerState,
    ListingResult,
)


class TestListingResult:
    """Tests for ListingResult."""

    def test_from_payload_reads_sns_post_key(self, sample_listing):
        result = ListingResult.from_payload(sample_listing)

        assert result.sns_post == sample_listing["snsPost"]
        assert len(result.tags) == 13

    def test_to_payload_uses_wire_names(self, sample_listing):
        assert ListingResult.from_payload(sample_listing).to_payload() == sample_listing

    def test_extra_keys_ignored(self):
        result = ListingResult.from_payload({"title": "t", "price": 10})
        assert result == ListingResult(title="t")

    def test_defaults(self):
        result = ListingResult()
        assert (result.title, result.tags, result.description, result.sns_post) == ("", [], "", "")

    def test_null_fields_become_empty(self):
        result = ListingResult.from_payload(
            {"title": None, "tags": None, "description": None, "snsPost": None}
        )
        assert result == ListingResult()

    def test_non_string_values_converted(self):
        result = ListingResult.from_payload({"title": 42, "tags": [1, "two", None]})

        assert result.title == "42"
        assert result.tags == ["1", "two"]

    def test_scalar_tags_wrapped(self):
        assert ListingResult.from_payload({"tags": "solo"}).tags == ["solo"]


class TestListerState:
    """Tests for ListerState."""

    def test_defaults(self):
        state = ListerState()

        assert state.images == []
        assert state.keyword == ""
        assert state.status == GenerationStatus.IDLE
        assert state.result is None
        assert state.error is None
        assert not state.is_initialized()
        assert not state.is_generating

    def test_default_instance_is_deep_copyable(self):
        """gr.State deep-copies the initial value for every session."""
        state = ListerState()
        clone = copy.deepcopy(state)
        clone.images.append("x")
        assert state.images == []

    def test_is_generating(self):
        state = ListerState(status=GenerationStatus.GENERATING)
        assert state.is_generating

    def test_repr(self):
        state = ListerState(images=["a", "b"], status=GenerationStatus.FAILED)
        assert repr(state) == "ListerState(initialized=False, images=2, status=failed)"

    def test_failure_raw_defaults_to_none(self):
        failure = GenerationFailure(kind=FailureKind.TRANSPORT, message="boom")
        assert failure.raw is None
