"""Unit tests for input validation and listing checks."""

import pytest

from smartlister.ui.models import ListingResult
from smartlister.ui.validation import (
    ValidationError,
    listing_warnings,
    validate_generation_input,
    validate_image_count,
)


class TestValidateImageCount:
    """Tests for validate_image_count."""

    def test_within_limit(self):
        validate_image_count(0, 10, 10)
        validate_image_count(7, 3, 10)

    def test_single_selection_over_limit(self):
        with pytest.raises(ValidationError, match="max 10"):
            validate_image_count(0, 11, 10)

    def test_cumulative_over_limit(self):
        """8 held plus 3 new exceeds a limit of 10."""
        with pytest.raises(ValidationError) as exc_info:
            validate_image_count(8, 3, 10)

        message = str(exc_info.value)
        assert "max 10" in message
        assert "8 already selected" in message


class TestValidateGenerationInput:
    """Tests for validate_generation_input."""

    def test_keyword_only(self):
        validate_generation_input("ring", [])

    def test_images_only(self):
        validate_generation_input("", ["data:image/jpeg;base64,AAAA"])

    def test_nothing_to_send(self):
        with pytest.raises(ValidationError, match="at least one image"):
            validate_generation_input("", [])


class TestListingWarnings:
    """listing_warnings reports rule breaks without rejecting."""

    def test_conforming_listing(self, sample_listing):
        assert listing_warnings(ListingResult.from_payload(sample_listing)) == []

    def test_long_title(self, sample_listing):
        result = ListingResult.from_payload({**sample_listing, "title": "x" * 141})

        warnings = listing_warnings(result)

        assert warnings == ["Title is 141 characters (limit 140)."]

    def test_wrong_tag_count(self, sample_listing):
        result = ListingResult.from_payload({**sample_listing, "tags": ["one", "two"]})

        assert listing_warnings(result) == ["Got 2 tags (expected 13)."]

    def test_empty_listing(self):
        assert listing_warnings(ListingResult()) == ["Got 0 tags (expected 13)."]
