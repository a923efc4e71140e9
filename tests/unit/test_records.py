"""
Review Record Unit Tests
Tests for core/schemas/records.py and core/schemas/canonical.py

Tests:
- Identifier derivation
- Canonical encoding layout and rating formatting
- Parsing raw dataset objects
"""
import pytest
from pydantic import ValidationError

from core.schemas.canonical import encode_review, encode_review_bytes, format_rating
from core.schemas.records import Review, make_review_id

from fixtures.common import make_raw_review, make_review


class TestReviewId:
    """Tests for identifier derivation."""

    def test_make_review_id(self):
        """Identifier is reviewer_product_timestamp."""
        assert make_review_id("A1", "P1", "1000000") == "A1_P1_1000000"

    def test_derived_when_omitted(self):
        """A review built without an id derives one."""
        assert make_review().review_id == "A1_P1_1000000"

    def test_explicit_id_kept(self):
        """An explicit identifier is not overwritten."""
        review = Review(review_id="custom", reviewer_id="A1", product_id="P1", timestamp="1")
        assert review.review_id == "custom"

    def test_frozen(self):
        """Reviews are immutable."""
        review = make_review()
        with pytest.raises(ValidationError):
            review.text = "changed"

    def test_extra_fields_rejected(self):
        """Unknown fields are refused."""
        with pytest.raises(ValidationError):
            Review(reviewer_id="A1", helpful=3)


class TestCanonicalEncoding:
    """Tests for encode_review()."""

    def test_layout(self):
        """Seven label lines in canonical order, no trailing newline."""
        review = make_review("A1", "P1", "1000000", "Great", "Good", 5.0)
        assert encode_review(review) == (
            "reviewID: A1_P1_1000000\n"
            "asin: P1\n"
            "reviewerID: A1\n"
            "reviewText: Great\n"
            "summary: Good\n"
            "overall: 5\n"
            "unixReviewTime: 1000000"
        )

    def test_method_matches_function(self):
        """Review.encode() delegates to encode_review()."""
        review = make_review()
        assert review.encode() == encode_review(review)
        assert encode_review_bytes(review) == review.encode().encode("utf-8")

    @pytest.mark.parametrize(
        "rating,expected",
        [(5.0, "5"), (4.5, "4.5"), (0.0, "0"), (3.25, "3.25"), (1.0 / 3.0, "0.333333")],
    )
    def test_rating_format(self, rating, expected):
        """Ratings use six significant digits without trailing zeros."""
        assert format_rating(rating) == expected

    def test_any_field_change_changes_encoding(self):
        """Each content field participates in the encoding."""
        base = make_review()
        for update in (
            {"text": "Other"},
            {"summary": "Other"},
            {"rating": 4.0},
            {"product_id": "P9"},
        ):
            assert base.model_copy(update=update).encode() != base.encode()


class TestFromJson:
    """Tests for Review.from_json()."""

    def test_parses_raw_object(self):
        """Raw dataset keys map onto review fields."""
        review = Review.from_json(make_raw_review())
        assert review.review_id == "A1_P1_1000000"
        assert review.product_id == "P1"
        assert review.reviewer_id == "A1"
        assert review.text == "Great product"
        assert review.rating == 5.0
        assert review.timestamp == "1000000"

    def test_trims_whitespace(self):
        """String fields are trimmed of surrounding whitespace."""
        review = Review.from_json(make_raw_review(reviewer_id=" A1\t", text="\n Great \r"))
        assert review.reviewer_id == "A1"
        assert review.text == "Great"
        assert review.review_id == "A1_P1_1000000"

    def test_string_timestamp_kept(self):
        """A string unixReviewTime is used as-is."""
        assert Review.from_json(make_raw_review(timestamp="42")).timestamp == "42"

    def test_float_timestamp_truncated(self):
        """A numeric unixReviewTime is rendered as an integer string."""
        assert Review.from_json(make_raw_review(timestamp=1234.0)).timestamp == "1234"

    @pytest.mark.parametrize("rating", ["5", None, True])
    def test_non_numeric_rating_is_zero(self, rating):
        """A missing or non-numeric overall becomes 0.0."""
        assert Review.from_json(make_raw_review(rating=rating)).rating == 0.0

    def test_missing_fields_default_empty(self):
        """Absent fields are empty strings."""
        review = Review.from_json({"reviewerID": "A1"})
        assert review.text == ""
        assert review.review_id == "A1__"

    def test_bad_type_raises(self):
        """A non-string text field is a TypeError."""
        with pytest.raises(TypeError):
            Review.from_json(make_raw_review(text=123))

    @pytest.mark.parametrize("timestamp", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_timestamp_raises(self, timestamp):
        """A non-finite numeric unixReviewTime is a ValueError."""
        with pytest.raises(ValueError):
            Review.from_json(make_raw_review(timestamp=timestamp))

    def test_large_integer_timestamp(self):
        """Integer timestamps of any size are kept exactly."""
        assert Review.from_json(make_raw_review(timestamp=10**30)).timestamp == str(10**30)
