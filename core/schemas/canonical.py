"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic byte encoding of review records prior to hashing.

CRITICAL: The field order, labels and separator below define the leaf
hashes of every tree ever built. Changing any of them invalidates all
previously stored root hashes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .records import Review


# (label, attribute) pairs in canonical order
CANONICAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("reviewID", "review_id"),
    ("asin", "product_id"),
    ("reviewerID", "reviewer_id"),
    ("reviewText", "text"),
    ("summary", "summary"),
    ("overall", "rating"),
    ("unixReviewTime", "timestamp"),
)

FIELD_SEPARATOR = "\n"
LABEL_SEPARATOR = ": "

# Characters stripped from both ends of ingested string fields
TRIM_CHARS = " \t\n\r"


def format_rating(rating: float) -> str:
    """
    Format a rating with six significant digits and no trailing zeros.

    Examples:
        >>> format_rating(5.0)
        '5'
        >>> format_rating(4.25)
        '4.25'
    """
    return format(rating, "g")


def trim_field(value: str) -> str:
    """Strip canonical whitespace from both ends of a string field."""
    return value.strip(TRIM_CHARS)


def encode_review(review: "Review") -> str:
    """
    Produce the canonical text encoding of a review.

    Layout (one ``label: value`` pair per line, no trailing newline)::

        reviewID: <id>
        asin: <product>
        reviewerID: <reviewer>
        reviewText: <text>
        summary: <summary>
        overall: <rating>
        unixReviewTime: <timestamp>

    Args:
        review: The review to encode.

    Returns:
        Canonical encoding as text (hash its UTF-8 bytes).
    """
    parts = []
    for label, attr in CANONICAL_FIELDS:
        value = getattr(review, attr)
        if attr == "rating":
            value = format_rating(value)
        parts.append(f"{label}{LABEL_SEPARATOR}{value}")
    return FIELD_SEPARATOR.join(parts)


def encode_review_bytes(review: "Review") -> bytes:
    """Canonical encoding as UTF-8 bytes."""
    return encode_review(review).encode("utf-8")
