"""
Schemas & Canonicalization
File: records.py

Purpose: The immutable review record committed into Merkle trees.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .canonical import encode_review, trim_field


def make_review_id(reviewer_id: str, product_id: str, timestamp: str) -> str:
    """Derive a review identifier: ``<reviewer>_<product>_<timestamp>``."""
    return f"{reviewer_id}_{product_id}_{timestamp}"


class Review(BaseModel):
    """
    A single product review.

    Records are frozen; simulated edits produce modified copies via
    ``model_copy(update=...)`` and never touch the original.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    review_id: str = Field(
        default="",
        description="Unique identifier; derived from reviewer, product and time when omitted",
    )
    product_id: str = Field(default="", description="Product identifier (asin)")
    reviewer_id: str = Field(default="", description="Reviewer identifier")
    text: str = Field(default="", description="Review body")
    summary: str = Field(default="", description="Review headline")
    rating: float = Field(default=0.0, description="Star rating")
    timestamp: str = Field(default="", description="Unix review time as text")

    @model_validator(mode="before")
    @classmethod
    def _derive_review_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("review_id"):
            data = dict(data)
            data["review_id"] = make_review_id(
                str(data.get("reviewer_id", "")),
                str(data.get("product_id", "")),
                str(data.get("timestamp", "")),
            )
        return data

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "Review":
        """
        Build a review from one raw dataset object.

        Rules:
            - String fields are trimmed of surrounding whitespace
            - A numeric ``unixReviewTime`` is rendered as an integer string
            - A missing or non-numeric ``overall`` becomes 0.0
            - The identifier is always derived, never read from the object

        Raises:
            TypeError: If a string field holds a non-string value
            ValueError: If a numeric ``unixReviewTime`` is not finite
        """
        raw_time = obj.get("unixReviewTime", "")
        if isinstance(raw_time, bool):
            raise TypeError("unixReviewTime must be a string or number")
        if isinstance(raw_time, (int, float)):
            if isinstance(raw_time, float) and not math.isfinite(raw_time):
                raise ValueError("unixReviewTime must be finite")
            timestamp = str(int(raw_time))
        elif isinstance(raw_time, str):
            timestamp = raw_time
        else:
            raise TypeError("unixReviewTime must be a string or number")

        raw_rating = obj.get("overall")
        if isinstance(raw_rating, (int, float)) and not isinstance(raw_rating, bool):
            rating = float(raw_rating)
        else:
            rating = 0.0

        def text_field(key: str) -> str:
            value = obj.get(key, "")
            if not isinstance(value, str):
                raise TypeError(f"{key} must be a string")
            return trim_field(value)

        return cls(
            product_id=text_field("asin"),
            reviewer_id=text_field("reviewerID"),
            text=text_field("reviewText"),
            summary=text_field("summary"),
            rating=rating,
            timestamp=timestamp,
        )

    def encode(self) -> str:
        """Canonical encoding of this review (see ``canonical.encode_review``)."""
        return encode_review(self)
