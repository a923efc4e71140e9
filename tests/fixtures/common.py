"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Review records and raw dataset objects
- Review lists and JSON-lines dataset files
- Trees built from either

These are the foundational building blocks used by higher-level fixtures.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from core.merkle import MerkleTree, build_review_tree
from core.schemas.records import Review


# =============================================================================
# Review Factories
# =============================================================================

def make_review(
    reviewer_id: str = "A1",
    product_id: str = "P1",
    timestamp: str = "1000000",
    text: str = "Great product",
    summary: str = "Five stars",
    rating: float = 5.0,
) -> Review:
    """
    Create a Review for testing.

    The identifier is derived as ``<reviewer>_<product>_<timestamp>``.
    """
    return Review(
        reviewer_id=reviewer_id,
        product_id=product_id,
        timestamp=timestamp,
        text=text,
        summary=summary,
        rating=rating,
    )


def make_raw_review(
    reviewer_id: str = "A1",
    product_id: str = "P1",
    timestamp: Any = 1000000,
    text: str = "Great product",
    summary: str = "Five stars",
    rating: Any = 5.0,
) -> dict[str, Any]:
    """Create one raw dataset object as it appears in a JSON-lines file."""
    return {
        "reviewerID": reviewer_id,
        "asin": product_id,
        "unixReviewTime": timestamp,
        "reviewText": text,
        "summary": summary,
        "overall": rating,
    }


def make_reviews(count: int = 3, product_id: Optional[str] = None) -> list[Review]:
    """
    Create ``count`` distinct reviews.

    Reviewer ids are A1, A2, ...; products alternate P1/P2 unless
    ``product_id`` is given.
    """
    reviews = []
    for i in range(1, count + 1):
        reviews.append(
            make_review(
                reviewer_id=f"A{i}",
                product_id=product_id or f"P{(i - 1) % 2 + 1}",
                timestamp=str(1000000 + i - 1),
                text=f"Review text number {i}",
                summary=f"Summary {i}",
                rating=float((i - 1) % 5 + 1),
            )
        )
    return reviews


def sample_reviews() -> list[Review]:
    """The three-review scenario used across tests."""
    return [
        make_review("A1", "P1", "1000000", "Great", "Good", 5.0),
        make_review("A2", "P1", "1000001", "Bad", "Poor", 1.0),
        make_review("A3", "P2", "1000002", "Okay", "Fine", 3.0),
    ]


# =============================================================================
# Tree Factories
# =============================================================================

def make_tree(reviews: Optional[Iterable[Review]] = None) -> MerkleTree:
    """Batch-build a tree from reviews (the sample scenario by default)."""
    return build_review_tree(list(reviews) if reviews is not None else sample_reviews())


def make_leaf_tree(count: int) -> MerkleTree:
    """Tree over plain leaves ``id0..id{n-1}`` with encodings ``rec0..``."""
    return MerkleTree.build_from_leaves(
        [f"id{i}" for i in range(count)],
        [f"rec{i}" for i in range(count)],
    )


# =============================================================================
# Dataset Files
# =============================================================================

def write_jsonl(path: Path, rows: Iterable[Any]) -> Path:
    """
    Write a JSON-lines file.

    Dict rows are JSON-encoded; string rows are written verbatim so tests
    can include blank or malformed lines.
    """
    lines = []
    for row in rows:
        lines.append(row if isinstance(row, str) else json.dumps(row))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_sample_dataset(path: Path, count: int = 3) -> Path:
    """Write ``count`` raw reviews shaped like ``make_reviews``."""
    rows = [
        make_raw_review(
            reviewer_id=r.reviewer_id,
            product_id=r.product_id,
            timestamp=int(r.timestamp),
            text=r.text,
            summary=r.summary,
            rating=r.rating,
        )
        for r in make_reviews(count)
    ]
    return write_jsonl(path, rows)
