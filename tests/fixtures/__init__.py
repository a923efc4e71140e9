"""
Test fixtures package for reviewproof tests.

This package provides factory functions for creating test objects:
- common.py: Review, tree and dataset-file factories

Usage:
    from fixtures.common import make_review, sample_reviews

    def test_something():
        tree = make_tree(sample_reviews())
"""

from .common import (
    make_leaf_tree,
    make_raw_review,
    make_review,
    make_reviews,
    make_tree,
    sample_reviews,
    write_jsonl,
    write_sample_dataset,
)

__all__ = [
    "make_leaf_tree",
    "make_raw_review",
    "make_review",
    "make_reviews",
    "make_tree",
    "sample_reviews",
    "write_jsonl",
    "write_sample_dataset",
]
