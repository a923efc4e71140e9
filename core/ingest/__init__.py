"""
Review ingestion from JSON-lines datasets.
"""
from .loader import LoadResult, load_reviews_jsonl, parse_review_line

__all__ = [
    "LoadResult",
    "load_reviews_jsonl",
    "parse_review_line",
]
