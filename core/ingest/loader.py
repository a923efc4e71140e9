"""
Review Ingestion

Loads reviews from a JSON-lines dataset (one JSON object per line).

Bad input never aborts a load: blank lines, lines that fail to parse,
reviews with empty text and repeated identifiers are skipped and counted.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from core.schemas.errors import StorageError
from core.schemas.records import Review


logger = logging.getLogger(__name__)


PROGRESS_EVERY = 100_000


@dataclass
class LoadResult:
    """Reviews loaded from a dataset plus skip counters."""
    reviews: list[Review] = field(default_factory=list)
    total_lines: int = 0
    skipped_blank: int = 0
    skipped_malformed: int = 0
    skipped_empty_text: int = 0
    duplicates_removed: int = 0

    @property
    def loaded(self) -> int:
        return len(self.reviews)

    @property
    def skipped(self) -> int:
        return self.skipped_malformed + self.skipped_empty_text + self.duplicates_removed


def parse_review_line(line: str) -> Review:
    """
    Parse one dataset line.

    Raises:
        ValueError: If the line is not a JSON object
        TypeError: If a field has an unusable type
    """
    obj = json.loads(line)
    if not isinstance(obj, dict):
        raise ValueError("Line is not a JSON object")
    return Review.from_json(obj)


def load_reviews_jsonl(path: str | Path, max_records: int = 0) -> LoadResult:
    """
    Load and clean reviews from a JSON-lines file.

    Args:
        path: Dataset file
        max_records: Stop after this many reviews (0 for no limit)

    Returns:
        LoadResult with reviews in file order; the first occurrence of an
        identifier wins

    Raises:
        StorageError: If the file cannot be opened or read
    """
    path = Path(path)
    result = LoadResult()
    seen: set[str] = set()

    logger.info(f"Loading reviews from {path}")
    try:
        # Decoded per line: an undecodable line counts as malformed
        with open(path, "rb") as f:
            for raw_line in f:
                result.total_lines += 1
                if not raw_line.strip():
                    result.skipped_blank += 1
                    continue

                try:
                    review = parse_review_line(raw_line.decode("utf-8"))
                except (ValueError, TypeError, RecursionError) as e:
                    result.skipped_malformed += 1
                    logger.warning(f"Skipping line {result.total_lines}: {e}")
                    continue

                if not review.text:
                    result.skipped_empty_text += 1
                    continue

                if review.review_id in seen:
                    result.duplicates_removed += 1
                    continue
                seen.add(review.review_id)

                result.reviews.append(review)
                if result.loaded % PROGRESS_EVERY == 0:
                    logger.info(f"Loaded {result.loaded} reviews...")

                if max_records > 0 and result.loaded >= max_records:
                    break
    except OSError as e:
        raise StorageError(f"Could not read dataset: {e}", path=str(path)) from e

    if result.duplicates_removed:
        logger.info(f"Removed {result.duplicates_removed} duplicate reviews")
    logger.info(f"Successfully loaded {result.loaded} reviews from {path}")
    return result


__all__ = [
    "LoadResult",
    "parse_review_line",
    "load_reviews_jsonl",
]
