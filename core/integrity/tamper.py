"""
Integrity Layer
File: tamper.py

Purpose: Simulate corruption of a review set and classify how it is
detected, both by root comparison and by per-record re-verification.

The simulators are pure: they return edited copies of a record sequence
and never touch a live tree. Randomness, the fake-record counter and the
clock all live in a TamperContext owned by the caller.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

from core.crypto.hashing import hash_leaf
from core.merkle.merkle_tree import MerkleTree, verify_proof
from core.schemas.errors import EmptyDatasetError, EmptyTreeError, InputError, NotFoundError
from core.schemas.records import Review, make_review_id
from core.schemas.results import (
    RecordStatus,
    RecordTamperResult,
    TamperReport,
    TamperResult,
    TamperStatus,
)


logger = logging.getLogger(__name__)


TAMPER_MARKER = " [TAMPERED]"
FAKE_REVIEW_TEXT = "This is a fake injected review for testing tamper detection."
FAKE_REVIEW_SUMMARY = "Fake Review"
FAKE_REVIEW_RATING = 5.0
MIN_RATING = 1.0
MAX_RATING = 5.0


@dataclass
class TamperContext:
    """
    Mutable state for tamper simulations.

    Attributes:
        rng: Source of randomness for index and rating choices
        fake_counter: Number of fake records fabricated so far
        clock: Returns the current unix time for fake timestamps
    """
    rng: random.Random = field(default_factory=random.Random)
    fake_counter: int = 0
    clock: Callable[[], float] = time.time

    @classmethod
    def seeded(cls, seed: int | None) -> "TamperContext":
        """Context whose random choices are reproducible for a given seed."""
        return cls(rng=random.Random(seed))

    def next_fake_number(self) -> int:
        self.fake_counter += 1
        return self.fake_counter


def _check_count(k: int, reviews: Sequence[Review]) -> None:
    if k < 0:
        raise InputError(f"Simulation count must be non-negative, got {k}")
    if k > 0 and not reviews:
        raise EmptyDatasetError("Cannot tamper with an empty review set")


class TamperDetector:
    """
    Tamper simulation and detection bound to an original tree.

    Args:
        original_tree: Tree built from the baseline review set
        original_reviews: The baseline review set
        baseline_roots: Optional label -> baseline root map
        context: Simulation state; a fresh unseeded context by default
    """

    def __init__(
        self,
        original_tree: MerkleTree,
        original_reviews: Sequence[Review],
        baseline_roots: dict[str, str] | None = None,
        context: TamperContext | None = None,
    ) -> None:
        self.original_tree = original_tree
        self.original_reviews = list(original_reviews)
        self.baseline_roots: dict[str, str] = dict(baseline_roots or {})
        self.context = context or TamperContext()
        self.dataset_name: str | None = None

    # ------------------------------------------------------------------
    # Baseline binding
    # ------------------------------------------------------------------

    def set_dataset_name(self, name: str) -> None:
        """Select the active label and bind it to the original tree's root."""
        self.dataset_name = name
        self.baseline_roots[name] = self.original_tree.root_hash

    def store_original_root(self, name: str, root_hash: str) -> None:
        self.baseline_roots[name] = root_hash

    @property
    def original_root(self) -> str | None:
        if self.dataset_name is None:
            return None
        return self.baseline_roots.get(self.dataset_name)

    # ------------------------------------------------------------------
    # Simulators
    # ------------------------------------------------------------------

    def modify(self, reviews: Sequence[Review], k: int = 1) -> list[Review]:
        """Append a tamper marker to the text of ``k`` randomly chosen reviews."""
        _check_count(k, reviews)
        tampered = list(reviews)
        logger.info(f"Simulating {k} review modification(s)")
        for _ in range(k):
            index = self.context.rng.randrange(len(tampered))
            target = tampered[index]
            tampered[index] = target.model_copy(update={"text": target.text + TAMPER_MARKER})
            logger.debug(f"Modified review: {target.review_id}")
        return tampered

    def delete(self, reviews: Sequence[Review], k: int = 1) -> list[Review]:
        """
        Remove ``k`` randomly chosen reviews.

        Raises:
            InputError: If ``k`` would remove every review
        """
        if k >= len(reviews):
            raise InputError(
                f"Cannot delete {k} of {len(reviews)} reviews; at least one must remain",
                details={"requested": k, "available": len(reviews)},
            )
        _check_count(k, reviews)
        tampered = list(reviews)
        logger.info(f"Simulating {k} review deletion(s)")
        for _ in range(k):
            index = self.context.rng.randrange(len(tampered))
            removed = tampered.pop(index)
            logger.debug(f"Deleted review: {removed.review_id}")
        return tampered

    def inject(self, reviews: Sequence[Review], k: int = 1) -> list[Review]:
        """Append ``k`` fabricated reviews with fresh identifiers."""
        if k < 0:
            raise InputError(f"Simulation count must be non-negative, got {k}")
        tampered = list(reviews)
        logger.info(f"Simulating {k} review injection(s)")
        for _ in range(k):
            fake = self._fabricate_review()
            tampered.append(fake)
            logger.debug(f"Injected fake review: {fake.review_id}")
        return tampered

    def re_rate(self, reviews: Sequence[Review], k: int = 1) -> list[Review]:
        """Replace the rating of ``k`` randomly chosen reviews."""
        _check_count(k, reviews)
        tampered = list(reviews)
        logger.info(f"Simulating {k} rating manipulation(s)")
        for _ in range(k):
            index = self.context.rng.randrange(len(tampered))
            target = tampered[index]
            new_rating = self.context.rng.uniform(MIN_RATING, MAX_RATING)
            tampered[index] = target.model_copy(update={"rating": new_rating})
            logger.debug(
                f"Changed rating from {target.rating} to {new_rating:.3f} "
                f"for review: {target.review_id}"
            )
        return tampered

    def _fabricate_review(self) -> Review:
        if not self.original_reviews:
            raise EmptyDatasetError("No original review to use as a template")
        number = self.context.next_fake_number()
        reviewer_id = f"FAKE_USER_{number}"
        product_id = f"FAKE_PRODUCT_{number}"
        timestamp = str(int(self.context.clock()))
        return self.original_reviews[0].model_copy(
            update={
                "review_id": make_review_id(reviewer_id, product_id, timestamp),
                "reviewer_id": reviewer_id,
                "product_id": product_id,
                "text": FAKE_REVIEW_TEXT,
                "summary": FAKE_REVIEW_SUMMARY,
                "rating": FAKE_REVIEW_RATING,
                "timestamp": timestamp,
            }
        )

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect_by_root(self, candidate_root: str | None) -> TamperResult:
        """Compare a candidate root against the bound baseline root."""
        baseline = self.original_root
        if baseline is None:
            return TamperResult(
                status=TamperStatus.ERROR,
                message="No original root stored for comparison",
            )
        if not candidate_root:
            return TamperResult(
                status=TamperStatus.ERROR,
                original_root=baseline,
                message="Candidate root is empty",
            )
        if candidate_root == baseline:
            return TamperResult(
                status=TamperStatus.NO_TAMPERING_DETECTED,
                tampering_detected=False,
                original_root=baseline,
                new_root=candidate_root,
            )
        return TamperResult(
            status=TamperStatus.TAMPERING_DETECTED,
            tampering_detected=True,
            original_root=baseline,
            new_root=candidate_root,
            message="Root hash mismatch",
        )

    def detect_per_record(
        self,
        reviews: Sequence[Review],
        new_tree: MerkleTree,
    ) -> list[RecordTamperResult]:
        """
        Classify every review of an edited set.

        - Not in the original tree: NEW_RECORD_DETECTED
        - No proof obtainable from ``new_tree``: PROOF_FAILED
        - Proof from ``new_tree`` does not verify against its root, or the
          leaf digest differs from the original tree's: MODIFIED_RECORD_DETECTED
        - Otherwise: VALID
        """
        logger.info(f"Scanning {len(reviews)} reviews for tampering")
        new_root = new_tree.get_root_hash()
        results: list[RecordTamperResult] = []

        for review in reviews:
            review_id = review.review_id
            if not self.original_tree.contains(review_id):
                status = RecordStatus.NEW_RECORD_DETECTED
            else:
                status = self._check_existing(review, new_tree, new_root)
            if status != RecordStatus.VALID:
                logger.debug(f"Review {review_id}: {status.value}")
            results.append(RecordTamperResult(review_id=review_id, status=status))

        return results

    def _check_existing(
        self,
        review: Review,
        new_tree: MerkleTree,
        new_root: str | None,
    ) -> RecordStatus:
        try:
            proof = new_tree.generate_proof(review.review_id)
        except (NotFoundError, EmptyTreeError):
            return RecordStatus.PROOF_FAILED

        encoding = review.encode()
        if new_root is None or not verify_proof(encoding, proof, new_root):
            return RecordStatus.MODIFIED_RECORD_DETECTED
        if hash_leaf(encoding) != self.original_tree.leaf_hash(review.review_id):
            return RecordStatus.MODIFIED_RECORD_DETECTED
        return RecordStatus.VALID

    def comprehensive_analysis(
        self,
        new_reviews: Sequence[Review],
        new_tree: MerkleTree,
    ) -> TamperReport:
        """Aggregate root-level and record-level detection into one report."""
        root_result = self.detect_by_root(new_tree.get_root_hash())
        record_results = self.detect_per_record(new_reviews, new_tree)

        original_count = len(self.original_reviews)
        new_count = len(new_reviews)
        tampered_count = sum(1 for r in record_results if r.tampered)
        modified_count = sum(
            1 for r in record_results
            if r.status in (RecordStatus.MODIFIED_RECORD_DETECTED, RecordStatus.PROOF_FAILED)
        )

        findings: list[str] = []
        kinds: list[str] = []
        if new_count > original_count:
            findings.append(
                f"INJECTION_DETECTED: {new_count - original_count} new reviews added"
            )
            kinds.append("insertion")
        elif new_count < original_count:
            findings.append(
                f"DELETION_DETECTED: {original_count - new_count} reviews deleted"
            )
            kinds.append("deletion")

        if modified_count > 0:
            findings.append(f"MODIFICATIONS_DETECTED: {modified_count} reviews modified")
            kinds.append("modification")

        if root_result.tampering_detected:
            findings.append("INTEGRITY_VIOLATION: Root hash mismatch confirms tampering")
        elif tampered_count == 0 and new_count == original_count:
            findings.append("INTEGRITY_PRESERVED: No tampering detected")

        if kinds:
            classification = "+".join(kinds)
        elif root_result.tampering_detected:
            classification = "unclassified"
        else:
            classification = "none"

        report = TamperReport(
            root_comparison=root_result,
            record_results=record_results,
            original_count=original_count,
            new_count=new_count,
            tampered_count=tampered_count,
            findings=findings,
            classification=classification,
        )
        logger.info(
            f"Tamper analysis: {classification} "
            f"({tampered_count} flagged of {new_count} reviews)"
        )
        return report


__all__ = [
    "TAMPER_MARKER",
    "FAKE_REVIEW_TEXT",
    "TamperContext",
    "TamperDetector",
]
