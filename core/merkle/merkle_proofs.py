"""
Existence Proofs for Reviews
Review-level wrappers around the tree's proof protocol.

This module provides:
- build_review_tree: Batch-build a tree from Review records
- ExistenceProver: Index reviews by id and product, generate and
  self-check proofs, and verify proofs received from elsewhere
"""
from __future__ import annotations

import logging
import time
from typing import Iterable, Sequence

from core.merkle.merkle_tree import MerkleTree, ProofPath, ProofStep, verify_proof
from core.schemas.errors import NotFoundError
from core.schemas.records import Review
from core.schemas.results import ProofResult, ProofStatus


logger = logging.getLogger(__name__)


def build_review_tree(reviews: Sequence[Review]) -> MerkleTree:
    """Build a tree with one leaf per review, in the given order."""
    return MerkleTree.build_from_leaves(
        [review.review_id for review in reviews],
        [review.encode() for review in reviews],
    )


def _elapsed_us(start: float) -> int:
    return int((time.perf_counter() - start) * 1_000_000)


class ExistenceProver:
    """
    Proves that individual reviews belong to a tree.

    The prover keeps each review's canonical encoding so a proof can be
    checked immediately after it is generated.

    Example:
        >>> prover = ExistenceProver(tree)
        >>> prover.index_reviews(reviews)
        >>> prover.generate_review_proof(reviews[0].review_id).verified
        True
    """

    def __init__(self, tree: MerkleTree) -> None:
        self.tree = tree
        self._encodings: dict[str, str] = {}
        self._by_product: dict[str, list[str]] = {}

    def index_reviews(self, reviews: Iterable[Review]) -> None:
        """Replace the index with the given reviews."""
        self._encodings.clear()
        self._by_product.clear()
        for review in reviews:
            self._encodings[review.review_id] = review.encode()
            self._by_product.setdefault(review.product_id, []).append(review.review_id)
        logger.info(
            f"Indexed {len(self._encodings)} reviews for {len(self._by_product)} products"
        )

    def generate_review_proof(self, review_id: str) -> ProofResult:
        """
        Generate and self-verify a proof for one review.

        Returns:
            ProofResult with status PROOF_GENERATED (and ``verified`` set),
            REVIEW_NOT_FOUND if the review was never indexed, or
            PROOF_FAILED if the tree has no leaf for it
        """
        start = time.perf_counter()
        encoding = self._encodings.get(review_id)
        if encoding is None:
            return ProofResult(review_id=review_id, status=ProofStatus.REVIEW_NOT_FOUND)

        try:
            proof = self.tree.generate_proof(review_id)
        except NotFoundError:
            logger.warning(f"Review {review_id!r} is indexed but has no leaf in the tree")
            return ProofResult(
                review_id=review_id,
                status=ProofStatus.PROOF_FAILED,
                encoding=encoding,
                proof_time_us=_elapsed_us(start),
            )
        proof_time_us = _elapsed_us(start)

        root = self.tree.root_hash
        return ProofResult(
            review_id=review_id,
            status=ProofStatus.PROOF_GENERATED,
            encoding=encoding,
            proof=proof.to_list(),
            root_hash=root,
            verified=verify_proof(encoding, proof, root),
            proof_time_us=proof_time_us,
        )

    def generate_product_proofs(self, product_id: str) -> list[ProofResult]:
        """Proofs for every review of a product, or a single PRODUCT_NOT_FOUND result."""
        review_ids = self._by_product.get(product_id)
        if review_ids is None:
            return [ProofResult(status=ProofStatus.PRODUCT_NOT_FOUND)]
        logger.info(f"Generating proofs for product {product_id} ({len(review_ids)} reviews)")
        return [self.generate_review_proof(review_id) for review_id in review_ids]

    def batch_generate_proofs(self, review_ids: Sequence[str]) -> list[ProofResult]:
        """Proofs for many reviews; logs success rate and mean generation time."""
        results = [self.generate_review_proof(review_id) for review_id in review_ids]
        generated = [r for r in results if r.status == ProofStatus.PROOF_GENERATED]
        if generated:
            mean_us = sum(r.proof_time_us for r in generated) // len(generated)
            logger.info(
                f"Batch complete: {len(generated)}/{len(review_ids)} proofs generated, "
                f"mean {mean_us} us"
            )
        return results

    @staticmethod
    def verify_proof_externally(
        encoding: bytes | str,
        proof: ProofPath | Sequence[ProofStep],
        root_hash: str,
    ) -> ProofResult:
        """Verify a proof without a tree, timing the check."""
        start = time.perf_counter()
        verified = verify_proof(encoding, proof, root_hash)
        elapsed = _elapsed_us(start)
        steps = proof if isinstance(proof, ProofPath) else ProofPath(tuple(proof))
        return ProofResult(
            status=ProofStatus.VERIFICATION_SUCCESS if verified else ProofStatus.VERIFICATION_FAILED,
            encoding=encoding if isinstance(encoding, str) else encoding.decode("utf-8", "replace"),
            proof=steps.to_list(),
            root_hash=root_hash,
            verified=verified,
            verification_time_us=elapsed,
        )

    def review_exists(self, review_id: str) -> bool:
        return review_id in self._encodings

    def product_exists(self, product_id: str) -> bool:
        return product_id in self._by_product

    def product_reviews(self, product_id: str) -> list[str]:
        return list(self._by_product.get(product_id, []))

    @property
    def total_indexed_reviews(self) -> int:
        return len(self._encodings)

    @property
    def total_indexed_products(self) -> int:
        return len(self._by_product)


__all__ = [
    "build_review_tree",
    "ExistenceProver",
]
