"""
CLI Prove Command

Generate and check inclusion proofs for reviews in a dataset.

Usage:
    reviewproof prove reviews.jsonl --review-id ID [--review-id ID ...] [--json]
    reviewproof prove reviews.jsonl --product ASIN [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.merkle import ExistenceProver, build_review_tree
from core.schemas.errors import InputError
from core.schemas.results import ProofResult, ProofStatus
from reviewproof_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    load_dataset,
)


@dataclass
class ProveSummary:
    """Summary of proof generation for CLI output."""
    root_hash: str = ""
    requested: int = 0
    generated: int = 0
    verified: int = 0
    not_found: list[str] = field(default_factory=list)
    proofs: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarize(root_hash: str, results: list[ProofResult]) -> ProveSummary:
    summary = ProveSummary(root_hash=root_hash, requested=len(results))
    for result in results:
        if result.status == ProofStatus.PROOF_GENERATED:
            summary.generated += 1
            if result.verified:
                summary.verified += 1
        elif result.status in (ProofStatus.REVIEW_NOT_FOUND, ProofStatus.PRODUCT_NOT_FOUND):
            summary.not_found.append(result.review_id)
        summary.proofs.append(result.model_dump(mode="json"))
    return summary


def print_summary_human(summary: ProveSummary) -> None:
    print(f"Root hash: {summary.root_hash}")
    for proof in summary.proofs:
        status = proof["status"]
        if status != ProofStatus.PROOF_GENERATED.value:
            print(f"{proof['review_id'] or '-'}: {status}", file=sys.stderr)
            continue
        marker = "verified" if proof["verified"] else "NOT VERIFIED"
        print(
            f"{proof['review_id']}: {len(proof['proof'])} steps, {marker} "
            f"({proof['proof_time_us']} us)"
        )
        for step in proof["proof"]:
            print(f"  {step['side']:<5} {step['sibling_hash']}")
    print(f"Proofs verified: {summary.verified}/{summary.requested}")


def print_summary_json(summary: ProveSummary) -> None:
    print(json.dumps(summary.to_dict(), indent=2))


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Returns:
        EXIT_SUCCESS if every proof verified, EXIT_VERIFICATION_FAILED if a
        generated proof did not verify, EXIT_RUNTIME_ERROR if any proof
        could not be generated
    """
    if not args.review_id and not args.product:
        raise InputError("Give at least one --review-id or a --product")

    reviews = load_dataset(args).reviews
    tree = build_review_tree(reviews)
    prover = ExistenceProver(tree)
    prover.index_reviews(reviews)

    if args.product:
        results = prover.generate_product_proofs(args.product)
        if results and results[0].status == ProofStatus.PRODUCT_NOT_FOUND:
            results = [results[0].model_copy(update={"review_id": args.product})]
    else:
        results = prover.batch_generate_proofs(args.review_id)

    summary = summarize(tree.root_hash, results)
    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.generated < summary.requested:
        return EXIT_RUNTIME_ERROR
    if summary.verified < summary.generated:
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
