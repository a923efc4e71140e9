"""
CLI Add Command

Insert new reviews into a tree built from a dataset, one leaf at a time,
and check each inserted review against the updated root.

Usage:
    reviewproof add reviews.jsonl --records new_reviews.jsonl [--label NAME --store] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.ingest import load_reviews_jsonl
from core.merkle import build_review_tree, verify_proof
from core.schemas.errors import DuplicateIdentifierError
from reviewproof_cli.commands.common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    load_dataset,
    open_store,
    require_label,
)


logger = logging.getLogger(__name__)


@dataclass
class AddSummary:
    """Summary of incremental insertion for CLI output."""
    original_root: str | None = None
    new_root: str | None = None
    original_leaves: int = 0
    new_leaves: int = 0
    added: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)
    unverified: list[str] = field(default_factory=list)
    stored: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: AddSummary) -> None:
    print(f"Original root: {summary.original_root or '(empty)'}")
    print(f"New root:      {summary.new_root or '(empty)'}")
    print(f"Leaves: {summary.original_leaves} -> {summary.new_leaves}")
    print(f"Added: {len(summary.added)}")
    for review_id in summary.rejected:
        print(f"  rejected duplicate: {review_id}")
    for review_id in summary.unverified:
        print(f"  proof did not verify: {review_id}")
    if summary.stored:
        print("Stored new root")


def print_summary_json(summary: AddSummary) -> None:
    print(json.dumps(summary.to_dict(), indent=2))


def add_cmd(args: Namespace) -> int:
    """
    Execute the add command.

    Duplicate identifiers are reported and skipped; the tree is left as it
    was for those records.
    """
    label = require_label(args) if args.store else None
    tree = build_review_tree(load_dataset(args).reviews)
    new_reviews = load_reviews_jsonl(args.records).reviews

    summary = AddSummary(
        original_root=tree.get_root_hash(),
        original_leaves=tree.leaf_count,
    )

    added = []
    for review in new_reviews:
        try:
            tree.add_leaf(review.review_id, review.encode())
        except DuplicateIdentifierError:
            logger.warning(f"Skipping {review.review_id}: already in the tree")
            summary.rejected.append(review.review_id)
            continue
        added.append(review)

    root = tree.get_root_hash()
    summary.new_root = root
    summary.new_leaves = tree.leaf_count
    # Every insert changes the root, so proofs are checked against the final one
    for review in added:
        summary.added.append(review.review_id)
        proof = tree.generate_proof(review.review_id)
        if root is None or not verify_proof(review.encode(), proof, root):
            summary.unverified.append(review.review_id)

    if label and root is not None:
        open_store(args, load=False).store_root(label, root, persist=True)
        summary.stored = True

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_VERIFICATION_FAILED if summary.unverified else EXIT_SUCCESS
