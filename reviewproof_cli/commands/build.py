"""
CLI Build Command

Build a Merkle tree over a review dataset and report its root.

Usage:
    reviewproof build reviews.jsonl [--label NAME --store] [--levels N] [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.merkle import build_review_tree
from reviewproof_cli.commands.common import (
    EXIT_SUCCESS,
    dataset_path,
    load_dataset,
    open_store,
    require_label,
)


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    dataset: str = ""
    loaded: int = 0
    skipped: int = 0
    leaf_count: int = 0
    height: int = 0
    duplicate_count: int = 0
    build_ms: float = 0.0
    root_hash: str = ""
    label: str | None = None
    stored: bool = False
    levels: list[list[str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["label"] is None:
            del d["label"]
        if not d["levels"]:
            del d["levels"]
        return d


def print_summary_human(summary: BuildSummary) -> None:
    print(f"Dataset: {summary.dataset}")
    print(f"Reviews loaded: {summary.loaded} (skipped {summary.skipped})")
    print(f"Leaves: {summary.leaf_count}, height: {summary.height}")
    if summary.duplicate_count:
        print(f"Duplicate identifiers renamed: {summary.duplicate_count}")
    print(f"Build time: {summary.build_ms:.2f} ms")
    print(f"Root hash: {summary.root_hash}")
    for depth, level in enumerate(summary.levels):
        print(f"  level {depth}: {' '.join(level)}")
    if summary.stored:
        print(f"Stored root for dataset {summary.label!r}")


def print_summary_json(summary: BuildSummary) -> None:
    print(json.dumps(summary.to_dict(), indent=2))


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    label = require_label(args) if args.store else args.label
    result = load_dataset(args)
    tree = build_review_tree(result.reviews)
    stats = tree.build_stats

    summary = BuildSummary(
        dataset=dataset_path(args),
        loaded=result.loaded,
        skipped=result.skipped,
        leaf_count=tree.leaf_count,
        height=tree.height,
        duplicate_count=stats.duplicate_count,
        build_ms=stats.elapsed_ms,
        root_hash=tree.root_hash,
        label=label,
    )
    if args.levels:
        summary.levels = tree.levels(max_levels=args.levels)

    if args.store:
        store = open_store(args, load=False)
        store.store_root(label, summary.root_hash, persist=True)
        summary.stored = True

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
