"""
CLI Roots Commands

Persist dataset roots and check datasets against them.

Usage:
    reviewproof roots store reviews.jsonl --label NAME [--json]
    reviewproof roots check reviews.jsonl --label NAME [--json]
    reviewproof roots list [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.merkle import build_review_tree
from core.schemas.results import IntegrityStatus, UpdateStatus
from reviewproof_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    get_config,
    load_dataset,
    open_store,
    print_json,
    require_label,
)


@dataclass
class RootCheckSummary:
    """Outcome of storing or checking a dataset root."""
    label: str = ""
    root_hash: str = ""
    stored_root: str | None = None
    status: str = ""
    update: str = ""
    log_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _dataset_root(args: Namespace) -> str:
    return build_review_tree(load_dataset(args).reviews).root_hash


def roots_store_cmd(args: Namespace) -> int:
    """Build the dataset's tree and append its root to the log."""
    label = require_label(args)
    root = _dataset_root(args)
    store = open_store(args)
    previous = store.get_root(label)
    update = store.detect_updates(label, root)
    record = store.store_root(label, root, persist=True)

    summary = RootCheckSummary(
        label=label,
        root_hash=root,
        stored_root=previous,
        status="STORED",
        update=update.value,
        log_path=str(store.log_path),
    )
    if args.json:
        print_json(summary.to_dict())
    else:
        print(f"Stored root for {label!r} at {record.timestamp}: {root}")
        if update == UpdateStatus.UPDATE_DETECTED:
            print(f"Replaces previous root {previous}")
        elif update == UpdateStatus.NO_UPDATES:
            print("Root unchanged since last store")
    return EXIT_SUCCESS


def roots_check_cmd(args: Namespace) -> int:
    """
    Compare the dataset's current root against the stored one.

    Returns:
        EXIT_SUCCESS when the roots match, EXIT_VERIFICATION_FAILED when
        they differ, EXIT_RUNTIME_ERROR when the label has no stored root
    """
    label = require_label(args)
    root = _dataset_root(args)
    store = open_store(args)
    status = store.compare(label, root)

    summary = RootCheckSummary(
        label=label,
        root_hash=root,
        stored_root=store.get_root(label),
        status=status.value,
        update=store.detect_updates(label, root).value,
        log_path=str(store.log_path),
    )
    if args.json:
        print_json(summary.to_dict())
    else:
        print(f"Dataset {label!r}: {status.value}")
        print(f"  current: {root}")
        print(f"  stored:  {summary.stored_root or '(none)'}")

    if status == IntegrityStatus.VERIFIED:
        return EXIT_SUCCESS
    if status == IntegrityStatus.VIOLATED:
        return EXIT_VERIFICATION_FAILED
    return EXIT_RUNTIME_ERROR


def roots_list_cmd(args: Namespace) -> int:
    """Show the latest root per label from the log."""
    store = open_store(args)
    records = [store.get_record(label) for label in sorted(store.stored_roots())]

    if args.json:
        print_json([record.model_dump() for record in records])
        return EXIT_SUCCESS

    if not records:
        print(f"No roots stored in {get_config(args).storage.root_log_path}", file=sys.stderr)
        return EXIT_SUCCESS
    for record in records:
        print(f"{record.label}\t{record.root_hash}\t{record.timestamp}")
    return EXIT_SUCCESS
