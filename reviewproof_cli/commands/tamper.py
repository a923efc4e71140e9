"""
CLI Tamper Command

Simulate tampering on a dataset and report how it is detected.

Usage:
    reviewproof tamper reviews.jsonl --mode modify|delete|inject|rerate
        [--count K] [--seed S] [--label NAME] [--json]

With --label, the baseline is the root stored for that label in the root
log when one exists; otherwise it is the root of the freshly built tree.
"""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.integrity import TamperContext, TamperDetector
from core.merkle import build_review_tree
from core.schemas.results import TamperReport
from reviewproof_cli.commands.common import (
    EXIT_SUCCESS,
    dataset_path,
    get_config,
    load_dataset,
    open_store,
)


TAMPER_MODES = ("modify", "delete", "inject", "rerate")


def report_to_dict(report: TamperReport, mode: str, count: int, include_records: bool) -> dict[str, Any]:
    data = report.model_dump(mode="json")
    data["mode"] = mode
    data["count"] = count
    if include_records:
        data["record_results"] = [r.model_dump(mode="json") for r in report.tampered_records()]
    else:
        del data["record_results"]
    return data


def print_report_human(report: TamperReport, mode: str, count: int, include_records: bool) -> None:
    comparison = report.root_comparison
    print(f"Simulation: {mode} x{count}")
    print(f"Reviews: {report.original_count} -> {report.new_count}")
    print(f"Original root: {comparison.original_root}")
    print(f"New root:      {comparison.new_root}")
    print(f"Root check: {comparison.status.value}")
    print(f"Flagged records: {report.tampered_count}")
    print(f"Classification: {report.classification}")
    for finding in report.findings:
        print(f"  - {finding}")
    if include_records:
        for record in report.tampered_records():
            print(f"  {record.status.value}: {record.review_id}")


def tamper_cmd(args: Namespace) -> int:
    """
    Execute the tamper command.

    Detection is the expected outcome of a simulation, so a detected
    tampering still exits with EXIT_SUCCESS.
    """
    config = get_config(args)
    seed = args.seed if args.seed is not None else config.tamper.seed
    count = args.count if args.count is not None else config.tamper.default_count
    label = args.label or Path(dataset_path(args)).stem

    reviews = load_dataset(args).reviews
    tree = build_review_tree(reviews)
    detector = TamperDetector(tree, reviews, context=TamperContext.seeded(seed))
    detector.set_dataset_name(label)

    if args.label:
        stored = open_store(args).get_root(args.label)
        if stored is not None:
            detector.store_original_root(label, stored)

    simulate = {
        "modify": detector.modify,
        "delete": detector.delete,
        "inject": detector.inject,
        "rerate": detector.re_rate,
    }[args.mode]
    tampered = simulate(reviews, count)

    report = detector.comprehensive_analysis(tampered, build_review_tree(tampered))
    if args.json:
        print(json.dumps(report_to_dict(report, args.mode, count, args.records), indent=2))
    else:
        print_report_human(report, args.mode, count, args.records)
    return EXIT_SUCCESS
