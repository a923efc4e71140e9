"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    reviewproof build [DATASET] [--label NAME --store] [--levels N] [--json]
    reviewproof prove [DATASET] --review-id ID [--review-id ID ...] [--json]
    reviewproof prove [DATASET] --product ASIN [--json]
    reviewproof add [DATASET] --records FILE [--label NAME --store] [--json]
    reviewproof roots store [DATASET] --label NAME [--json]
    reviewproof roots check [DATASET] --label NAME [--json]
    reviewproof roots list [--json]
    reviewproof tamper [DATASET] --mode MODE [--count K] [--seed S] [--json]
    reviewproof config --init | --show

DATASET defaults to the configured ingest.dataset_path.

Environment Variables:
    REVIEWPROOF_ROOT_LOG        Root hash log (default: merkle_roots.txt)
    REVIEWPROOF_DATASET         Default dataset path
    REVIEWPROOF_MAX_RECORDS     Record limit for loads (default: 0, no limit)
    REVIEWPROOF_TAMPER_SEED     Seed for tamper simulations
    REVIEWPROOF_LOG_LEVEL       Log level (default: INFO)
    REVIEWPROOF_LOG_FILE        Log file path
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import get_default_config_template, load_config
from core.schemas.errors import ReviewProofException
from reviewproof_cli import __version__
from reviewproof_cli.commands import add, build, prove, roots, tamper
from reviewproof_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "setup_logging",
    "create_parser",
    "config_cmd",
    "main",
]


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_dataset_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "dataset",
        type=str,
        nargs="?",
        default=None,
        help="JSON-lines review dataset (default: from config)",
    )
    parser.add_argument(
        "--max-records",
        type=int,
        default=None,
        help="Load at most this many reviews (0 = all)",
    )


def _add_json_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="reviewproof",
        description="Reviewproof CLI - Merkle integrity for review datasets.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./reviewproof.json or ~/.config/reviewproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a Merkle tree over a dataset",
        description="Load a dataset, build its tree and print the root hash.",
    )
    _add_dataset_args(build_parser)
    build_parser.add_argument("--label", type=str, default=None, help="Dataset label")
    build_parser.add_argument(
        "--store",
        action="store_true",
        default=False,
        help="Append the root to the root log under --label",
    )
    build_parser.add_argument(
        "--levels",
        type=int,
        default=0,
        help="Show hash prefixes for the top N levels",
    )
    _add_json_arg(build_parser)
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate inclusion proofs",
        description="Generate and self-verify inclusion proofs for reviews.",
    )
    _add_dataset_args(prove_parser)
    prove_parser.add_argument(
        "--review-id",
        action="append",
        default=[],
        help="Review identifier (repeatable)",
    )
    prove_parser.add_argument(
        "--product",
        type=str,
        default=None,
        help="Prove every review of this product",
    )
    _add_json_arg(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- add command ---
    add_parser = subparsers.add_parser(
        "add",
        help="Insert new reviews incrementally",
        description="Insert reviews from --records one leaf at a time and verify them.",
    )
    _add_dataset_args(add_parser)
    add_parser.add_argument(
        "--records",
        type=str,
        required=True,
        help="JSON-lines file with reviews to insert",
    )
    add_parser.add_argument("--label", type=str, default=None, help="Dataset label")
    add_parser.add_argument(
        "--store",
        action="store_true",
        default=False,
        help="Append the new root to the root log under --label",
    )
    _add_json_arg(add_parser)
    add_parser.set_defaults(func=add.add_cmd)

    # --- roots command ---
    roots_parser = subparsers.add_parser(
        "roots",
        help="Store, check and list dataset roots",
        description="Manage the root hash log.",
    )
    roots_subparsers = roots_parser.add_subparsers(dest="roots_command", help="Roots action")

    roots_store = roots_subparsers.add_parser("store", help="Store a dataset's root")
    _add_dataset_args(roots_store)
    roots_store.add_argument("--label", type=str, required=True, help="Dataset label")
    _add_json_arg(roots_store)
    roots_store.set_defaults(func=roots.roots_store_cmd)

    roots_check = roots_subparsers.add_parser("check", help="Check a dataset against its stored root")
    _add_dataset_args(roots_check)
    roots_check.add_argument("--label", type=str, required=True, help="Dataset label")
    _add_json_arg(roots_check)
    roots_check.set_defaults(func=roots.roots_check_cmd)

    roots_list = roots_subparsers.add_parser("list", help="List stored roots")
    _add_json_arg(roots_list)
    roots_list.set_defaults(func=roots.roots_list_cmd)

    roots_parser.set_defaults(func=lambda args: roots_parser.print_help() or EXIT_SUCCESS)

    # --- tamper command ---
    tamper_parser = subparsers.add_parser(
        "tamper",
        help="Simulate tampering and report detection",
        description="Apply a tamper simulation to a dataset and analyse it.",
    )
    _add_dataset_args(tamper_parser)
    tamper_parser.add_argument(
        "--mode",
        type=str,
        required=True,
        choices=tamper.TAMPER_MODES,
        help="Kind of tampering to simulate",
    )
    tamper_parser.add_argument(
        "--count", "-k",
        type=int,
        default=None,
        help="Number of records to tamper (default: from config)",
    )
    tamper_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: from config)",
    )
    tamper_parser.add_argument("--label", type=str, default=None, help="Dataset label")
    tamper_parser.add_argument(
        "--records",
        action="store_true",
        default=False,
        help="List every flagged record",
    )
    _add_json_arg(tamper_parser)
    tamper_parser.set_defaults(func=tamper.tamper_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="reviewproof.json",
        help="Path for config file (default: reviewproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (REVIEWPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: reviewproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ReviewProofException as e:
        if args.debug:
            traceback.print_exc()
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
