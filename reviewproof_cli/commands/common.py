"""
Shared helpers for CLI commands.
"""

from __future__ import annotations

import json
from argparse import Namespace
from typing import Any

from core.config import RuntimeConfig
from core.ingest import LoadResult, load_reviews_jsonl
from core.integrity import IntegrityStore
from core.schemas.errors import InputError


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def get_config(args: Namespace) -> RuntimeConfig:
    config = getattr(args, "cli_config", None)
    return config if config is not None else RuntimeConfig()


def dataset_path(args: Namespace) -> str:
    """
    Dataset named on the command line, or the configured default.

    Raises:
        InputError: If neither is set
    """
    path = getattr(args, "dataset", None) or get_config(args).ingest.dataset_path
    if not path:
        raise InputError("No dataset given and no default dataset configured")
    return str(path)


def require_label(args: Namespace) -> str:
    label = getattr(args, "label", None)
    if not label:
        raise InputError("A dataset label is required (--label)")
    return label


def load_dataset(args: Namespace) -> LoadResult:
    """
    Load the dataset for a command, honouring --max-records.

    Raises:
        InputError: If no dataset is given or configured
        StorageError: If the file cannot be read
    """
    config = get_config(args)
    path = dataset_path(args)
    max_records = getattr(args, "max_records", None)
    if max_records is None:
        max_records = config.ingest.max_records
    return load_reviews_jsonl(path, max_records=max_records)


def open_store(args: Namespace, *, load: bool = True) -> IntegrityStore:
    """IntegrityStore over the configured root log, loaded if it exists."""
    store = IntegrityStore(get_config(args).storage.root_log_path)
    if load and store.log_path is not None and store.log_path.exists():
        store.load()
    return store


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))
