"""
Integrity Layer
File: store.py

Purpose: Keep named root hashes and compare candidate roots against them.

The in-memory map is last-write-wins per label. When a log path is
configured, ``save_root`` appends to it and ``load`` rebuilds the map
from it (see ``root_log``).
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.integrity.root_log import RootRecord, append_record, load_latest, make_record
from core.schemas.errors import StateError
from core.schemas.results import IntegrityStatus, RootComparison, UpdateStatus


logger = logging.getLogger(__name__)


class IntegrityStore:
    """
    Named root hashes with comparison helpers.

    Example:
        >>> store = IntegrityStore()
        >>> store.store_root("electronics", root)
        >>> store.compare("electronics", root)
        <IntegrityStatus.VERIFIED: 'INTEGRITY_VERIFIED'>
    """

    def __init__(self, log_path: str | Path | None = None) -> None:
        self.log_path = Path(log_path) if log_path is not None else None
        self._roots: dict[str, RootRecord] = {}
        self.current_root: str | None = None
        self.current_label: str | None = None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def store_root(self, label: str, root_hash: str, *, persist: bool = False) -> RootRecord:
        """
        Upsert the root for a label and make it the current root.

        Args:
            label: Dataset label
            root_hash: Root digest
            persist: Also append the entry to the configured log

        Raises:
            InputError: If label or hash is empty or holds delimiters
            StateError: If ``persist`` is set but no log path is configured
            StorageError: If the log cannot be written
        """
        record = make_record(label, root_hash)
        self._roots[label] = record
        self.current_root = root_hash
        self.current_label = label
        logger.info(f"Stored root hash for dataset {label!r}: {root_hash}")
        if persist:
            self._append(record)
        return record

    def save_root(self, label: str, root_hash: str) -> RootRecord:
        """Append an entry to the log without changing the in-memory map."""
        record = make_record(label, root_hash)
        self._append(record)
        return record

    def _append(self, record: RootRecord) -> None:
        if self.log_path is None:
            raise StateError("No root log path configured")
        append_record(self.log_path, record)

    def load(self) -> int:
        """
        Replace the in-memory map with the latest entry per label from the log.

        Returns:
            Number of well-formed entries read

        Raises:
            StateError: If no log path is configured
            StorageError: If the log cannot be read
        """
        if self.log_path is None:
            raise StateError("No root log path configured")
        latest, count = load_latest(self.log_path)
        self._roots = latest
        logger.info(f"Loaded {count} root hashes ({len(latest)} labels) from {self.log_path}")
        return count

    def clear(self) -> None:
        self._roots.clear()
        self.current_root = None
        self.current_label = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def has_root(self, label: str) -> bool:
        return label in self._roots

    def get_root(self, label: str) -> str | None:
        record = self._roots.get(label)
        return record.root_hash if record else None

    def get_record(self, label: str) -> RootRecord | None:
        return self._roots.get(label)

    def stored_roots(self) -> dict[str, str]:
        """Copy of the label -> root map."""
        return {label: record.root_hash for label, record in self._roots.items()}

    def compare(self, label: str, candidate_root: str | None = None) -> IntegrityStatus:
        """
        Compare a candidate root with the stored root for a label.

        When ``candidate_root`` is None the current root is used.

        Returns:
            NOT_FOUND if the label is unknown, ERROR if there is no usable
            candidate (empty hash), otherwise VERIFIED or VIOLATED
        """
        record = self._roots.get(label)
        if record is None:
            return IntegrityStatus.NOT_FOUND

        candidate = self.current_root if candidate_root is None else candidate_root
        if not candidate:
            return IntegrityStatus.ERROR

        if candidate == record.root_hash:
            return IntegrityStatus.VERIFIED
        logger.warning(f"Integrity violated for dataset {label!r}")
        return IntegrityStatus.VIOLATED

    compare_root = compare

    def detect_updates(self, label: str, new_root: str) -> UpdateStatus:
        """Whether ``new_root`` differs from the last root stored for a label."""
        record = self._roots.get(label)
        if record is None:
            return UpdateStatus.UNKNOWN
        if new_root == record.root_hash:
            return UpdateStatus.NO_UPDATES
        return UpdateStatus.UPDATE_DETECTED

    @staticmethod
    def compare_roots(root_a: str | None, root_b: str | None) -> RootComparison:
        """Stateless pairwise comparison; ERROR if either root is empty."""
        if not root_a or not root_b:
            return RootComparison.ERROR
        if root_a == root_b:
            return RootComparison.MATCH
        return RootComparison.DIFFER


__all__ = ["IntegrityStore"]
