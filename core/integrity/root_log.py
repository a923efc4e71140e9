"""
Integrity Layer
File: root_log.py

Purpose: Append-only persistence of root hashes.

Line format (one entry per line, UTF-8)::

    <label>|<rootHash>|<unixTimestamp>

Only root hashes are persisted, never tree structure. Reloading keeps
the last entry per label in file order.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.schemas.errors import InputError, StorageError


logger = logging.getLogger(__name__)


FIELD_DELIMITER = "|"


class RootRecord(BaseModel):
    """One persisted root hash."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str = Field(..., min_length=1, description="Dataset label")
    root_hash: str = Field(..., min_length=1, description="Root digest (hex)")
    timestamp: int = Field(default_factory=lambda: int(time.time()))

    @field_validator("label", "root_hash")
    @classmethod
    def _no_delimiters(cls, value: str) -> str:
        if FIELD_DELIMITER in value or "\n" in value or "\r" in value:
            raise ValueError(f"must not contain {FIELD_DELIMITER!r} or line breaks")
        return value

    def to_line(self) -> str:
        return FIELD_DELIMITER.join((self.label, self.root_hash, str(self.timestamp)))


def make_record(label: str, root_hash: str, timestamp: int | None = None) -> RootRecord:
    """
    Validate and build a RootRecord.

    Raises:
        InputError: If the label or hash is empty or holds delimiters
    """
    data: dict = {"label": label, "root_hash": root_hash}
    if timestamp is not None:
        data["timestamp"] = timestamp
    try:
        return RootRecord(**data)
    except ValueError as e:
        raise InputError(
            f"Invalid root record for label {label!r}",
            details={"errors": str(e)},
        ) from e


def parse_line(line: str) -> RootRecord | None:
    """
    Parse one log line; None for blank or malformed lines.

    The timestamp field is optional on read so that hand-edited logs
    with only ``label|hash`` still load.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    parts = line.split(FIELD_DELIMITER)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    timestamp = 0
    if len(parts) >= 3 and parts[2].strip():
        try:
            timestamp = int(parts[2].strip())
        except ValueError:
            return None
    try:
        return RootRecord(label=parts[0], root_hash=parts[1], timestamp=timestamp)
    except ValueError:
        return None


def append_record(path: str | Path, record: RootRecord) -> None:
    """
    Append one record to the log, creating parent directories as needed.

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(record.to_line() + "\n")
    except OSError as e:
        raise StorageError(f"Could not write root log: {e}", path=str(path)) from e
    logger.info(f"Root hash for {record.label!r} saved to {path}")


def iter_records(path: str | Path) -> Iterator[RootRecord]:
    """
    Yield well-formed records in file order, skipping malformed lines.

    Raises:
        StorageError: If the file is missing or unreadable
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Could not read root log: {e}", path=str(path)) from e

    for line_no, line in enumerate(lines, start=1):
        record = parse_line(line)
        if record is None:
            if line.strip():
                logger.warning(f"Skipping malformed root log line {line_no} in {path}")
            continue
        yield record


def load_latest(path: str | Path) -> tuple[dict[str, RootRecord], int]:
    """
    Rebuild the label -> latest record map.

    Returns:
        (map, number of well-formed entries read)
    """
    latest: dict[str, RootRecord] = {}
    count = 0
    for record in iter_records(path):
        latest[record.label] = record
        count += 1
    return latest, count


__all__ = [
    "FIELD_DELIMITER",
    "RootRecord",
    "make_record",
    "parse_line",
    "append_record",
    "iter_records",
    "load_latest",
]
