"""
Integrity Layer

Root-hash persistence, comparison, and tamper simulation/detection built
on top of the Merkle engine.
"""
from .root_log import (
    FIELD_DELIMITER,
    RootRecord,
    append_record,
    iter_records,
    load_latest,
    make_record,
    parse_line,
)
from .store import IntegrityStore
from .tamper import (
    FAKE_REVIEW_TEXT,
    TAMPER_MARKER,
    TamperContext,
    TamperDetector,
)

__all__ = [
    "FIELD_DELIMITER",
    "RootRecord",
    "append_record",
    "iter_records",
    "load_latest",
    "make_record",
    "parse_line",
    "IntegrityStore",
    "FAKE_REVIEW_TEXT",
    "TAMPER_MARKER",
    "TamperContext",
    "TamperDetector",
]
