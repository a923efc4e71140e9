"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import record,
result and error definitions.
"""

# Canonical encoding API
from .canonical import (
    CANONICAL_FIELDS,
    FIELD_SEPARATOR,
    encode_review,
    encode_review_bytes,
    format_rating,
    trim_field,
)

# Error models and exceptions
from .errors import (
    DuplicateIdentifierError,
    EmptyDatasetError,
    EmptyTreeError,
    ErrorCodes,
    InputError,
    NotFoundError,
    ReviewProofError,
    ReviewProofException,
    SizeMismatchError,
    StateError,
    StorageError,
)

# Records
from .records import Review, make_review_id

# Result vocabulary
from .results import (
    IntegrityStatus,
    ProofResult,
    ProofStatus,
    RecordStatus,
    RecordTamperResult,
    RootComparison,
    TamperReport,
    TamperResult,
    TamperStatus,
    UpdateStatus,
)

__all__ = [
    # Canonical
    "CANONICAL_FIELDS",
    "FIELD_SEPARATOR",
    "encode_review",
    "encode_review_bytes",
    "format_rating",
    "trim_field",
    # Errors
    "DuplicateIdentifierError",
    "EmptyDatasetError",
    "EmptyTreeError",
    "ErrorCodes",
    "InputError",
    "NotFoundError",
    "ReviewProofError",
    "ReviewProofException",
    "SizeMismatchError",
    "StateError",
    "StorageError",
    # Records
    "Review",
    "make_review_id",
    # Results
    "IntegrityStatus",
    "ProofResult",
    "ProofStatus",
    "RecordStatus",
    "RecordTamperResult",
    "RootComparison",
    "TamperReport",
    "TamperResult",
    "TamperStatus",
    "UpdateStatus",
]
