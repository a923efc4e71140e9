"""
Schemas & Canonicalization
File: results.py

Purpose: Outcome vocabulary for integrity checks, proofs and tamper
detection. These are values returned to callers; none of them signal
an error condition by themselves.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IntegrityStatus(str, Enum):
    """Outcome of comparing a candidate root against a stored root."""
    VERIFIED = "INTEGRITY_VERIFIED"
    VIOLATED = "INTEGRITY_VIOLATED"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


class RootComparison(str, Enum):
    """Outcome of a stateless pairwise root comparison."""
    MATCH = "ROOTS_MATCH"
    DIFFER = "ROOTS_DIFFER"
    ERROR = "ERROR"


class UpdateStatus(str, Enum):
    """Whether a dataset changed since its root was last stored."""
    UNKNOWN = "UNKNOWN"
    NO_UPDATES = "NO_UPDATES"
    UPDATE_DETECTED = "UPDATE_DETECTED"


class TamperStatus(str, Enum):
    """Outcome of root-level tamper detection."""
    NO_TAMPERING_DETECTED = "NO_TAMPERING_DETECTED"
    TAMPERING_DETECTED = "TAMPERING_DETECTED"
    ERROR = "ERROR"


class RecordStatus(str, Enum):
    """Outcome of per-record tamper detection."""
    NEW_RECORD_DETECTED = "NEW_RECORD_DETECTED"
    MODIFIED_RECORD_DETECTED = "MODIFIED_RECORD_DETECTED"
    PROOF_FAILED = "PROOF_GENERATION_FAILED"
    VALID = "RECORD_VALID"


class ProofStatus(str, Enum):
    """Outcome of an existence-proof request."""
    PROOF_GENERATED = "PROOF_GENERATED"
    REVIEW_NOT_FOUND = "REVIEW_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    PROOF_FAILED = "PROOF_GENERATION_FAILED"
    VERIFICATION_SUCCESS = "VERIFICATION_SUCCESS"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"


class TamperResult(BaseModel):
    """Result of comparing a candidate root against the bound baseline."""

    model_config = ConfigDict(extra="forbid")

    detection_method: str = Field(default="ROOT_HASH_COMPARISON")
    status: TamperStatus
    tampering_detected: bool = False
    original_root: str | None = None
    new_root: str | None = None
    message: str = ""


class RecordTamperResult(BaseModel):
    """Per-record detection outcome."""

    model_config = ConfigDict(extra="forbid")

    review_id: str
    status: RecordStatus

    @property
    def tampered(self) -> bool:
        return self.status != RecordStatus.VALID


class TamperReport(BaseModel):
    """Aggregate of root-level and record-level detection."""

    model_config = ConfigDict(extra="forbid")

    root_comparison: TamperResult
    record_results: list[RecordTamperResult] = Field(default_factory=list)
    original_count: int = 0
    new_count: int = 0
    tampered_count: int = 0
    findings: list[str] = Field(default_factory=list)
    classification: str = ""

    @property
    def analysis(self) -> str:
        """Findings joined one per line."""
        return "\n".join(self.findings)

    def tampered_records(self) -> list[RecordTamperResult]:
        return [r for r in self.record_results if r.tampered]


class ProofResult(BaseModel):
    """Result of generating or externally verifying an existence proof."""

    model_config = ConfigDict(extra="forbid")

    review_id: str = ""
    status: ProofStatus
    encoding: str = ""
    proof: list[dict[str, Any]] = Field(default_factory=list)
    root_hash: str | None = None
    verified: bool = False
    proof_time_us: int = 0
    verification_time_us: int = 0
