"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "reviewproof-api"
    version: str = "v1"


class VerifyProofResponse(BaseModel):
    """Response for POST /verify/proof endpoint."""

    ok: bool = Field(..., description="Whether the proof verified")
    status: str = Field(..., description="VERIFICATION_SUCCESS or VERIFICATION_FAILED")
    leaf_hash: str = Field(..., description="Digest of the submitted encoding")
    root_hash: str = Field(..., description="Trusted root the proof was checked against")
    steps: int = Field(default=0, description="Number of proof steps")
    verification_time_us: int = Field(default=0)


class CompareRootsResponse(BaseModel):
    """Response for POST /roots/compare endpoint."""

    ok: bool = Field(..., description="Whether the roots match")
    result: str = Field(..., description="ROOTS_MATCH, ROOTS_DIFFER or ERROR")


class RootRecordResponse(BaseModel):
    """One stored root."""

    label: str
    root_hash: str
    timestamp: int = 0


class RootListResponse(BaseModel):
    """Response for GET /roots endpoint."""

    ok: bool = True
    log_path: str = ""
    count: int = 0
    roots: list[RootRecordResponse] = Field(default_factory=list)


class RootCheckResponse(BaseModel):
    """Response for POST /roots/{label}/check endpoint."""

    ok: bool = Field(..., description="Whether the candidate matches the stored root")
    label: str
    status: str = Field(..., description="Integrity status of the comparison")
    update: str = Field(..., description="Update status relative to the stored root")
    stored_root: str | None = None
    candidate_root: str


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = Field(default=False, description="Whether the request can be retried")


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
