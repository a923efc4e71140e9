"""API request and response models."""

from api.models.requests import (
    CheckRootRequest,
    CompareRootsRequest,
    ProofStepModel,
    VerifyProofRequest,
)
from api.models.responses import (
    CompareRootsResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    RootCheckResponse,
    RootListResponse,
    RootRecordResponse,
    VerifyProofResponse,
)

__all__ = [
    "CheckRootRequest",
    "CompareRootsRequest",
    "ProofStepModel",
    "VerifyProofRequest",
    "CompareRootsResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "RootCheckResponse",
    "RootListResponse",
    "RootRecordResponse",
    "VerifyProofResponse",
]
