"""
Verification Routes

Stateless checks: verify an inclusion proof against a trusted root and
compare two roots. Nothing here reads the root log.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.errors import InvalidRequestError
from api.models.requests import CompareRootsRequest, VerifyProofRequest
from api.models.responses import CompareRootsResponse, VerifyProofResponse
from core.crypto import hash_leaf
from core.integrity import IntegrityStore
from core.merkle import ExistenceProver, ProofPath
from core.schemas.records import Review
from core.schemas.results import RootComparison


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


def _request_encoding(request: VerifyProofRequest) -> str:
    if request.encoding is not None:
        return request.encoding
    try:
        return Review.from_json(request.review).encode()
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"Unusable review object: {e}") from e


@router.post("/verify/proof", response_model=VerifyProofResponse)
async def verify_proof(request: VerifyProofRequest) -> VerifyProofResponse:
    """
    Verify that a record is committed under a trusted root.

    An empty proof never verifies.
    """
    encoding = _request_encoding(request)
    proof = ProofPath.from_list(step.model_dump() for step in request.proof)
    result = ExistenceProver.verify_proof_externally(encoding, proof, request.root_hash)
    logger.info(f"Proof check against {request.root_hash[:16]}: {result.status.value}")

    return VerifyProofResponse(
        ok=result.verified,
        status=result.status.value,
        leaf_hash=hash_leaf(encoding),
        root_hash=request.root_hash,
        steps=len(proof),
        verification_time_us=result.verification_time_us,
    )


@router.post("/roots/compare", response_model=CompareRootsResponse)
async def compare_roots(request: CompareRootsRequest) -> CompareRootsResponse:
    """Pairwise root comparison; ERROR when either root is empty."""
    result = IntegrityStore.compare_roots(request.root_a, request.root_b)
    return CompareRootsResponse(
        ok=result == RootComparison.MATCH,
        result=result.value,
    )
