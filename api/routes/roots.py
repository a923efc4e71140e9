"""
Root Log Routes

Read-only access to the persisted root log, and checks of candidate roots
against it. Roots are written by the CLI, not over HTTP.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_integrity_store
from api.models.requests import CheckRootRequest
from api.models.responses import RootCheckResponse, RootListResponse, RootRecordResponse
from core.integrity import IntegrityStore, RootRecord
from core.schemas.errors import NotFoundError
from core.schemas.results import IntegrityStatus


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/roots", tags=["roots"])


def _to_response(record: RootRecord) -> RootRecordResponse:
    return RootRecordResponse(
        label=record.label,
        root_hash=record.root_hash,
        timestamp=record.timestamp,
    )


def _require_record(store: IntegrityStore, label: str) -> RootRecord:
    record = store.get_record(label)
    if record is None:
        raise NotFoundError(f"No root stored for dataset: {label}", key=label)
    return record


@router.get("", response_model=RootListResponse)
async def list_roots(store: IntegrityStore = Depends(get_integrity_store)) -> RootListResponse:
    """Latest stored root per label, sorted by label."""
    records = [_require_record(store, label) for label in sorted(store.stored_roots())]
    return RootListResponse(
        ok=True,
        log_path=str(store.log_path),
        count=len(records),
        roots=[_to_response(record) for record in records],
    )


@router.get("/{label}", response_model=RootRecordResponse)
async def get_root(
    label: str,
    store: IntegrityStore = Depends(get_integrity_store),
) -> RootRecordResponse:
    """Latest stored root for one label; 404 if the label is unknown."""
    return _to_response(_require_record(store, label))


@router.post("/{label}/check", response_model=RootCheckResponse)
async def check_root(
    label: str,
    request: CheckRootRequest,
    store: IntegrityStore = Depends(get_integrity_store),
) -> RootCheckResponse:
    """
    Compare a candidate root with the stored root for a label.

    A mismatch is a normal response (``ok`` false, INTEGRITY_VIOLATED);
    only an unknown label is an error.
    """
    record = _require_record(store, label)
    status = store.compare(label, request.root_hash)
    if status != IntegrityStatus.VERIFIED:
        logger.warning(f"Root check for {label!r} returned {status.value}")

    return RootCheckResponse(
        ok=status == IntegrityStatus.VERIFIED,
        label=label,
        status=status.value,
        update=store.detect_updates(label, request.root_hash).value,
        stored_root=record.root_hash,
        candidate_root=request.root_hash,
    )
