"""Verification and audit trail endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from evidence_gate.api.dependencies import get_audit_store, get_verification_pipeline
from evidence_gate.config.constants import VERIFICATION_FAILED_MESSAGE
from evidence_gate.exceptions import DraftTooLargeError, EvidenceGateError
from evidence_gate.models.schemas import RunResponse, VerifyRequest, VerifyResponse
from evidence_gate.observability.logger import get_logger
from evidence_gate.pipeline.verification_pipeline import VerificationPipeline
from evidence_gate.storage.sqlite_audit_store import SQLiteAuditStore

logger = get_logger("routes_verify")

router = APIRouter()


@router.post("/verify", response_model=VerifyResponse)
async def verify(
    request: VerifyRequest,
    pipeline: VerificationPipeline = Depends(get_verification_pipeline),
) -> VerifyResponse:
    try:
        result = await pipeline.verify_and_assemble(
            request.draft,
            mode=request.mode,
            scope=request.scope,
            confidence_threshold=request.confidence_threshold,
        )
    except DraftTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except EvidenceGateError as e:
        logger.error("verify_failed", error_type=type(e).__name__)
        raise HTTPException(status_code=503, detail=VERIFICATION_FAILED_MESSAGE)
    return VerifyResponse.from_result(result)


@router.get("/runs", response_model=list[RunResponse])
async def list_runs(
    limit: int = Query(20, ge=1, le=100),
    audit_store: SQLiteAuditStore = Depends(get_audit_store),
) -> list[RunResponse]:
    """Most recent verification runs first."""
    runs = await audit_store.get_recent_runs(limit=limit)
    return [RunResponse.from_trace(run) for run in runs]


@router.get("/runs/{run_id}", response_model=RunResponse)
async def get_run(
    run_id: str,
    audit_store: SQLiteAuditStore = Depends(get_audit_store),
) -> RunResponse:
    run = await audit_store.get_run(run_id)
    if run is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return RunResponse.from_trace(run)
