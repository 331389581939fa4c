"""Audit events for claims and runs."""

from __future__ import annotations

from evidence_gate.models.domain import VerificationRecord, VerificationResult
from evidence_gate.observability.logger import get_logger

logger = get_logger("audit")


def log_claim_outcome(run_id: str, record: VerificationRecord, duration_ms: float) -> None:
    logger.info(
        "claim_verified",
        run_id=run_id,
        claim_text=record.claim.text,
        status=record.status.value,
        confidence=round(record.confidence, 4),
        evidence_count=len(record.evidence),
        duration_ms=round(duration_ms, 2),
        reason_codes=[str(c) for c in record.reason_codes],
    )


def log_run_metrics(
    run_id: str, result: VerificationResult, mode: str, duration_ms: float
) -> None:
    counts: dict[str, int] = {}
    for record in result.records:
        counts[record.status.value] = counts.get(record.status.value, 0) + 1
    logger.info(
        "verification_run",
        run_id=run_id,
        mode=mode,
        claims=len(result.records),
        excluded=len(result.excluded_claims),
        status_counts=counts,
        overall_confidence=result.overall_confidence.value,
        duration_ms=round(duration_ms, 2),
    )
