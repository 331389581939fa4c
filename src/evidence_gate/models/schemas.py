"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from evidence_gate.models.domain import RunTrace, VerificationResult


class VerifyRequest(BaseModel):
    draft: str = Field(min_length=1)
    mode: Literal["strict", "lenient"] | None = None
    scope: list[str] | None = None
    confidence_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class ClaimOut(BaseModel):
    text: str
    source_span: tuple[int, int]


class CitationOut(BaseModel):
    file_id: str
    line_range: tuple[int, int]
    relation: str
    match_score: float


class ClaimOutcome(BaseModel):
    claim: ClaimOut
    status: str
    confidence: float
    reason_codes: list[str]
    evidence: list[CitationOut]


class ExcludedClaimOut(BaseModel):
    claim: ClaimOut
    status: str
    flagged_only: bool = False


class VerifyResponse(BaseModel):
    final_answer: str
    excluded_claims: list[ExcludedClaimOut]
    overall_confidence: Literal["NONE", "LOW", "MEDIUM", "HIGH"]
    claims: list[ClaimOutcome] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    run_id: str

    @classmethod
    def from_result(cls, result: VerificationResult) -> VerifyResponse:
        return cls(
            final_answer=result.final_answer,
            excluded_claims=[
                ExcludedClaimOut(
                    claim=ClaimOut(text=e.claim.text, source_span=e.claim.source_span),
                    status=e.status.value,
                    flagged_only=e.flagged_only,
                )
                for e in result.excluded_claims
            ],
            overall_confidence=result.overall_confidence.value,
            claims=[
                ClaimOutcome(
                    claim=ClaimOut(text=r.claim.text, source_span=r.claim.source_span),
                    status=r.status.value,
                    confidence=round(r.confidence, 4),
                    reason_codes=[str(c) for c in r.reason_codes],
                    evidence=[
                        CitationOut(
                            file_id=s.file_id,
                            line_range=s.line_range,
                            relation=s.relation.value,
                            match_score=s.match_score,
                        )
                        for s in r.evidence
                    ],
                )
                for r in result.records
            ],
            notes=list(result.notes),
            run_id=result.run_id,
        )


class RunResponse(BaseModel):
    run_id: str
    timestamp: datetime
    latency_ms: float
    mode: str
    overall_confidence: str
    claim_outcomes: list[dict]
    spans: list[dict]
    error: str | None = None

    @classmethod
    def from_trace(cls, run: RunTrace) -> RunResponse:
        return cls(
            run_id=run.run_id,
            timestamp=run.timestamp,
            latency_ms=round(run.latency_ms, 2),
            mode=run.mode,
            overall_confidence=run.overall_confidence,
            claim_outcomes=run.claim_outcomes,
            spans=run.spans,
            error=run.error,
        )


class HealthResponse(BaseModel):
    status: str
    corpus_files: int
    corpus_lines: int
    audit_runs: int
