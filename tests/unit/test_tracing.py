"""Tests for run tracing."""

import time

from evidence_gate.models.domain import Claim, EvidenceSpan, Relation, VerificationRecord, VerificationStatus
from evidence_gate.observability.tracing import TraceContext


def test_spans_recorded_in_order():
    trace = TraceContext(run_id="run-1")
    with trace.span("extraction"):
        time.sleep(0.001)
    with trace.span("location", claims=2):
        pass
    assert [s.name for s in trace.spans] == ["extraction", "location"]
    assert trace.spans[0].duration_ms > 0
    assert trace.spans[1].metadata == {"claims": 2}


def test_to_run_trace_includes_claim_outcomes():
    trace = TraceContext()
    record = VerificationRecord(
        claim=Claim(text="Qualcomm opposes positioning", source_span=(0, 28)),
        evidence=(EvidenceSpan("a.txt", (3, 4), "quote", Relation.SUPPORTS, 0.8),),
        status=VerificationStatus.VERIFIED,
        confidence=0.8,
        reason_codes=(),
    )
    run = trace.to_run_trace("draft", "strict", "MEDIUM", records=[record])
    assert run.run_id == trace.run_id
    assert run.claim_outcomes == [
        {
            "claim_text": "Qualcomm opposes positioning",
            "source_span": [0, 28],
            "status": "VERIFIED",
            "confidence": 0.8,
            "reason_codes": [],
            "citations": [{"file_id": "a.txt", "line_range": [3, 4]}],
        }
    ]
    assert run.error is None
