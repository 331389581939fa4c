"""Lightweight run tracing with spans."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from evidence_gate.models.domain import RunTrace, VerificationRecord


@dataclass
class Span:
    name: str
    start_ms: float
    end_ms: float = 0.0
    metadata: dict = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms


class TraceContext:
    def __init__(self, run_id: str | None = None) -> None:
        self.run_id = run_id or str(uuid4())
        self.spans: list[Span] = []
        self.start_time = time.monotonic()
        self._epoch = time.time()

    @contextmanager
    def span(self, name: str, **metadata):
        s = Span(
            name=name,
            start_ms=(time.monotonic() - self.start_time) * 1000,
            metadata=metadata,
        )
        try:
            yield s
        finally:
            s.end_ms = (time.monotonic() - self.start_time) * 1000
            self.spans.append(s)

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.start_time) * 1000

    def to_run_trace(
        self,
        draft: str,
        mode: str,
        overall_confidence: str,
        records: list[VerificationRecord] | tuple[VerificationRecord, ...] = (),
        error: str | None = None,
    ) -> RunTrace:
        return RunTrace(
            run_id=self.run_id,
            draft=draft,
            timestamp=datetime.fromtimestamp(self._epoch, tz=timezone.utc),
            latency_ms=self.elapsed_ms,
            mode=mode,
            overall_confidence=overall_confidence,
            claim_outcomes=[
                {
                    "claim_text": r.claim.text,
                    "source_span": list(r.claim.source_span),
                    "status": r.status.value,
                    "confidence": r.confidence,
                    "reason_codes": list(r.reason_codes),
                    "citations": [
                        {"file_id": s.file_id, "line_range": list(s.line_range)}
                        for s in r.evidence
                    ],
                }
                for r in records
            ],
            spans=[
                {
                    "name": s.name,
                    "start_ms": s.start_ms,
                    "end_ms": s.end_ms,
                    "duration_ms": s.duration_ms,
                    **s.metadata,
                }
                for s in self.spans
            ],
            error=error,
        )
