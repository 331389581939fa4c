"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from evidence_gate.exceptions import ScoringPolicyError


class Relation(str, Enum):
    SUPPORTS = "SUPPORTS"
    CONTRADICTS = "CONTRADICTS"
    NEUTRAL = "NEUTRAL"


class VerificationStatus(str, Enum):
    VERIFIED = "VERIFIED"
    PARTIALLY_VERIFIED = "PARTIALLY_VERIFIED"
    UNVERIFIED = "UNVERIFIED"
    CONTRADICTED = "CONTRADICTED"
    NO_EVIDENCE = "NO_EVIDENCE"


class AssemblyMode(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"


class OverallConfidence(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class Claim:
    text: str
    source_span: tuple[int, int]  # [start, end) offsets into the draft


@dataclass(frozen=True)
class EvidenceSpan:
    file_id: str
    line_range: tuple[int, int]  # 1-based, inclusive
    quoted_text: str
    relation: Relation
    match_score: float

    @property
    def rank_key(self) -> tuple:
        """Score descending, then file_id and line_range ascending."""
        return (-self.match_score, self.file_id, self.line_range)


@dataclass(frozen=True)
class VerificationRecord:
    claim: Claim
    evidence: tuple[EvidenceSpan, ...]
    status: VerificationStatus
    confidence: float
    high_confidence: bool = False
    reason_codes: tuple[str, ...] = ()

    @property
    def best(self) -> EvidenceSpan | None:
        return self.evidence[0] if self.evidence else None


@dataclass(frozen=True)
class ExcludedClaim:
    claim: Claim
    status: VerificationStatus
    flagged_only: bool = False


@dataclass(frozen=True)
class VerificationResult:
    final_answer: str
    excluded_claims: tuple[ExcludedClaim, ...]
    overall_confidence: OverallConfidence
    records: tuple[VerificationRecord, ...] = ()
    notes: tuple[str, ...] = ()
    run_id: str = ""


@dataclass(frozen=True)
class VerificationPolicy:
    """Per-run configuration. Passed explicitly to every stage of a run."""

    mode: AssemblyMode = AssemblyMode.STRICT
    confidence_threshold: float = 0.7
    high_confidence_threshold: float = 0.9
    partial_threshold: float = 0.5
    contradiction_threshold: float = 0.5
    max_results: int = 10
    max_concurrency: int = 8
    search_timeout_s: float = 10.0
    max_citations: int = 3

    def __post_init__(self) -> None:
        for name in (
            "confidence_threshold",
            "high_confidence_threshold",
            "partial_threshold",
            "contradiction_threshold",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ScoringPolicyError(f"{name} must be within [0, 1], got {value}")
        # The per-run confidence threshold may sit anywhere in [0, 1]; the fixed
        # bands must stay ordered
        if self.partial_threshold > self.high_confidence_threshold:
            raise ScoringPolicyError(
                f"partial_threshold {self.partial_threshold} exceeds "
                f"high_confidence_threshold {self.high_confidence_threshold}"
            )
        if self.max_results < 1 or self.max_concurrency < 1:
            raise ScoringPolicyError("max_results and max_concurrency must be positive")

    @property
    def verified_high_floor(self) -> float:
        return max(self.confidence_threshold, self.high_confidence_threshold)

    @classmethod
    def from_settings(
        cls,
        settings,
        mode: AssemblyMode | str | None = None,
        confidence_threshold: float | None = None,
    ) -> VerificationPolicy:
        return cls(
            mode=AssemblyMode(mode or settings.default_mode),
            confidence_threshold=(
                settings.confidence_threshold
                if confidence_threshold is None
                else confidence_threshold
            ),
            high_confidence_threshold=settings.high_confidence_threshold,
            partial_threshold=settings.partial_threshold,
            contradiction_threshold=settings.contradiction_threshold,
            max_results=settings.max_results,
            max_concurrency=settings.max_concurrency,
            search_timeout_s=settings.search_timeout_s,
            max_citations=settings.max_citations,
        )


@dataclass
class RunTrace:
    run_id: str
    draft: str
    timestamp: datetime
    latency_ms: float
    mode: str
    overall_confidence: str
    claim_outcomes: list[dict]
    spans: list[dict]
    error: str | None = None
