"""Per-claim confidence scoring: reduce an evidence set to a VerificationRecord.

| condition                                         | status             |
|---------------------------------------------------|--------------------|
| no evidence                                       | NO_EVIDENCE        |
| best CONTRADICTS, score >= contradiction floor     | CONTRADICTED       |
| best SUPPORTS, score >= confidence threshold       | VERIFIED           |
| best not contradicting, score >= partial floor     | PARTIALLY_VERIFIED |
| otherwise                                          | UNVERIFIED         |

VERIFIED is high-confidence at or above max(confidence, high) threshold.
"""

from __future__ import annotations

from collections.abc import Sequence

from evidence_gate.models.domain import (
    Claim,
    EvidenceSpan,
    Relation,
    VerificationPolicy,
    VerificationRecord,
    VerificationStatus,
)
from evidence_gate.scoring.reason_codes import ReasonCode


class ConfidenceScorer:
    def score(
        self,
        claim: Claim,
        evidence: Sequence[EvidenceSpan],
        policy: VerificationPolicy,
        reason_codes: Sequence[str] = (),
    ) -> VerificationRecord:
        ranked = tuple(sorted(evidence, key=lambda s: s.rank_key))
        reasons = [str(r) for r in reason_codes]

        if not ranked:
            if ReasonCode.SEARCH_TIMEOUT not in reasons:
                reasons.append(ReasonCode.NO_RESULTS)
            return self._record(claim, ranked, VerificationStatus.NO_EVIDENCE, 0.0, reasons)

        best = ranked[0]
        score = max(0.0, min(1.0, best.match_score))

        if best.relation == Relation.CONTRADICTS and score >= policy.contradiction_threshold:
            reasons.append(ReasonCode.CONTRADICTION_FOUND)
            return self._record(claim, ranked, VerificationStatus.CONTRADICTED, 0.0, reasons)

        if best.relation == Relation.SUPPORTS and score >= policy.confidence_threshold:
            return self._record(
                claim,
                ranked,
                VerificationStatus.VERIFIED,
                score,
                reasons,
                high_confidence=score >= policy.verified_high_floor,
            )

        if best.relation == Relation.NEUTRAL:
            reasons.append(ReasonCode.NEUTRAL_BEST_MATCH)
        if score >= policy.partial_threshold and best.relation != Relation.CONTRADICTS:
            if best.relation == Relation.SUPPORTS:
                reasons.append(ReasonCode.BELOW_CONFIDENCE_THRESHOLD)
            return self._record(
                claim, ranked, VerificationStatus.PARTIALLY_VERIFIED, score, reasons
            )

        reasons.append(ReasonCode.LOW_MATCH)
        return self._record(claim, ranked, VerificationStatus.UNVERIFIED, score, reasons)

    @staticmethod
    def _record(
        claim: Claim,
        evidence: tuple[EvidenceSpan, ...],
        status: VerificationStatus,
        confidence: float,
        reasons: list,
        high_confidence: bool = False,
    ) -> VerificationRecord:
        return VerificationRecord(
            claim=claim,
            evidence=evidence,
            status=status,
            confidence=round(confidence, 6),
            high_confidence=high_confidence,
            reason_codes=tuple(str(r) for r in reasons),
        )
