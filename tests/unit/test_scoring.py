"""Tests for confidence scoring and the per-run policy."""

import pytest

from evidence_gate.config.settings import Settings
from evidence_gate.exceptions import ScoringPolicyError
from evidence_gate.models.domain import (
    AssemblyMode,
    Claim,
    EvidenceSpan,
    Relation,
    VerificationPolicy,
    VerificationStatus,
)
from evidence_gate.scoring.confidence import ConfidenceScorer

CLAIM = Claim(text="Ericsson supports closed-loop frequency control", source_span=(0, 47))
POLICY = VerificationPolicy()


def _span(score, relation=Relation.SUPPORTS, file_id="a.txt", line=1):
    return EvidenceSpan(file_id, (line, line), "quote", relation, score)


def _status(*spans, policy=POLICY):
    return ConfidenceScorer().score(CLAIM, spans, policy).status


def test_no_evidence():
    record = ConfidenceScorer().score(CLAIM, [], POLICY)
    assert record.status == VerificationStatus.NO_EVIDENCE
    assert record.confidence == 0.0
    assert record.reason_codes == ("NO_RESULTS",)


def test_timeout_reason_kept():
    record = ConfidenceScorer().score(CLAIM, [], POLICY, reason_codes=["SEARCH_TIMEOUT"])
    assert record.status == VerificationStatus.NO_EVIDENCE
    assert record.reason_codes == ("SEARCH_TIMEOUT",)


def test_status_table():
    assert _status(_span(0.95)) == VerificationStatus.VERIFIED
    assert _status(_span(0.7)) == VerificationStatus.VERIFIED
    assert _status(_span(0.6)) == VerificationStatus.PARTIALLY_VERIFIED
    assert _status(_span(0.6, Relation.NEUTRAL)) == VerificationStatus.PARTIALLY_VERIFIED
    assert _status(_span(0.3)) == VerificationStatus.UNVERIFIED
    assert _status(_span(0.8, Relation.CONTRADICTS)) == VerificationStatus.CONTRADICTED
    assert _status(_span(0.4, Relation.CONTRADICTS)) == VerificationStatus.UNVERIFIED


def test_contradicted_confidence_is_zero():
    record = ConfidenceScorer().score(CLAIM, [_span(0.9, Relation.CONTRADICTS)], POLICY)
    assert record.confidence == 0.0
    assert "CONTRADICTION_FOUND" in record.reason_codes


def test_high_confidence_flag():
    scorer = ConfidenceScorer()
    assert scorer.score(CLAIM, [_span(0.95)], POLICY).high_confidence
    assert not scorer.score(CLAIM, [_span(0.8)], POLICY).high_confidence


def test_best_span_decides_and_evidence_ranked():
    spans = [_span(0.4, file_id="b.txt"), _span(0.9, Relation.CONTRADICTS), _span(0.4, file_id="a.txt")]
    record = ConfidenceScorer().score(CLAIM, spans, POLICY)
    assert record.status == VerificationStatus.CONTRADICTED
    assert [(s.file_id, s.match_score) for s in record.evidence] == [
        ("a.txt", 0.9),
        ("a.txt", 0.4),
        ("b.txt", 0.4),
    ]
    assert record.best.relation == Relation.CONTRADICTS


def test_verified_count_monotone_in_threshold():
    spans = [[_span(s)] for s in (0.2, 0.5, 0.65, 0.75, 0.85, 0.95, 1.0)]
    previous = None
    for threshold in (0.0, 0.3, 0.5, 0.7, 0.9, 1.0):
        policy = VerificationPolicy(confidence_threshold=threshold)
        verified = sum(
            ConfidenceScorer().score(CLAIM, s, policy).status == VerificationStatus.VERIFIED
            for s in spans
        )
        if previous is not None:
            assert verified <= previous
        previous = verified


def test_policy_rejects_out_of_range_thresholds():
    with pytest.raises(ScoringPolicyError):
        VerificationPolicy(confidence_threshold=1.5)
    with pytest.raises(ScoringPolicyError):
        VerificationPolicy(partial_threshold=-0.1)
    with pytest.raises(ScoringPolicyError):
        VerificationPolicy(max_concurrency=0)


def test_policy_rejects_unordered_bands():
    with pytest.raises(ScoringPolicyError):
        VerificationPolicy(
            confidence_threshold=0.7, high_confidence_threshold=0.4, partial_threshold=0.95
        )


def test_threshold_below_partial_floor():
    policy = VerificationPolicy(confidence_threshold=0.3)
    assert _status(_span(0.35), policy=policy) == VerificationStatus.VERIFIED
    assert _status(_span(0.35, Relation.NEUTRAL), policy=policy) == VerificationStatus.UNVERIFIED
    assert _status(_span(0.6, Relation.NEUTRAL), policy=policy) == VerificationStatus.PARTIALLY_VERIFIED


def test_policy_from_settings():
    settings = Settings(openai_api_key="x", google_api_key="x", default_mode="lenient", max_citations=2)
    policy = VerificationPolicy.from_settings(settings)
    assert policy.mode == AssemblyMode.LENIENT
    assert policy.max_citations == 2

    policy = VerificationPolicy.from_settings(settings, mode="strict", confidence_threshold=0.95)
    assert policy.mode == AssemblyMode.STRICT
    assert policy.confidence_threshold == 0.95
    assert policy.verified_high_floor == 0.95
