"""Tests for relation classification and similarity signals."""

import pytest

from evidence_gate.evidence.polarity import classify_relation, is_negated, negation_count
from evidence_gate.evidence.similarity import combine, cosine_similarity, lexical_overlap
from evidence_gate.models.domain import Relation


def test_negation_parity():
    assert negation_count("Positioning is not feasible") == 1
    assert is_negated("Ericsson doesn't support it")
    assert is_negated("Qualcomm opposes the proposal")
    assert not is_negated("Qualcomm is not opposed to the proposal")
    assert not is_negated("Qualcomm supports the proposal")


def test_classify_relation():
    claim = "Ericsson supports closed-loop frequency control"
    assert (
        classify_relation(claim, "Ericsson does not support closed-loop frequency control", 1.0)
        == Relation.CONTRADICTS
    )
    assert (
        classify_relation(claim, "Ericsson endorsed closed-loop frequency control", 0.8)
        == Relation.SUPPORTS
    )
    assert classify_relation(claim, "Ericsson does not attend", 0.1) == Relation.NEUTRAL


def test_lexical_overlap_is_claim_recall():
    claim = "Qualcomm opposes single-satellite positioning due to latency"
    quote = "Qualcomm: single-satellite positioning is not feasible due to latency of 24 seconds."
    assert lexical_overlap(claim, quote) == 1.0
    assert lexical_overlap(claim, "Qualcomm presented results") == pytest.approx(1 / 6)
    assert lexical_overlap("the a an", quote) == 0.0


def test_cosine_similarity():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0


def test_combine():
    assert combine(0.6, None, 0.3) == 0.6
    assert combine(0.6, 1.0, 0.5) == pytest.approx(0.8)
