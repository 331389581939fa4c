"""Tests for rule-based claim extraction."""

import pytest

from evidence_gate.exceptions import DraftTooLargeError
from evidence_gate.extraction.rule_extractor import RuleBasedClaimExtractor


def _claims(draft, **kwargs):
    return RuleBasedClaimExtractor(**kwargs).extract_sync(draft)


def test_spans_point_into_draft():
    draft = "Qualcomm opposes single-satellite positioning. Ericsson supports closed-loop control."
    claims = _claims(draft)
    assert [c.text for c in claims] == [
        "Qualcomm opposes single-satellite positioning",
        "Ericsson supports closed-loop control",
    ]
    for claim in claims:
        start, end = claim.source_span
        assert draft[start:end] == claim.text


def test_skips_rhetorical_and_questions():
    draft = (
        "Here is what I found:\n"
        "Does Qualcomm support this?\n"
        "Qualcomm opposes single-satellite positioning.\n"
        "Let me know if you need more details."
    )
    assert [c.text for c in _claims(draft)] == ["Qualcomm opposes single-satellite positioning"]


def test_strips_discourse_marker():
    draft = "However, Ericsson supports closed-loop control."
    (claim,) = _claims(draft)
    assert claim.text == "Ericsson supports closed-loop control"
    assert draft[claim.source_span[0] : claim.source_span[1]] == claim.text


def test_splits_independent_clauses():
    draft = "Qualcomm opposes single-satellite positioning; Ericsson supports closed-loop control."
    assert [c.text for c in _claims(draft)] == [
        "Qualcomm opposes single-satellite positioning",
        "Ericsson supports closed-loop control",
    ]

    draft = "Qualcomm opposes single-satellite positioning, and Huawei proposes a new waveform."
    assert [c.text for c in _claims(draft)] == [
        "Qualcomm opposes single-satellite positioning",
        "Huawei proposes a new waveform",
    ]


def test_does_not_split_shared_subject():
    draft = "Ericsson tested frequency control, and measured latency gains."
    assert [c.text for c in _claims(draft)] == [
        "Ericsson tested frequency control, and measured latency gains"
    ]


def test_skips_low_content_sentences():
    assert _claims("Yes. Indeed.") == []


def test_empty_draft():
    assert _claims("") == []
    assert _claims("   \n\n") == []


def test_draft_too_large():
    with pytest.raises(DraftTooLargeError):
        _claims("x" * 101, max_draft_chars=100)


async def test_async_extract_matches_sync():
    draft = "Qualcomm opposes single-satellite positioning."
    extractor = RuleBasedClaimExtractor()
    assert await extractor.extract(draft) == extractor.extract_sync(draft)
