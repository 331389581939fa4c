"""Shared test fixtures."""

from __future__ import annotations

import pytest

from evidence_gate.assembly.assembler import ResponseAssembler
from evidence_gate.config.settings import Settings
from evidence_gate.corpus.line_corpus import LineCorpus
from evidence_gate.evidence.locator import EvidenceLocator
from evidence_gate.extraction.rule_extractor import RuleBasedClaimExtractor
from evidence_gate.pipeline.verification_pipeline import VerificationPipeline
from evidence_gate.scoring.confidence import ConfidenceScorer

MEETING_NOTES = "R1-2509228.docx"
AGENDA = "R1-2509301.txt"


def meeting_notes_lines() -> list[str]:
    lines = [f"Section {i} editorial remark." for i in range(1, 121)]
    lines[45 - 1] = "Ericsson does not support closed-loop frequency control."
    lines[60 - 1] = "Timing advance reporting was discussed briefly."
    lines[112 - 1] = (
        "Qualcomm: single-satellite positioning is not feasible due to latency of 24 seconds."
    )
    return lines


@pytest.fixture
def settings(tmp_path):
    """Test settings with temp paths."""
    return Settings(
        openai_api_key="test-key",
        google_api_key="test-key",
        audit_db_path=str(tmp_path / "audit.db"),
        corpus_dir=str(tmp_path / "corpus"),
    )


@pytest.fixture
def corpus_documents():
    return {
        MEETING_NOTES: "\n".join(meeting_notes_lines()),
        AGENDA: "Power saving for RedCap devices was agreed.\nPaging enhancements are still open.",
    }


@pytest.fixture
def corpus(corpus_documents):
    """Meeting corpus; line 112 of the notes holds the Qualcomm position."""
    return LineCorpus.from_texts(corpus_documents)


@pytest.fixture
def corpus_dir(tmp_path, corpus_documents):
    root = tmp_path / "corpus"
    root.mkdir()
    for file_id, text in corpus_documents.items():
        (root / file_id).write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def build_pipeline(settings, corpus):
    def _build(audit_store=None, **overrides) -> VerificationPipeline:
        cfg = settings.model_copy(update=overrides) if overrides else settings
        return VerificationPipeline(
            extractor=RuleBasedClaimExtractor(max_draft_chars=cfg.max_draft_chars),
            locator=EvidenceLocator(
                corpus,
                shortlist_factor=cfg.shortlist_factor,
                min_match_score=cfg.min_match_score,
                relevance_floor=cfg.relevance_floor,
            ),
            scorer=ConfidenceScorer(),
            assembler=ResponseAssembler(),
            settings=cfg,
            audit_store=audit_store,
        )

    return _build
