"""Negation and opposition cue detection for relation classification."""

from __future__ import annotations

import re

from evidence_gate.config.constants import NEGATION_CUES
from evidence_gate.models.domain import Relation

_CUE_RE = re.compile(
    r"\b(?:" + "|".join(sorted(NEGATION_CUES, key=len, reverse=True)) + r")\b"
    r"|\b\w+n['’]t\b",
    re.IGNORECASE,
)


def negation_count(text: str) -> int:
    return len(_CUE_RE.findall(text))


def is_negated(text: str) -> bool:
    """Odd number of cues means negative polarity ("not opposed" reads positive)."""
    return negation_count(text) % 2 == 1


def classify_relation(
    claim_text: str,
    quoted_text: str,
    lexical_score: float,
    relevance_floor: float = 0.3,
) -> Relation:
    if lexical_score < relevance_floor:
        return Relation.NEUTRAL
    if is_negated(claim_text) != is_negated(quoted_text):
        return Relation.CONTRADICTS
    return Relation.SUPPORTS
