"""Claim/quote similarity signals."""

from __future__ import annotations

import numpy as np

from evidence_gate.keyword_search.tokenizer import content_tokens


def lexical_overlap(claim_text: str, quoted_text: str) -> float:
    """Fraction of the claim's content tokens present in the quote."""
    claim_tokens = content_tokens(claim_text)
    if not claim_tokens:
        return 0.0
    return len(claim_tokens & content_tokens(quoted_text)) / len(claim_tokens)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity clipped to [0, 1]."""
    va = np.asarray(a, dtype=np.float32)
    vb = np.asarray(b, dtype=np.float32)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return max(0.0, min(1.0, float(np.dot(va, vb)) / denom))


def combine(lexical: float, semantic: float | None, semantic_weight: float) -> float:
    if semantic is None:
        return lexical
    score = (1.0 - semantic_weight) * lexical + semantic_weight * semantic
    return max(0.0, min(1.0, score))
