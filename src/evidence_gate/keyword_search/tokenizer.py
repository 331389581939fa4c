"""Text preprocessing for BM25 keyword search and claim/quote overlap."""

from __future__ import annotations

import re

from evidence_gate.config.constants import NEGATION_CUES, STOPWORDS

_CONTRACTION_RE = re.compile(r"\b\w+n['’]t\b")


def tokenize(text: str) -> list[str]:
    """Tokenize text for BM25: lowercase, strip punctuation, remove stopwords."""
    text = text.lower()
    text = re.sub(r"[^\w\s]", " ", text)
    tokens = text.split()
    return [t for t in tokens if t not in STOPWORDS and len(t) > 1]


def stem(token: str) -> str:
    """Strip simple plural and possessive endings."""
    if len(token) > 4 and token.endswith("ies"):
        return token[:-3] + "y"
    if len(token) > 3 and token.endswith("s") and not token.endswith(("ss", "us", "is")):
        return token[:-1]
    return token


def index_tokens(text: str) -> list[str]:
    """Stemmed BM25 tokens."""
    return [stem(t) for t in tokenize(text)]


def content_tokens(text: str) -> set[str]:
    """Stemmed content words with polarity cues and negative contractions removed."""
    text = _CONTRACTION_RE.sub(" ", text.lower())
    return {stem(t) for t in tokenize(text) if t not in NEGATION_CUES}
