"""Text repair after claims are cut out of a sentence."""

from __future__ import annotations

import re

from evidence_gate.config.constants import DANGLING_CONJUNCTIONS

_CONJ = "|".join(DANGLING_CONJUNCTIONS)
_TERMINAL_RE = re.compile(r"([.!?…]+[\"'”’)\]]*)\s*$")
_LEADING_RE = re.compile(rf"^(?:[\s,;:–—-]+|(?:{_CONJ})\b)+", re.IGNORECASE)
_TRAILING_RE = re.compile(rf"(?:[\s,;:–—-]+|\b(?:{_CONJ}))+$", re.IGNORECASE)
_REPEATED_SEP_RE = re.compile(r"\s*([,;])(?:\s*[,;])+\s*")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([,.;:!?])")
_MULTI_SPACE_RE = re.compile(r"[ \t]{2,}")
_BULLET_ONLY_LINE_RE = re.compile(r"^[ \t]*(?:[-*+•]|\d{1,3}[.)])[ \t]*$\n?", re.MULTILINE)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)


def split_terminal(text: str) -> tuple[str, str]:
    """Split ``text`` into (body, terminal punctuation)."""
    match = _TERMINAL_RE.search(text)
    if not match:
        return text.rstrip(), ""
    return text[: match.start()].rstrip(), match.group(1)


def trim_dangling(text: str, trim_leading: bool = True) -> str:
    """Remove connectors and separators left hanging at either end of a sentence."""
    body, terminal = split_terminal(text)
    previous = None
    while previous != body:
        previous = body
        body = _TRAILING_RE.sub("", body)
        if trim_leading:
            body = _LEADING_RE.sub("", body)
    body = _REPEATED_SEP_RE.sub(lambda m: f"{m.group(1)} ", body)
    body = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", body)
    body = _MULTI_SPACE_RE.sub(" ", body)
    return body + terminal if body else ""


def capitalize_first(text: str) -> str:
    for i, ch in enumerate(text):
        if ch.isalpha():
            return text[:i] + ch.upper() + text[i + 1 :]
        if not (ch.isspace() or ch in "\"'“(*_"):
            return text
    return text


def tidy_document(text: str) -> str:
    """Drop list bullets emptied by removals and collapse the blank lines left behind."""
    text = _TRAILING_SPACE_RE.sub("", text)
    text = _BULLET_ONLY_LINE_RE.sub("", text)
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return text.strip()
