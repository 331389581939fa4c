"""Sentence segmentation with character offsets into the original text."""

from __future__ import annotations

import re

from evidence_gate.config.constants import ABBREVIATIONS

_LINE_RE = re.compile(r"[^\n]+")
_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_HEADER_RE = re.compile(r"^\s*#{1,6}\s")
_RULE_RE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")
_TABLE_SEP_RE = re.compile(r"^\s*\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)*\|?\s*$")
_PREFIX_RE = re.compile(r"^\s*(?:>\s*)*(?:(?:[-*+•]|\d{1,3}[.)])\s+)?")
_BOUNDARY_RE = re.compile(r"[.!?]+[\"'”’)\]]*(?=\s+|$)")
_TERMINAL_CHARS = ".!?…"


def is_structural_line(line: str) -> bool:
    """Headers, horizontal rules, and table separators carry no claims."""
    return bool(
        _HEADER_RE.match(line) or _RULE_RE.match(line) or _TABLE_SEP_RE.match(line)
    )


def split_sentences(text: str) -> list[tuple[int, int]]:
    """Return [start, end) offsets of the sentences in ``text``.

    Sentences never span lines. Structural lines and fenced code blocks
    produce no sentences. List bullets and blockquote markers are excluded
    from the sentence offsets; terminal punctuation is included.
    """
    spans: list[tuple[int, int]] = []
    in_fence = False
    for line_match in _LINE_RE.finditer(text):
        line = line_match.group(0)
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence or not line.strip() or is_structural_line(line):
            continue

        base = line_match.start()
        cursor = _PREFIX_RE.match(line).end()
        for boundary in _BOUNDARY_RE.finditer(line, cursor):
            if _is_abbreviation(line, boundary.start()):
                continue
            following = line[boundary.end():].lstrip()
            if following and not (following[0].isupper() or following[0].isdigit() or following[0] in "\"'“(["):
                continue
            _append(spans, line, base, cursor, boundary.end())
            cursor = boundary.end()
        _append(spans, line, base, cursor, len(line))
    return spans


def strip_terminal(text: str, start: int, end: int) -> tuple[int, int]:
    """Shrink [start, end) to exclude surrounding whitespace and terminal punctuation."""
    while end > start and (text[end - 1].isspace() or text[end - 1] in _TERMINAL_CHARS):
        end -= 1
    while start < end and text[start].isspace():
        start += 1
    return start, end


def _append(spans: list[tuple[int, int]], line: str, base: int, start: int, end: int) -> None:
    while start < end and line[start].isspace():
        start += 1
    while end > start and line[end - 1].isspace():
        end -= 1
    if end > start:
        spans.append((base + start, base + end))


def _is_abbreviation(line: str, dot_index: int) -> bool:
    if line[dot_index] != ".":
        return False
    word_start = dot_index
    while word_start > 0 and not line[word_start - 1].isspace():
        word_start -= 1
    word = line[word_start : dot_index + 1].lower().lstrip("(\"'“")
    if word in ABBREVIATIONS:
        return True
    # Single-letter initials such as "J."
    return len(word) == 2 and word[0].isalpha()
