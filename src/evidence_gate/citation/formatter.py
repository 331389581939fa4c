"""Inline citation formatting: [file:N], [file:N-M], [file:N,M,K]."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath, PureWindowsPath

from evidence_gate.models.domain import EvidenceSpan

CITATION_RE = re.compile(r"\[([^\[\]:\s][^\[\]:]*):(\d+(?:-\d+)?(?:,\d+(?:-\d+)?)*)\]")


def merge_line_ranges(line_ranges: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    """Sort and merge overlapping or touching inclusive ranges."""
    merged: list[tuple[int, int]] = []
    for start, end in sorted(line_ranges):
        if merged and start <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def format_citation(file_id: str, line_ranges: Iterable[tuple[int, int]]) -> str:
    if PurePosixPath(file_id).is_absolute() or PureWindowsPath(file_id).is_absolute():
        raise ValueError(f"Citations use corpus-relative file ids, got {file_id!r}")
    items = [
        str(start) if start == end else f"{start}-{end}"
        for start, end in merge_line_ranges(line_ranges)
    ]
    if not items:
        raise ValueError(f"No line ranges to cite for {file_id!r}")
    return f"[{file_id}:{','.join(items)}]"


def format_citations(spans: Sequence[EvidenceSpan]) -> str:
    """One bracket group per file, in order of first appearance."""
    by_file: dict[str, list[tuple[int, int]]] = {}
    for span in spans:
        by_file.setdefault(span.file_id, []).append(span.line_range)
    return " ".join(format_citation(f, ranges) for f, ranges in by_file.items())


def parse_citations(text: str) -> list[tuple[str, list[tuple[int, int]]]]:
    """Inverse of format_citation for every citation found in ``text``."""
    results = []
    for match in CITATION_RE.finditer(text):
        ranges = []
        for item in match.group(2).split(","):
            start, _, end = item.partition("-")
            ranges.append((int(start), int(end or start)))
        results.append((match.group(1), ranges))
    return results
