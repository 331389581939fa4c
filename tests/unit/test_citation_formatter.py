"""Tests for inline citation formatting and parsing."""

import pytest

from evidence_gate.citation.formatter import (
    format_citation,
    format_citations,
    merge_line_ranges,
    parse_citations,
)
from evidence_gate.models.domain import EvidenceSpan, Relation


def test_single_line_and_range():
    assert format_citation("R1-2509228.docx", [(112, 112)]) == "[R1-2509228.docx:112]"
    assert format_citation("notes.txt", [(3, 5)]) == "[notes.txt:3-5]"


def test_discontiguous_and_mixed_items():
    assert format_citation("notes.txt", [(9, 9), (3, 3), (7, 7)]) == "[notes.txt:3,7,9]"
    assert format_citation("notes.txt", [(9, 9), (3, 5)]) == "[notes.txt:3-5,9]"


def test_touching_ranges_merge():
    assert merge_line_ranges([(5, 6), (3, 4), (10, 10), (6, 8)]) == [(3, 8), (10, 10)]
    assert format_citation("notes.txt", [(3, 4), (5, 6)]) == "[notes.txt:3-6]"


def test_rejects_absolute_paths_and_empty_ranges():
    with pytest.raises(ValueError):
        format_citation("/srv/corpus/notes.txt", [(1, 1)])
    with pytest.raises(ValueError):
        format_citation("C:\\corpus\\notes.txt", [(1, 1)])
    with pytest.raises(ValueError):
        format_citation("notes.txt", [])


def test_format_citations_groups_by_file():
    spans = [
        EvidenceSpan("b.md", (2, 2), "", Relation.SUPPORTS, 0.9),
        EvidenceSpan("a.txt", (3, 3), "", Relation.SUPPORTS, 0.8),
        EvidenceSpan("b.md", (1, 1), "", Relation.SUPPORTS, 0.7),
    ]
    assert format_citations(spans) == "[b.md:1-2] [a.txt:3]"


def test_parse_citations():
    text = "Claim one [notes/a.txt:3-5,9] and claim two [R1-2509228.docx:112]."
    assert parse_citations(text) == [
        ("notes/a.txt", [(3, 5), (9, 9)]),
        ("R1-2509228.docx", [(112, 112)]),
    ]
    assert parse_citations("Nothing cited (likely).") == []
