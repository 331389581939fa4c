"""Tests for the BM25 passage index."""

from evidence_gate.keyword_search.bm25_index import BM25Index

PASSAGES = [
    ("p1", "Qualcomm opposes single-satellite positioning."),
    ("p2", "Ericsson supports closed-loop frequency control."),
    ("p3", "Satellite ephemeris updates were discussed."),
    ("p4", "Paging enhancements are still open."),
]


def test_search_returns_only_overlapping_passages():
    index = BM25Index()
    index.build(PASSAGES)
    results = index.search("satellite positioning")
    ids = [pid for pid, _ in results]
    assert ids[0] == "p1"
    assert set(ids) == {"p1", "p3"}
    assert results[0][1] > results[1][1]


def test_search_allowed_filter():
    index = BM25Index()
    index.build(PASSAGES)
    results = index.search("satellite positioning", allowed={"p3"})
    assert [pid for pid, _ in results] == ["p3"]


def test_search_top_k():
    index = BM25Index()
    index.build(PASSAGES)
    assert len(index.search("satellite positioning", top_k=1)) == 1


def test_search_no_tokens_or_no_index():
    index = BM25Index()
    assert index.search("satellite") == []
    index.build(PASSAGES)
    assert index.search("the a an") == []
    assert index.search("unrelated waveform") == []


def test_build_replaces_index():
    index = BM25Index()
    index.build(PASSAGES)
    assert index.size == 4
    index.build(PASSAGES[:1])
    assert index.size == 1
    assert index.search("frequency control") == []
