"""BM25 keyword search index using rank_bm25."""

from __future__ import annotations

import numpy as np
from rank_bm25 import BM25Plus

from evidence_gate.keyword_search.tokenizer import index_tokens
from evidence_gate.observability.logger import get_logger

logger = get_logger("bm25_index")


class BM25Index:
    """Keyword index over opaque passage ids.

    BM25Plus keeps idf positive on small corpora, where BM25Okapi drives
    scores of common terms to zero or below. Only passages sharing at least
    one token with the query are returned.
    """

    def __init__(self) -> None:
        self._bm25: BM25Plus | None = None
        self._passage_ids: list[str] = []
        self._token_sets: list[frozenset[str]] = []

    def build(self, passages: list[tuple[str, str]]) -> None:
        """Build the index from (passage_id, text) pairs. Replaces existing index."""
        self._passage_ids = [pid for pid, _ in passages]
        tokenized = [index_tokens(text) for _, text in passages]
        self._token_sets = [frozenset(tokens) for tokens in tokenized]
        if any(tokenized):
            self._bm25 = BM25Plus(tokenized)
        else:
            self._bm25 = None
        logger.info("bm25_built", size=len(self._passage_ids))

    def search(
        self,
        query: str,
        top_k: int = 50,
        allowed: set[str] | None = None,
    ) -> list[tuple[str, float]]:
        """Search the index. Returns (passage_id, score) sorted by score descending.

        ``allowed`` restricts results to the given passage ids.
        """
        if self._bm25 is None or not self._passage_ids:
            return []
        query_tokens = index_tokens(query)
        if not query_tokens:
            return []
        wanted = set(query_tokens)
        scores = self._bm25.get_scores(query_tokens)
        # Stable sort keeps insertion order for equal scores
        order = np.argsort(-scores, kind="stable")
        results: list[tuple[str, float]] = []
        for i in order:
            if not wanted & self._token_sets[i]:
                continue
            pid = self._passage_ids[i]
            if allowed is not None and pid not in allowed:
                continue
            results.append((pid, float(scores[i])))
            if len(results) >= top_k:
                break
        return results

    @property
    def size(self) -> int:
        return len(self._passage_ids)
