"""Two-phase evidence location: coarse keyword shortlist, then exact line ranges."""

from __future__ import annotations

from collections import defaultdict

from evidence_gate.evidence.polarity import classify_relation
from evidence_gate.evidence.similarity import combine, cosine_similarity, lexical_overlap
from evidence_gate.exceptions import CorpusUnavailableError, EmbeddingError
from evidence_gate.models.domain import Claim, EvidenceSpan
from evidence_gate.observability.logger import get_logger
from evidence_gate.protocols.corpus import CorpusIndex
from evidence_gate.protocols.embedder import Embedder

logger = get_logger("evidence_locator")


class EvidenceLocator:
    """Find the corpus spans that bear on a claim.

    Without an embedder the match score is lexical overlap alone, which
    misses paraphrases and synonyms (degraded precision).
    """

    def __init__(
        self,
        corpus: CorpusIndex,
        embedder: Embedder | None = None,
        shortlist_factor: int = 3,
        min_match_score: float = 0.15,
        relevance_floor: float = 0.3,
        semantic_weight: float = 0.3,
        max_window_lines: int = 3,
    ) -> None:
        self._corpus = corpus
        self._embedder = embedder
        self._shortlist_factor = shortlist_factor
        self._min_match_score = min_match_score
        self._relevance_floor = relevance_floor
        self._semantic_weight = semantic_weight
        self._max_window_lines = max_window_lines

    async def locate(
        self,
        claim: Claim,
        scope: set[str] | None = None,
        max_results: int = 10,
    ) -> list[EvidenceSpan]:
        # Phase 1: coarse shortlist
        try:
            candidates = await self._corpus.search(
                claim.text, scope, max_results * self._shortlist_factor
            )
        except CorpusUnavailableError:
            raise
        except (OSError, ConnectionError) as e:
            raise CorpusUnavailableError(f"Corpus search failed: {e}") from e

        if not candidates:
            return []

        # Phase 2: exact line ranges, re-read from the corpus
        windows = self._plan_windows(claim, candidates)
        quotes = [await self._read(file_id, line_range) for file_id, line_range in windows]
        semantic = await self._semantic_scores(claim, quotes)

        spans: list[EvidenceSpan] = []
        for i, ((file_id, line_range), quoted) in enumerate(zip(windows, quotes)):
            lexical = lexical_overlap(claim.text, quoted)
            score = combine(
                lexical,
                semantic[i] if semantic is not None else None,
                self._semantic_weight,
            )
            if score < self._min_match_score:
                continue
            spans.append(
                EvidenceSpan(
                    file_id=file_id,
                    line_range=line_range,
                    quoted_text=quoted,
                    relation=classify_relation(
                        claim.text, quoted, lexical, self._relevance_floor
                    ),
                    match_score=round(score, 6),
                )
            )

        spans.sort(key=lambda s: s.rank_key)
        return spans[:max_results]

    def _plan_windows(
        self, claim: Claim, candidates: list[EvidenceSpan]
    ) -> list[tuple[str, tuple[int, int]]]:
        """Merge adjacent candidates of one file only where the merge scores strictly higher."""
        by_file: dict[str, dict[tuple[int, int], str]] = defaultdict(dict)
        for c in candidates:
            by_file[c.file_id].setdefault(c.line_range, c.quoted_text)

        windows: list[tuple[str, tuple[int, int]]] = []
        for file_id in sorted(by_file):
            ranges = sorted(by_file[file_id].items())
            run: list[tuple[tuple[int, int], str]] = []
            for item in ranges:
                if run and item[0][0] != run[-1][0][1] + 1:
                    windows.extend((file_id, r) for r in self._windows_for_run(claim, run))
                    run = []
                run.append(item)
            if run:
                windows.extend((file_id, r) for r in self._windows_for_run(claim, run))
        return windows

    def _windows_for_run(
        self, claim: Claim, run: list[tuple[tuple[int, int], str]]
    ) -> list[tuple[int, int]]:
        texts = [text for _, text in run]
        scores = [lexical_overlap(claim.text, t) for t in texts]
        seed = max(range(len(run)), key=lambda i: (scores[i], -i))
        lo = hi = seed
        best = scores[seed]

        improved = True
        while improved:
            improved = False
            for new_lo, new_hi in ((lo - 1, hi), (lo, hi + 1)):
                if new_lo < 0 or new_hi >= len(run):
                    continue
                if run[new_hi][0][1] - run[new_lo][0][0] + 1 > self._max_window_lines:
                    continue
                score = lexical_overlap(claim.text, "\n".join(texts[new_lo : new_hi + 1]))
                if score > best:
                    best, lo, hi, improved = score, new_lo, new_hi, True
                    break

        merged = (run[lo][0][0], run[hi][0][1])
        rest = [r for i, (r, _) in enumerate(run) if i < lo or i > hi]
        return [merged, *rest]

    async def _read(self, file_id: str, line_range: tuple[int, int]) -> str:
        try:
            return await self._corpus.read_lines(file_id, line_range)
        except CorpusUnavailableError:
            raise
        except (OSError, ConnectionError, ValueError) as e:
            raise CorpusUnavailableError(
                f"Could not read {file_id}:{line_range[0]}-{line_range[1]}: {e}"
            ) from e

    async def _semantic_scores(self, claim: Claim, quotes: list[str]) -> list[float] | None:
        if self._embedder is None or not quotes:
            return None
        try:
            vectors = await self._embedder.embed_texts([claim.text, *quotes])
        except EmbeddingError:
            logger.warning("semantic_similarity_unavailable", claim=claim.text[:80])
            return None
        claim_vec, quote_vecs = vectors[0], vectors[1:]
        return [cosine_similarity(claim_vec, v) for v in quote_vecs]
