"""Read-only, line-addressable corpus over pre-converted text documents."""

from __future__ import annotations

import asyncio
from pathlib import Path

from charset_normalizer import from_path

from evidence_gate.exceptions import CorpusUnavailableError
from evidence_gate.keyword_search.bm25_index import BM25Index
from evidence_gate.keyword_search.tokenizer import index_tokens
from evidence_gate.models.domain import EvidenceSpan, Relation
from evidence_gate.observability.logger import get_logger

logger = get_logger("line_corpus")


def _passage_id(file_id: str, line_no: int) -> str:
    return f"{file_id}\x00{line_no}"


def _split_lines(text: str) -> list[str]:
    """Split on newlines only; form feeds and other separators stay inside the line."""
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "" and text.endswith("\n"):
        lines.pop()
    return lines


def _split_passage_id(passage_id: str) -> tuple[str, int]:
    file_id, line_no = passage_id.rsplit("\x00", 1)
    return file_id, int(line_no)


class LineCorpus:
    """CorpusIndex implementation where every non-blank line is a passage.

    File ids are paths relative to the corpus root (posix separators), never
    absolute paths. Line numbers are 1-based.
    """

    def __init__(self, root: str | Path | None = None, extensions: list[str] | None = None) -> None:
        self._root = Path(root) if root is not None else None
        self._extensions = [e.lower() for e in (extensions or [".txt", ".md"])]
        self._files: dict[str, list[str]] = {}
        self._passages_by_file: dict[str, set[str]] = {}
        self._index = BM25Index()
        self._loaded = False

    @classmethod
    def from_texts(cls, documents: dict[str, str]) -> LineCorpus:
        """Build a corpus from in-memory ``{file_id: text}`` documents."""
        corpus = cls()
        corpus._ingest({file_id: _split_lines(text) for file_id, text in documents.items()})
        return corpus

    def load(self) -> None:
        """Read every matching file under the root and build the keyword index."""
        if self._root is None or not self._root.is_dir():
            raise CorpusUnavailableError(f"Corpus folder not found: {self._root}")

        files: dict[str, list[str]] = {}
        for path in sorted(self._root.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in self._extensions:
                continue
            file_id = path.relative_to(self._root).as_posix()
            best = from_path(path).best()
            text = str(best) if best else path.read_text(encoding="utf-8", errors="replace")
            files[file_id] = _split_lines(text)
        self._ingest(files)

    async def aload(self) -> None:
        await asyncio.to_thread(self.load)

    def _ingest(self, files: dict[str, list[str]]) -> None:
        passages: list[tuple[str, str]] = []
        by_file: dict[str, set[str]] = {}
        for file_id in sorted(files):
            ids = set()
            for line_no, line in enumerate(files[file_id], start=1):
                if not line.strip():
                    continue
                pid = _passage_id(file_id, line_no)
                passages.append((pid, line))
                ids.add(pid)
            by_file[file_id] = ids
        self._index.build(passages)
        self._files = files
        self._passages_by_file = by_file
        self._loaded = True
        logger.info("corpus_loaded", files=len(files), passages=len(passages))

    async def search(
        self,
        query: str,
        scope: set[str] | None = None,
        max_results: int = 10,
    ) -> list[EvidenceSpan]:
        """Coarse keyword search. Spans are NEUTRAL; match_score is query-token coverage."""
        self._ensure_loaded()
        allowed = None
        if scope is not None:
            unknown = sorted(f for f in scope if f not in self._files)
            if unknown:
                logger.warning("scope_unknown_files", files=unknown)
            allowed = set()
            for file_id in scope:
                allowed |= self._passages_by_file.get(file_id, set())
            if not allowed:
                return []

        hits = await asyncio.to_thread(self._index.search, query, max_results, allowed)
        query_tokens = set(index_tokens(query))
        spans = []
        for pid, _ in hits:
            file_id, line_no = _split_passage_id(pid)
            text = self._files[file_id][line_no - 1]
            overlap = len(query_tokens & set(index_tokens(text)))
            spans.append(
                EvidenceSpan(
                    file_id=file_id,
                    line_range=(line_no, line_no),
                    quoted_text=text,
                    relation=Relation.NEUTRAL,
                    match_score=overlap / len(query_tokens) if query_tokens else 0.0,
                )
            )
        return spans

    async def read_lines(self, file_id: str, line_range: tuple[int, int]) -> str:
        self._ensure_loaded()
        lines = self._files.get(file_id)
        if lines is None:
            raise ValueError(f"Unknown file id: {file_id}")
        start, end = line_range
        if start < 1 or end < start or end > len(lines):
            raise ValueError(f"Invalid line range {line_range} for {file_id} ({len(lines)} lines)")
        return "\n".join(lines[start - 1 : end])

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            raise CorpusUnavailableError("Corpus index is not loaded")

    @property
    def file_ids(self) -> list[str]:
        return sorted(self._files)

    @property
    def line_count(self) -> int:
        return sum(len(lines) for lines in self._files.values())

    @property
    def passage_count(self) -> int:
        return self._index.size
