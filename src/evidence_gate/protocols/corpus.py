"""Protocol for the line-addressable corpus the verifier reads from."""

from __future__ import annotations

from typing import Protocol

from evidence_gate.models.domain import EvidenceSpan


class CorpusIndex(Protocol):
    async def search(
        self,
        query: str,
        scope: set[str] | None = None,
        max_results: int = 10,
    ) -> list[EvidenceSpan]: ...

    async def read_lines(self, file_id: str, line_range: tuple[int, int]) -> str:
        """Return the exact text of the inclusive 1-based line range."""
        ...
