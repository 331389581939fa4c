"""Protocol for the optional semantic similarity signal."""

from __future__ import annotations

from typing import Protocol


class Embedder(Protocol):
    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Raise EmbeddingError on provider failure."""
        ...

    @property
    def dimensions(self) -> int: ...
