"""OpenAI embedding provider for the claim/quote semantic similarity signal."""

from __future__ import annotations

from openai import AsyncOpenAI

from evidence_gate.exceptions import EmbeddingError
from evidence_gate.observability.logger import get_logger

logger = get_logger("embeddings")


class OpenAIEmbedder:
    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        batch_size: int = 100,
        dimensions: int = 1536,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model
        self._batch_size = batch_size
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        vectors: list[list[float]] = []
        try:
            for i in range(0, len(texts), self._batch_size):
                batch = texts[i : i + self._batch_size]
                response = await self._client.embeddings.create(
                    input=batch, model=self._model, dimensions=self._dimensions
                )
                vectors.extend(item.embedding for item in response.data)
        except Exception as e:
            raise EmbeddingError(f"Failed to embed {len(texts)} texts: {e}") from e
        logger.debug("embedded_texts", count=len(texts), model=self._model)
        return vectors
