"""Tests for the Gemini and OpenAI adapters with their clients stubbed out."""

from types import SimpleNamespace

import pytest

from evidence_gate.api.app import build_extractor, build_locator
from evidence_gate.embeddings.openai_embedder import OpenAIEmbedder
from evidence_gate.exceptions import ConfigurationError, EmbeddingError, GenerationError
from evidence_gate.extraction.llm_extractor import ClaimExtractionResponse, LLMClaimExtractor
from evidence_gate.extraction.rule_extractor import RuleBasedClaimExtractor
from evidence_gate.generation.gemini_provider import GeminiProvider


class _GeminiModels:
    def __init__(self, response=None, error=None):
        self._response = response
        self._error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append(config)
        if self._error:
            raise self._error
        return self._response


def _gemini(response=None, error=None):
    provider = GeminiProvider(api_key="test-key")
    models = _GeminiModels(response, error)
    provider._client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return provider, models


async def test_gemini_generate_returns_text():
    provider, models = _gemini(SimpleNamespace(text="hello"))
    assert await provider.generate("prompt", system="sys", temperature=0.5) == "hello"
    assert models.calls[0].temperature == 0.5


async def test_gemini_errors_become_generation_errors():
    provider, _ = _gemini(error=RuntimeError("quota"))
    with pytest.raises(GenerationError):
        await provider.generate("prompt")
    with pytest.raises(GenerationError):
        await provider.generate_structured("prompt", ClaimExtractionResponse)


async def test_gemini_structured_parses_json_text():
    provider, _ = _gemini(
        SimpleNamespace(parsed=None, text='{"claims": [{"text": "A b c", "quote": "A b c"}]}')
    )
    result = await provider.generate_structured("prompt", ClaimExtractionResponse)
    assert result.claims[0].text == "A b c"


async def test_gemini_structured_prefers_parsed():
    parsed = ClaimExtractionResponse()
    provider, _ = _gemini(SimpleNamespace(parsed=parsed, text="ignored"))
    assert await provider.generate_structured("prompt", ClaimExtractionResponse) is parsed


async def test_gemini_structured_invalid_json():
    provider, _ = _gemini(SimpleNamespace(parsed=None, text="not json"))
    with pytest.raises(GenerationError):
        await provider.generate_structured("prompt", ClaimExtractionResponse)


def _embedder(create, batch_size=2):
    embedder = OpenAIEmbedder(api_key="test-key", batch_size=batch_size, dimensions=3)
    embedder._client = SimpleNamespace(embeddings=SimpleNamespace(create=create))
    return embedder


async def test_openai_embedder_batches():
    batches = []

    async def create(input, model, dimensions):
        batches.append(list(input))
        return SimpleNamespace(data=[SimpleNamespace(embedding=[float(len(t)), 0.0, 0.0]) for t in input])

    vectors = await _embedder(create).embed_texts(["a", "bb", "ccc"])
    assert batches == [["a", "bb"], ["ccc"]]
    assert vectors == [[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [3.0, 0.0, 0.0]]
    assert await _embedder(create).embed_texts([]) == []


async def test_openai_embedder_failure():
    async def create(input, model, dimensions):
        raise RuntimeError("rate limited")

    with pytest.raises(EmbeddingError):
        await _embedder(create).embed_texts(["a"])


def test_build_extractor_from_settings(settings):
    assert isinstance(build_extractor(settings), RuleBasedClaimExtractor)
    llm_settings = settings.model_copy(update={"claim_extractor": "llm"})
    assert isinstance(build_extractor(llm_settings), LLMClaimExtractor)
    with pytest.raises(ConfigurationError):
        build_extractor(llm_settings.model_copy(update={"google_api_key": ""}))


def test_build_locator_requires_key_for_semantic(settings, corpus):
    semantic = settings.model_copy(update={"use_semantic_similarity": True, "openai_api_key": ""})
    with pytest.raises(ConfigurationError):
        build_locator(semantic, corpus)
    assert build_locator(settings, corpus) is not None
