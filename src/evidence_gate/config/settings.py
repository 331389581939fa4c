"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Keys
    openai_api_key: str = ""
    google_api_key: str = ""

    # LLM / Gemini (claim extraction)
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.0
    gemini_max_tokens: int = 4096

    # Claim extraction
    claim_extractor: Literal["rules", "llm"] = "rules"
    max_draft_chars: int = 20_000
    extraction_max_retries: int = 3
    extraction_backoff_initial_s: float = 0.5
    extraction_backoff_max_s: float = 8.0
    extraction_timeout_s: float = 30.0

    # Embedding (optional semantic signal)
    use_semantic_similarity: bool = False
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    semantic_weight: float = 0.3

    # Evidence location
    max_results: int = 10
    shortlist_factor: int = 3
    min_match_score: float = 0.15
    relevance_floor: float = 0.3
    max_concurrency: int = 8
    search_timeout_s: float = 10.0

    # Scoring thresholds
    confidence_threshold: float = 0.7
    high_confidence_threshold: float = 0.9
    partial_threshold: float = 0.5
    contradiction_threshold: float = 0.5

    # Assembly
    default_mode: Literal["strict", "lenient"] = "strict"
    max_citations: int = 3

    # Corpus
    corpus_dir: str = "data/corpus"
    corpus_extensions: str = ".txt,.md"  # comma-separated

    # Storage paths
    audit_db_path: str = "data/audit.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_json: bool = True
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "EVG_"}

    @property
    def corpus_extension_list(self) -> list[str]:
        return [e.strip().lower() for e in self.corpus_extensions.split(",") if e.strip()]
