"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from evidence_gate.api.middleware import RequestTimingMiddleware
from evidence_gate.api.routes_health import router as health_router
from evidence_gate.api.routes_verify import router as verify_router
from evidence_gate.assembly.assembler import ResponseAssembler
from evidence_gate.config.settings import Settings
from evidence_gate.corpus.line_corpus import LineCorpus
from evidence_gate.embeddings.openai_embedder import OpenAIEmbedder
from evidence_gate.evidence.locator import EvidenceLocator
from evidence_gate.exceptions import ConfigurationError, CorpusUnavailableError
from evidence_gate.extraction.llm_extractor import LLMClaimExtractor
from evidence_gate.extraction.rule_extractor import RuleBasedClaimExtractor
from evidence_gate.generation.gemini_provider import GeminiProvider
from evidence_gate.observability.logger import get_logger, setup_logging
from evidence_gate.pipeline.verification_pipeline import VerificationPipeline
from evidence_gate.protocols.extractor import ClaimExtractor
from evidence_gate.scoring.confidence import ConfidenceScorer
from evidence_gate.storage.sqlite_audit_store import SQLiteAuditStore

logger = get_logger("app")


def build_extractor(settings: Settings) -> ClaimExtractor:
    if settings.claim_extractor == "llm":
        if not settings.google_api_key:
            raise ConfigurationError("EVG_GOOGLE_API_KEY is required for the llm claim extractor")
        llm = GeminiProvider(
            api_key=settings.google_api_key,
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            max_tokens=settings.gemini_max_tokens,
        )
        return LLMClaimExtractor(
            llm=llm,
            max_draft_chars=settings.max_draft_chars,
            max_retries=settings.extraction_max_retries,
            backoff_initial_s=settings.extraction_backoff_initial_s,
            backoff_max_s=settings.extraction_backoff_max_s,
            timeout_s=settings.extraction_timeout_s,
        )
    return RuleBasedClaimExtractor(max_draft_chars=settings.max_draft_chars)


def build_locator(settings: Settings, corpus: LineCorpus) -> EvidenceLocator:
    embedder = None
    if settings.use_semantic_similarity:
        if not settings.openai_api_key:
            raise ConfigurationError("EVG_OPENAI_API_KEY is required for semantic similarity")
        embedder = OpenAIEmbedder(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
        )
    return EvidenceLocator(
        corpus=corpus,
        embedder=embedder,
        shortlist_factor=settings.shortlist_factor,
        min_match_score=settings.min_match_score,
        relevance_floor=settings.relevance_floor,
        semantic_weight=settings.semantic_weight,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    setup_logging(level=settings.log_level, json_output=settings.log_json)

    # Corpus
    corpus = LineCorpus(settings.corpus_dir, settings.corpus_extension_list)
    try:
        await corpus.aload()
    except CorpusUnavailableError as e:
        # Every run fails closed until the corpus is available
        logger.error("corpus_unavailable", corpus_dir=settings.corpus_dir, error=str(e))

    # Storage
    audit_store = SQLiteAuditStore(settings.audit_db_path)
    await audit_store.initialize()

    pipeline = VerificationPipeline(
        extractor=build_extractor(settings),
        locator=build_locator(settings, corpus),
        scorer=ConfidenceScorer(),
        assembler=ResponseAssembler(),
        settings=settings,
        audit_store=audit_store,
    )

    # Attach to app state
    app.state.verification_pipeline = pipeline
    app.state.corpus = corpus
    app.state.audit_store = audit_store
    app.state.settings = settings

    logger.info(
        "startup_complete",
        corpus_files=len(corpus.file_ids),
        passages=corpus.passage_count,
        extractor=settings.claim_extractor,
        semantic=settings.use_semantic_similarity,
    )

    yield

    await pipeline.flush()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Evidence Gate",
        version="0.1.0",
        description="Citation-grounded verification of LLM draft answers",
        lifespan=lifespan,
    )
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(verify_router, tags=["verify"])
    return app
