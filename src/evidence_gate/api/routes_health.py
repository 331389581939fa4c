"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from evidence_gate.api.dependencies import get_audit_store, get_corpus
from evidence_gate.corpus.line_corpus import LineCorpus
from evidence_gate.models.schemas import HealthResponse
from evidence_gate.storage.sqlite_audit_store import SQLiteAuditStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    corpus: LineCorpus = Depends(get_corpus),
    audit_store: SQLiteAuditStore = Depends(get_audit_store),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        corpus_files=len(corpus.file_ids),
        corpus_lines=corpus.line_count,
        audit_runs=await audit_store.count_runs(),
    )
