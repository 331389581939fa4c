"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from evidence_gate.corpus.line_corpus import LineCorpus
from evidence_gate.pipeline.verification_pipeline import VerificationPipeline
from evidence_gate.storage.sqlite_audit_store import SQLiteAuditStore


def get_verification_pipeline(request: Request) -> VerificationPipeline:
    return request.app.state.verification_pipeline


def get_corpus(request: Request) -> LineCorpus:
    return request.app.state.corpus


def get_audit_store(request: Request) -> SQLiteAuditStore:
    return request.app.state.audit_store
