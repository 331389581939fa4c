"""Integration tests for the SQLite audit store."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from evidence_gate.models.domain import RunTrace
from evidence_gate.storage.sqlite_audit_store import SQLiteAuditStore


@pytest.fixture
async def audit_store(tmp_path):
    store = SQLiteAuditStore(str(tmp_path / "nested" / "audit.db"))
    await store.initialize()
    return store


def _run(offset_s=0, error=None):
    return RunTrace(
        run_id=str(uuid4()),
        draft="Qualcomm opposes single-satellite positioning.",
        timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=offset_s),
        latency_ms=42.0,
        mode="strict",
        overall_confidence="HIGH",
        claim_outcomes=[
            {
                "claim_text": "Qualcomm opposes single-satellite positioning",
                "status": "VERIFIED",
                "citations": [{"file_id": "R1-2509228.docx", "line_range": [112, 112]}],
            }
        ],
        spans=[{"name": "extraction", "duration_ms": 1.5}],
        error=error,
    )


@pytest.mark.asyncio
async def test_save_and_get_run(audit_store):
    run = _run()
    await audit_store.save_run(run)
    retrieved = await audit_store.get_run(run.run_id)
    assert retrieved is not None
    assert retrieved.draft == run.draft
    assert retrieved.timestamp == run.timestamp
    assert retrieved.claim_outcomes == run.claim_outcomes
    assert retrieved.spans == run.spans
    assert retrieved.error is None


@pytest.mark.asyncio
async def test_get_missing_run(audit_store):
    assert await audit_store.get_run("nonexistent") is None


@pytest.mark.asyncio
async def test_recent_runs_newest_first(audit_store):
    runs = [_run(offset_s=i) for i in range(5)]
    for run in runs:
        await audit_store.save_run(run)
    recent = await audit_store.get_recent_runs(limit=3)
    assert [r.run_id for r in recent] == [runs[4].run_id, runs[3].run_id, runs[2].run_id]
    assert await audit_store.count_runs() == 5


@pytest.mark.asyncio
async def test_failed_run_keeps_error(audit_store):
    run = _run(error="CorpusUnavailableError")
    await audit_store.save_run(run)
    retrieved = await audit_store.get_run(run.run_id)
    assert retrieved.error == "CorpusUnavailableError"


@pytest.mark.asyncio
async def test_initialize_is_idempotent(audit_store):
    await audit_store.save_run(_run())
    await audit_store.initialize()
    assert await audit_store.count_runs() == 1
