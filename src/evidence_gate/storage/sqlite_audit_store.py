"""SQLite-backed audit trail of verification runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from evidence_gate.models.domain import RunTrace
from evidence_gate.storage.migrations import initialize_audit_db


class SQLiteAuditStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        await initialize_audit_db(self._db_path)

    async def save_run(self, run: RunTrace) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                "INSERT OR REPLACE INTO verification_runs "
                "(run_id, draft, timestamp, latency_ms, mode, overall_confidence, "
                "claim_outcomes, spans, error) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    run.run_id,
                    run.draft,
                    run.timestamp.isoformat(),
                    run.latency_ms,
                    run.mode,
                    run.overall_confidence,
                    json.dumps(run.claim_outcomes),
                    json.dumps(run.spans),
                    run.error,
                ),
            )
            await db.commit()

    async def get_run(self, run_id: str) -> RunTrace | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT * FROM verification_runs WHERE run_id = ?", (run_id,)
            ) as cursor:
                row = await cursor.fetchone()
                if row is None:
                    return None
                return self._row_to_run(row)

    async def get_recent_runs(self, limit: int = 100) -> list[RunTrace]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT * FROM verification_runs ORDER BY timestamp DESC LIMIT ?", (limit,)
            ) as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_run(row) for row in rows]

    async def count_runs(self) -> int:
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute("SELECT COUNT(*) FROM verification_runs") as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    @staticmethod
    def _row_to_run(row: aiosqlite.Row) -> RunTrace:
        timestamp = datetime.fromisoformat(row["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return RunTrace(
            run_id=row["run_id"],
            draft=row["draft"],
            timestamp=timestamp,
            latency_ms=row["latency_ms"],
            mode=row["mode"],
            overall_confidence=row["overall_confidence"],
            claim_outcomes=json.loads(row["claim_outcomes"]),
            spans=json.loads(row["spans"]),
            error=row["error"],
        )
