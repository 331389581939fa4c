"""Idempotent database schema creation."""

from __future__ import annotations

import aiosqlite

RUNS_TABLE = """
CREATE TABLE IF NOT EXISTS verification_runs (
    run_id TEXT PRIMARY KEY,
    draft TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    latency_ms REAL NOT NULL,
    mode TEXT NOT NULL,
    overall_confidence TEXT NOT NULL,
    claim_outcomes TEXT NOT NULL DEFAULT '[]',
    spans TEXT NOT NULL DEFAULT '[]',
    error TEXT
)
"""

RUNS_TIMESTAMP_INDEX = """
CREATE INDEX IF NOT EXISTS idx_runs_timestamp ON verification_runs(timestamp)
"""


async def initialize_audit_db(db_path: str) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(RUNS_TABLE)
        await db.execute(RUNS_TIMESTAMP_INDEX)
        await db.commit()
