"""Verification pipeline orchestrator: extract, locate, score, assemble."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Collection
from dataclasses import replace

from evidence_gate.assembly.assembler import ResponseAssembler
from evidence_gate.config.settings import Settings
from evidence_gate.evidence.locator import EvidenceLocator
from evidence_gate.exceptions import EvidenceGateError, VerificationCancelledError
from evidence_gate.models.domain import (
    AssemblyMode,
    Claim,
    OverallConfidence,
    RunTrace,
    VerificationPolicy,
    VerificationRecord,
    VerificationResult,
)
from evidence_gate.observability.logger import get_logger
from evidence_gate.observability.metrics import log_claim_outcome, log_run_metrics
from evidence_gate.observability.tracing import TraceContext
from evidence_gate.pipeline.cancellation import CancellationToken
from evidence_gate.protocols.extractor import ClaimExtractor
from evidence_gate.scoring.confidence import ConfidenceScorer
from evidence_gate.scoring.reason_codes import ReasonCode
from evidence_gate.storage.sqlite_audit_store import SQLiteAuditStore

logger = get_logger("verification_pipeline")


class VerificationPipeline:
    def __init__(
        self,
        extractor: ClaimExtractor,
        locator: EvidenceLocator,
        scorer: ConfidenceScorer,
        assembler: ResponseAssembler,
        settings: Settings,
        audit_store: SQLiteAuditStore | None = None,
    ) -> None:
        self._extractor = extractor
        self._locator = locator
        self._scorer = scorer
        self._assembler = assembler
        self._settings = settings
        self._audit_store = audit_store
        self._background: set[asyncio.Task] = set()

    async def verify_and_assemble(
        self,
        draft: str,
        mode: AssemblyMode | str | None = None,
        scope: Collection[str] | None = None,
        confidence_threshold: float | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> VerificationResult:
        """Verify every claim in ``draft`` and rebuild the answer from the survivors.

        Either the whole run succeeds or an ``EvidenceGateError`` is raised;
        no partially verified answer is ever returned.
        """
        policy = VerificationPolicy.from_settings(
            self._settings, mode=mode, confidence_threshold=confidence_threshold
        )
        token = cancel_token or CancellationToken()
        scope_ids = set(scope) if scope is not None else None
        trace = TraceContext()

        try:
            with trace.span("extraction"):
                claims = await self._until_cancelled(self._extractor.extract(draft), token)

            with trace.span("location", claims=len(claims)):
                records = await self._verify_claims(
                    claims, policy, scope_ids, token, trace.run_id
                )

            with trace.span("assembly"):
                result = self._assembler.assemble(draft, records, policy.mode, policy)
        except EvidenceGateError as e:
            logger.warning(
                "verification_run_failed",
                run_id=trace.run_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            self._save(
                trace.to_run_trace(
                    draft,
                    policy.mode.value,
                    OverallConfidence.NONE.value,
                    error=type(e).__name__,
                )
            )
            raise

        result = replace(result, run_id=trace.run_id)
        log_run_metrics(trace.run_id, result, policy.mode.value, trace.elapsed_ms)
        self._save(
            trace.to_run_trace(
                draft,
                policy.mode.value,
                result.overall_confidence.value,
                records=result.records,
            )
        )
        return result

    async def flush(self) -> None:
        """Wait for pending audit writes."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def _verify_claims(
        self,
        claims: list[Claim],
        policy: VerificationPolicy,
        scope: set[str] | None,
        token: CancellationToken,
        run_id: str,
    ) -> list[VerificationRecord]:
        if not claims:
            return []
        if token.cancelled:
            raise VerificationCancelledError("Verification cancelled before evidence location")

        semaphore = asyncio.Semaphore(min(len(claims), policy.max_concurrency))
        tasks = [
            asyncio.create_task(self._verify_claim(c, policy, scope, semaphore, run_id))
            for c in claims
        ]
        waiter = asyncio.create_task(token.wait())
        pending = set(tasks)
        try:
            while pending:
                done, _ = await asyncio.wait(
                    pending | {waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                if waiter in done:
                    raise VerificationCancelledError("Verification cancelled during evidence location")
                for task in done:
                    pending.discard(task)
                    error = task.exception()
                    if error is not None:
                        raise error
        finally:
            waiter.cancel()
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, waiter, return_exceptions=True)

        return [task.result() for task in tasks]

    async def _verify_claim(
        self,
        claim: Claim,
        policy: VerificationPolicy,
        scope: set[str] | None,
        semaphore: asyncio.Semaphore,
        run_id: str,
    ) -> VerificationRecord:
        async with semaphore:
            started = time.monotonic()
            reasons: list[str] = []
            try:
                evidence = await asyncio.wait_for(
                    self._locator.locate(claim, scope, policy.max_results),
                    timeout=policy.search_timeout_s,
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "evidence_search_timeout",
                    run_id=run_id,
                    claim_text=claim.text[:80],
                    timeout_s=policy.search_timeout_s,
                )
                evidence = []
                reasons.append(ReasonCode.SEARCH_TIMEOUT)

            record = self._scorer.score(claim, evidence, policy, reasons)
            log_claim_outcome(run_id, record, (time.monotonic() - started) * 1000)
            return record

    @staticmethod
    async def _until_cancelled(work: Awaitable, token: CancellationToken):
        task = asyncio.ensure_future(work)
        if token.cancelled:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise VerificationCancelledError("Verification cancelled before claim extraction")

        waiter = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
            await asyncio.gather(task, waiter, return_exceptions=True)
        if task in done:
            return task.result()
        raise VerificationCancelledError("Verification cancelled during claim extraction")

    def _save(self, run: RunTrace) -> None:
        if self._audit_store is None:
            return
        # Fire and forget; the response never waits on the audit write
        task = asyncio.create_task(self._audit_store.save_run(run))
        self._background.add(task)
        task.add_done_callback(self._on_saved)

    def _on_saved(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("audit_save_failed", error=str(task.exception()))
