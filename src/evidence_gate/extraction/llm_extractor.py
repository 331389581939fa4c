"""LLM-backed claim extraction with bounded retries."""

from __future__ import annotations

import asyncio
import json
from difflib import SequenceMatcher

from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from evidence_gate.exceptions import DraftTooLargeError, ExtractionFailedError, GenerationError
from evidence_gate.extraction.segmentation import split_sentences, strip_terminal
from evidence_gate.generation.prompt_templates import (
    CLAIM_EXTRACTION_PROMPT,
    CLAIM_EXTRACTION_SYSTEM,
)
from evidence_gate.models.domain import Claim
from evidence_gate.observability.logger import get_logger
from evidence_gate.protocols.llm import LLMProvider

logger = get_logger("llm_extractor")

# Errors worth another attempt; JSON and schema errors are ValueErrors
_RETRYABLE = (GenerationError, asyncio.TimeoutError, ValueError)

MIN_ANCHOR_RATIO = 0.5


class ExtractedClaimItem(BaseModel):
    text: str
    quote: str = ""


class ClaimExtractionResponse(BaseModel):
    claims: list[ExtractedClaimItem] = []


class LLMClaimExtractor:
    def __init__(
        self,
        llm: LLMProvider,
        max_draft_chars: int = 20_000,
        max_retries: int = 3,
        backoff_initial_s: float = 0.5,
        backoff_max_s: float = 8.0,
        timeout_s: float = 30.0,
    ) -> None:
        self._llm = llm
        self._max_draft_chars = max_draft_chars
        self._max_retries = max_retries
        self._backoff_initial_s = backoff_initial_s
        self._backoff_max_s = backoff_max_s
        self._timeout_s = timeout_s

    async def extract(self, draft: str) -> list[Claim]:
        if len(draft) > self._max_draft_chars:
            raise DraftTooLargeError(
                f"Draft has {len(draft)} characters, limit is {self._max_draft_chars}"
            )
        if not draft.strip():
            return []

        prompt = CLAIM_EXTRACTION_PROMPT.format(draft=draft)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(
                multiplier=self._backoff_initial_s, max=self._backoff_max_s
            ),
            retry=retry_if_exception_type(_RETRYABLE),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await asyncio.wait_for(
                        self._request(prompt), timeout=self._timeout_s
                    )
        except _RETRYABLE as e:
            raise ExtractionFailedError(
                f"Claim extraction failed after {self._max_retries + 1} attempts: {e}"
            ) from e

        claims = self._anchor(draft, response.claims)
        logger.info(
            "claims_extracted",
            draft_len=len(draft),
            returned=len(response.claims),
            anchored=len(claims),
        )
        return claims

    async def _request(self, prompt: str) -> ClaimExtractionResponse:
        try:
            return await self._llm.generate_structured(
                prompt, ClaimExtractionResponse, system=CLAIM_EXTRACTION_SYSTEM
            )
        except GenerationError:
            # Fallback: plain generation and manual JSON parsing
            raw = await self._llm.generate(prompt, system=CLAIM_EXTRACTION_SYSTEM)
            return ClaimExtractionResponse.model_validate(json.loads(_strip_fences(raw)))

    @staticmethod
    def _log_retry(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.warning(
            "claim_extraction_retry",
            attempt=state.attempt_number,
            error=type(error).__name__ if error else None,
        )

    @staticmethod
    def _anchor(draft: str, items: list[ExtractedClaimItem]) -> list[Claim]:
        """Map each quote back to offsets in the draft."""
        sentences = [strip_terminal(draft, s, e) for s, e in split_sentences(draft)]
        claims: list[Claim] = []
        seen: set[tuple[str, tuple[int, int]]] = set()
        cursor = 0
        for item in items:
            text = item.text.strip()
            quote = item.quote.strip() or text
            if not text:
                continue

            idx = draft.find(quote, cursor)
            if idx < 0:
                idx = draft.find(quote)
            if idx >= 0:
                span = strip_terminal(draft, idx, idx + len(quote))
                cursor = idx
            else:
                span = _best_sentence(draft, quote, sentences)
                if span is None:
                    logger.warning("claim_not_anchored", claim=text[:80])
                    continue

            key = (text, span)
            if span[1] > span[0] and key not in seen:
                seen.add(key)
                claims.append(Claim(text=text, source_span=span))

        claims.sort(key=lambda c: c.source_span)
        return claims


def _best_sentence(
    draft: str, quote: str, sentences: list[tuple[int, int]]
) -> tuple[int, int] | None:
    best_span, best_ratio = None, 0.0
    for start, end in sentences:
        ratio = SequenceMatcher(None, quote.lower(), draft[start:end].lower()).ratio()
        if ratio > best_ratio:
            best_span, best_ratio = (start, end), ratio
    return best_span if best_ratio >= MIN_ANCHOR_RATIO else None


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0]
    return text.strip()
