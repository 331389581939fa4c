"""Deterministic claim extraction from sentence and clause structure."""

from __future__ import annotations

import re

from evidence_gate.config.constants import DISCOURSE_MARKERS, RHETORICAL_PREFIXES
from evidence_gate.exceptions import DraftTooLargeError
from evidence_gate.extraction.segmentation import split_sentences, strip_terminal
from evidence_gate.keyword_search.tokenizer import content_tokens
from evidence_gate.models.domain import Claim
from evidence_gate.observability.logger import get_logger

logger = get_logger("rule_extractor")

_MARKER_RE = re.compile(
    r"(?:" + "|".join(re.escape(m) for m in sorted(DISCOURSE_MARKERS, key=len, reverse=True)) + r")\s*,\s*",
    re.IGNORECASE,
)
_CLAUSE_SPLIT_RE = re.compile(r";\s+|,\s+(?:and|but|while|whereas)\s+|\s+whereas\s+", re.IGNORECASE)
_DETERMINERS = frozenset({"the", "a", "an", "this", "that", "these", "those", "its", "their"})


class RuleBasedClaimExtractor:
    """Split a draft into one claim per independently verifiable clause.

    Questions, headers, meta sentences ("Here is what I found:") and
    sentences with too little content are skipped. Claim spans exclude
    terminal punctuation and leading discourse markers.
    """

    def __init__(self, max_draft_chars: int = 20_000, min_content_tokens: int = 2) -> None:
        self._max_draft_chars = max_draft_chars
        self._min_content_tokens = min_content_tokens

    async def extract(self, draft: str) -> list[Claim]:
        return self.extract_sync(draft)

    def extract_sync(self, draft: str) -> list[Claim]:
        if len(draft) > self._max_draft_chars:
            raise DraftTooLargeError(
                f"Draft has {len(draft)} characters, limit is {self._max_draft_chars}"
            )

        claims: list[Claim] = []
        for start, end in split_sentences(draft):
            sentence = draft[start:end]
            if self._is_rhetorical(sentence):
                continue
            body_start, body_end = strip_terminal(draft, start, end)
            marker = _MARKER_RE.match(draft, body_start, body_end)
            if marker:
                body_start = marker.end()
            for clause_start, clause_end in self._split_clauses(draft, body_start, body_end):
                text = draft[clause_start:clause_end]
                if len(content_tokens(text)) < self._min_content_tokens:
                    continue
                claims.append(Claim(text=text, source_span=(clause_start, clause_end)))

        logger.info("claims_extracted", draft_len=len(draft), claims=len(claims))
        return claims

    @staticmethod
    def _is_rhetorical(sentence: str) -> bool:
        stripped = sentence.strip()
        if stripped.endswith(("?", ":")):
            return True
        lower = stripped.lower()
        return any(
            lower.startswith(prefix) and (len(lower) == len(prefix) or not lower[len(prefix)].isalnum())
            for prefix in RHETORICAL_PREFIXES
        )

    def _split_clauses(self, draft: str, start: int, end: int) -> list[tuple[int, int]]:
        clauses: list[tuple[int, int]] = []
        cursor = start
        for match in _CLAUSE_SPLIT_RE.finditer(draft, start, end):
            left = draft[cursor : match.start()]
            right = draft[match.end() : end]
            if not self._starts_independent_clause(right):
                continue
            if len(content_tokens(left)) < self._min_content_tokens + 1:
                continue
            if len(content_tokens(right)) < self._min_content_tokens + 1:
                continue
            clauses.append(strip_terminal(draft, cursor, match.start()))
            cursor = match.end()
        clauses.append(strip_terminal(draft, cursor, end))
        return [(s, e) for s, e in clauses if e > s]

    @staticmethod
    def _starts_independent_clause(text: str) -> bool:
        stripped = text.lstrip()
        if not stripped:
            return False
        first_word = stripped.split(maxsplit=1)[0].lower()
        return stripped[0].isupper() or first_word in _DETERMINERS
