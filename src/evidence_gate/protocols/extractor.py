"""Protocol for claim extractors."""

from __future__ import annotations

from typing import Protocol

from evidence_gate.models.domain import Claim


class ClaimExtractor(Protocol):
    async def extract(self, draft: str) -> list[Claim]: ...
