"""Reason codes attached to verification records and audit events."""

from __future__ import annotations

from enum import Enum


class ReasonCode(str, Enum):
    NO_RESULTS = "NO_RESULTS"
    SEARCH_TIMEOUT = "SEARCH_TIMEOUT"
    CONTRADICTION_FOUND = "CONTRADICTION_FOUND"
    LOW_MATCH = "LOW_MATCH"
    NEUTRAL_BEST_MATCH = "NEUTRAL_BEST_MATCH"
    BELOW_CONFIDENCE_THRESHOLD = "BELOW_CONFIDENCE_THRESHOLD"

    def __str__(self) -> str:
        return self.value
