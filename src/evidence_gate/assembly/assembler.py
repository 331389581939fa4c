"""Rebuild the user-facing answer from the draft and its verification records."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from evidence_gate.assembly.stitching import (
    capitalize_first,
    split_terminal,
    tidy_document,
    trim_dangling,
)
from evidence_gate.citation.formatter import format_citations
from evidence_gate.config.constants import (
    CAVEAT_MARKER,
    HEDGE_MARKER,
    NOT_FOUND_FALLBACK,
    NOT_FOUND_NOTE,
    UNVERIFIED_MARKER,
)
from evidence_gate.extraction.segmentation import split_sentences
from evidence_gate.models.domain import (
    AssemblyMode,
    EvidenceSpan,
    ExcludedClaim,
    OverallConfidence,
    Relation,
    VerificationPolicy,
    VerificationRecord,
    VerificationResult,
    VerificationStatus,
)

# Most cautious marker wins when claims share a span
_MARKER_PRIORITY = {None: 0, HEDGE_MARKER: 1, CAVEAT_MARKER: 2, UNVERIFIED_MARKER: 3}


class Action(str, Enum):
    CITE = "cite"
    FLAG = "flag"
    REMOVE = "remove"


@dataclass
class _Group:
    """Claims whose spans overlap, rendered as one piece of text."""

    start: int
    end: int
    records: list[VerificationRecord] = field(default_factory=list)
    keep: bool = False
    citations: list[EvidenceSpan] = field(default_factory=list)
    marker: str | None = None


@dataclass
class _Unit:
    """A sentence (or run of sentences) containing at least one claim group."""

    start: int
    end: int
    groups: list[_Group] = field(default_factory=list)


def decide(record: VerificationRecord, mode: AssemblyMode) -> tuple[Action, str | None]:
    """Map a record to (action, marker)."""
    status = record.status
    if status == VerificationStatus.VERIFIED:
        return Action.CITE, None if record.high_confidence else HEDGE_MARKER
    if status == VerificationStatus.PARTIALLY_VERIFIED:
        return Action.CITE, CAVEAT_MARKER
    if status == VerificationStatus.UNVERIFIED and mode == AssemblyMode.LENIENT:
        return Action.FLAG, UNVERIFIED_MARKER
    return Action.REMOVE, None


class ResponseAssembler:
    def assemble(
        self,
        draft: str,
        records: Sequence[VerificationRecord],
        mode: AssemblyMode = AssemblyMode.STRICT,
        policy: VerificationPolicy | None = None,
    ) -> VerificationResult:
        mode = AssemblyMode(mode)
        policy = policy or VerificationPolicy(mode=mode)
        ordered = sorted(records, key=lambda r: (r.claim.source_span, r.claim.text))
        for r in ordered:
            start, end = r.claim.source_span
            if not 0 <= start < end <= len(draft):
                raise ValueError(f"Claim span {r.claim.source_span} outside draft of {len(draft)} chars")

        if not ordered:
            return VerificationResult(
                final_answer=draft,
                excluded_claims=(),
                overall_confidence=OverallConfidence.NONE,
            )

        excluded: list[ExcludedClaim] = []
        groups = self._group(ordered)
        for group in groups:
            decisions = [(record, *decide(record, mode)) for record in group.records]
            if any(action == Action.REMOVE for _, action, _ in decisions):
                # Shared text cannot be split, so one removal removes the whole group
                excluded.extend(
                    ExcludedClaim(claim=record.claim, status=record.status)
                    for record in group.records
                )
                continue
            for record, action, marker in decisions:
                if action == Action.FLAG:
                    excluded.append(
                        ExcludedClaim(claim=record.claim, status=record.status, flagged_only=True)
                    )
                else:
                    group.citations.extend(self._citable(record, policy))
                group.keep = True
                if _MARKER_PRIORITY[marker] > _MARKER_PRIORITY[group.marker]:
                    group.marker = marker

        notes = tuple(
            NOT_FOUND_NOTE.format(claim=r.claim.text)
            for r in ordered
            if r.status == VerificationStatus.NO_EVIDENCE
        )
        overall = self._overall_confidence(ordered)

        if not any(g.keep for g in groups):
            return VerificationResult(
                final_answer=NOT_FOUND_FALLBACK,
                excluded_claims=tuple(excluded),
                overall_confidence=OverallConfidence.NONE,
                records=tuple(ordered),
                notes=notes,
            )

        return VerificationResult(
            final_answer=self._render(draft, self._units(draft, groups)),
            excluded_claims=tuple(excluded),
            overall_confidence=overall,
            records=tuple(ordered),
            notes=notes,
        )

    @staticmethod
    def _group(records: list[VerificationRecord]) -> list[_Group]:
        groups: list[_Group] = []
        for record in records:
            start, end = record.claim.source_span
            if groups and start < groups[-1].end:
                groups[-1].end = max(groups[-1].end, end)
                groups[-1].records.append(record)
            else:
                groups.append(_Group(start=start, end=end, records=[record]))
        return groups

    @staticmethod
    def _units(draft: str, groups: list[_Group]) -> list[_Unit]:
        sentences = split_sentences(draft)
        units: list[_Unit] = []
        for group in groups:
            if units and group.start < units[-1].end:
                unit = units[-1]
            else:
                containing = next(
                    ((s, e) for s, e in sentences if s <= group.start < e), None
                )
                start, end = containing or (group.start, group.end)
                floor = units[-1].end if units else 0
                unit = _Unit(start=max(floor, min(start, group.start)), end=end)
                units.append(unit)
            unit.groups.append(group)
            if group.end > unit.end:
                # Extend over every sentence the group reaches into
                unit.end = max(
                    [group.end] + [e for s, e in sentences if s < group.end and e > unit.end]
                )
        return units

    @staticmethod
    def _citable(record: VerificationRecord, policy: VerificationPolicy) -> list[EvidenceSpan]:
        if record.status == VerificationStatus.VERIFIED:
            floor = policy.confidence_threshold
            eligible = [
                s for s in record.evidence
                if s.relation == Relation.SUPPORTS and s.match_score >= floor
            ]
        else:
            floor = policy.partial_threshold
            eligible = [
                s for s in record.evidence
                if s.relation != Relation.CONTRADICTS and s.match_score >= floor
            ]
        return eligible[: policy.max_citations]

    def _render(self, draft: str, units: list[_Unit]) -> str:
        parts: list[str] = []
        cursor = 0
        modified = False
        for unit in units:
            parts.append(draft[cursor : unit.start])
            text = self._render_unit(draft, unit)
            if not all(g.keep for g in unit.groups):
                modified = True
            cursor = unit.end
            if not text:
                # Swallow the whitespace the dropped sentence was separated by
                while cursor < len(draft) and draft[cursor] in " \t":
                    cursor += 1
            parts.append(text)
        parts.append(draft[cursor:])
        answer = "".join(parts)
        return tidy_document(answer) if modified else answer

    def _render_unit(self, draft: str, unit: _Unit) -> str:
        groups = unit.groups
        kept = [i for i, g in enumerate(groups) if g.keep]
        if not kept:
            return ""

        prefix = draft[unit.start : groups[0].start]
        suffix = draft[groups[-1].end : unit.end]
        pieces = [prefix]
        for n, i in enumerate(kept):
            if n > 0:
                # Connector directly before this group; gaps around removed groups are dropped
                pieces.append(draft[groups[i - 1].end : groups[i].start])
            pieces.append(self._render_group(draft, groups[i]))
        pieces.append(suffix)
        text = "".join(pieces)

        if len(kept) == len(groups):
            return text
        text = trim_dangling(text, trim_leading=not prefix.strip())
        if kept[0] > 0 and not prefix.strip():
            text = capitalize_first(text)
        return text

    @staticmethod
    def _render_group(draft: str, group: _Group) -> str:
        body, terminal = split_terminal(draft[group.start : group.end])
        additions = []
        if group.citations:
            additions.append(format_citations(_dedupe(group.citations)))
        if group.marker:
            additions.append(group.marker)
        if not additions:
            return draft[group.start : group.end]
        return " ".join([body, *additions]) + terminal

    @staticmethod
    def _overall_confidence(records: list[VerificationRecord]) -> OverallConfidence:
        if not records:
            return OverallConfidence.NONE
        verified = [r for r in records if r.status == VerificationStatus.VERIFIED]
        partial = [r for r in records if r.status == VerificationStatus.PARTIALLY_VERIFIED]
        if not verified and not partial:
            return OverallConfidence.NONE
        if len(verified) == len(records) and all(r.high_confidence for r in verified):
            return OverallConfidence.HIGH
        if 2 * len(verified) >= len(records):
            return OverallConfidence.MEDIUM
        return OverallConfidence.LOW


def _dedupe(spans: list[EvidenceSpan]) -> list[EvidenceSpan]:
    seen: set[tuple[str, tuple[int, int]]] = set()
    unique = []
    for span in spans:
        key = (span.file_id, span.line_range)
        if key not in seen:
            seen.add(key)
            unique.append(span)
    return unique
