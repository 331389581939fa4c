"""Verify a draft answer against a folder of text documents and print the result.

Usage:
    python scripts/verify_draft.py draft.md --corpus data/corpus [--mode lenient]
    cat draft.md | python scripts/verify_draft.py - --corpus data/corpus

Settings (thresholds, extractor, API keys) come from EVG_* env vars or .env.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from evidence_gate.api.app import build_extractor, build_locator
from evidence_gate.assembly.assembler import ResponseAssembler
from evidence_gate.config.constants import VERIFICATION_FAILED_MESSAGE
from evidence_gate.config.settings import Settings
from evidence_gate.corpus.line_corpus import LineCorpus
from evidence_gate.exceptions import EvidenceGateError
from evidence_gate.models.schemas import VerifyResponse
from evidence_gate.observability.logger import setup_logging
from evidence_gate.pipeline.verification_pipeline import VerificationPipeline
from evidence_gate.scoring.confidence import ConfidenceScorer


async def main(args: argparse.Namespace) -> int:
    settings = Settings()
    setup_logging(level=args.log_level, json_output=False)

    draft = sys.stdin.read() if args.draft == "-" else Path(args.draft).read_text(encoding="utf-8")
    corpus = LineCorpus(args.corpus or settings.corpus_dir, settings.corpus_extension_list)

    try:
        await corpus.aload()
        pipeline = VerificationPipeline(
            extractor=build_extractor(settings),
            locator=build_locator(settings, corpus),
            scorer=ConfidenceScorer(),
            assembler=ResponseAssembler(),
            settings=settings,
        )
        result = await pipeline.verify_and_assemble(
            draft,
            mode=args.mode,
            scope=args.scope,
            confidence_threshold=args.threshold,
        )
    except EvidenceGateError as e:
        print(f"{VERIFICATION_FAILED_MESSAGE} ({type(e).__name__})", file=sys.stderr)
        return 1

    if args.answer_only:
        print(result.final_answer)
    else:
        print(VerifyResponse.from_result(result).model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Verify a draft answer against a document corpus")
    parser.add_argument("draft", help="Path to the draft file, or - to read stdin")
    parser.add_argument("--corpus", default=None, help="Corpus folder (default: EVG_CORPUS_DIR)")
    parser.add_argument("--mode", choices=["strict", "lenient"], default=None)
    parser.add_argument(
        "--scope",
        nargs="+",
        default=None,
        help="Restrict evidence to these file ids (paths relative to the corpus folder)",
    )
    parser.add_argument("--threshold", type=float, default=None, help="Confidence threshold override")
    parser.add_argument("--answer-only", action="store_true", help="Print only the final answer")
    parser.add_argument("--log-level", default="WARNING")
    sys.exit(asyncio.run(main(parser.parse_args())))
