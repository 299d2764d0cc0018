from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from config.settings import LeakageSettings, get_leakage_settings
from models.input import ExtractionInput
from pipeline_runner import LeakagePipeline, PipelineRunner
from utils.error_handler import APIError, exit_with_error
from validation.anthropic_judge import AnthropicLeakageJudge


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leakage-scorer",
        description="Score generated retrieval questions for answer leakage",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", help="Score the questions of one extraction JSON file")
    score.add_argument(
        "--input",
        dest="input_path",
        required=True,
        help="Path to JSON with claims and questions for one document",
    )
    score.add_argument(
        "--output",
        dest="output_path",
        default="",
        help="Optional output JSON file path. If not set, writes to --output-dir.",
    )
    score.add_argument(
        "--output-dir",
        dest="output_dir",
        default=os.getenv("LEAKAGE_OUTPUT_DIR", "outputs"),
        help="Directory to save outputs (default: outputs/) when --output is not set.",
    )
    score.add_argument(
        "--no-validate",
        dest="validate",
        action="store_false",
        help="Skip the semantic validation pass (rule-based scores only).",
    )
    score.add_argument(
        "--flag-threshold",
        dest="flag_threshold",
        type=float,
        default=None,
        help="Override leakage.flag_threshold from config.",
    )
    score.add_argument(
        "--trigger-threshold",
        dest="trigger_threshold",
        type=float,
        default=None,
        help="Override leakage.validation_trigger_threshold from config.",
    )
    score.add_argument(
        "--batch-size",
        dest="batch_size",
        type=int,
        default=None,
        help="Override leakage.batch_size from config.",
    )
    score.add_argument(
        "--log-level",
        dest="log_level",
        default=os.getenv("LEAKAGE_LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    score.add_argument(
        "--dotenv",
        dest="dotenv_path",
        default=".env",
        help="Path to .env file to load (default: .env at repo root)",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> LeakageSettings:
    overrides = {}
    if args.flag_threshold is not None:
        overrides["flag_threshold"] = args.flag_threshold
    if args.trigger_threshold is not None:
        overrides["validation_trigger_threshold"] = args.trigger_threshold
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size

    settings = get_leakage_settings()
    return dataclasses.replace(settings, **overrides) if overrides else settings


def run_score(
    input_path: str,
    output_path: str = "",
    output_dir: str = "outputs",
    validate: bool = True,
    settings: Optional[LeakageSettings] = None,
) -> int:
    """Rule-score, validate and reconcile one document's questions."""
    runner = PipelineRunner(input_path, output_path, output_dir, output_prefix="leakage")
    runner.log_plan([
        "Question Leakage Scoring",
        "Step 1: Rule-based scoring",
        "Step 2: Semantic validation" if validate else "Step 2: Semantic validation (skipped)",
        "Step 3: Reconcile and report",
    ])
    logger.info("[run] input=%s output=%s", str(runner.input_path), str(runner.output_file))

    extraction = ExtractionInput.from_json_file(runner.input_path)
    runner.log_step(
        "load",
        doc_id=extraction.doc_id or "-",
        claims=len(extraction.claims),
        questions=len(extraction.questions),
    )

    judge = AnthropicLeakageJudge() if validate else None
    pipeline = LeakagePipeline(judge=judge, settings=settings)
    result = pipeline.run(extraction.questions, extraction.claims)

    report = result.report
    runner.log_step(
        "report",
        count=report.count,
        flagged=report.flagged_count,
        average_score=f"{report.average_score:.3f}",
    )
    if report.validation is not None:
        runner.log_step(
            "validation",
            validated=report.validation.validated,
            leaks=report.validation.leak_count,
            batches_failed=report.validation.batches_failed,
        )

    payload = {
        "run_id": runner.run_id,
        "doc_id": extraction.doc_id,
        "doc_subject": extraction.doc_subject,
        **result.to_dict(),
    }
    runner.write_output(payload)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    argv_list = list(argv) if argv is not None else sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv_list)

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

    # Reduce noisy transport logs; keep app milestone logs readable.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)

    load_dotenv(args.dotenv_path)

    try:
        settings = _settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        return run_score(
            input_path=args.input_path,
            output_path=args.output_path,
            output_dir=args.output_dir,
            validate=args.validate,
            settings=settings,
        )
    except APIError as e:
        return exit_with_error(e, context="leakage_scoring")


if __name__ == "__main__":
    raise SystemExit(main())
