"""Leakage scoring pipeline.

Runs one document's questions through the question lifecycle:

    generated -> rule_scored -> validated | unvalidated -> finalized

Rule-based scores are written onto the questions first; reconciled scores
are written only after the whole validation pass has finished, so callers
never observe a partially reconciled batch.
"""
from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from config.settings import LeakageSettings, get_leakage_settings
from eval.aggregator import build_report
from models.claims import Claim
from models.leakage import LeakageRecord, LeakageReport
from models.questions import Question
from models.shared import QuestionState
from scoring.lexicon import Lexicon, get_default_lexicon
from scoring.rule_scorer import score_question
from validation.batch_validator import BatchSemanticValidator, ValidationRun
from validation.judge import SemanticJudge
from validation.reconciler import reconcile_score

logger = structlog.get_logger(__name__)


@dataclass
class LeakageRunResult:
    """Finalized records, aggregate report and validation bookkeeping."""
    records: list[LeakageRecord] = field(default_factory=list)
    report: LeakageReport = field(default_factory=LeakageReport)
    validation: ValidationRun | None = None

    @property
    def questions(self) -> list[Question]:
        return [r.question for r in self.records]

    def to_dict(self) -> dict[str, Any]:
        return {
            "questions": [r.question.model_dump(mode="json") for r in self.records],
            "scoring": [
                {
                    "question_id": r.question_id,
                    "rule_score": round(r.rule_score, 3),
                    "raw_score": round(r.raw_score, 3),
                    "final_score": round(r.final_score, 3),
                    "state": r.state.value,
                    "signals": r.fired_signals,
                    "signal": r.signal.to_dict() if r.signal else None,
                    "verdict": r.verdict.model_dump(mode="json") if r.verdict else None,
                }
                for r in self.records
            ],
            "report": self.report.model_dump(mode="json"),
        }


class LeakagePipeline:
    """Scores the questions of one document-processing run."""

    def __init__(
        self,
        judge: SemanticJudge | None = None,
        lexicon: Lexicon | None = None,
        settings: LeakageSettings | None = None,
    ):
        self.settings = settings or get_leakage_settings()
        self.lexicon = lexicon or get_default_lexicon()
        self.validator = BatchSemanticValidator(judge, self.settings) if judge else None

    def rule_score(self, questions: list[Question], claims_by_id: dict[str, Claim]) -> list[LeakageRecord]:
        """First pass: rule-based score for every question (first write)."""
        records: list[LeakageRecord] = []
        for question in questions:
            record = LeakageRecord(question=question)
            result = score_question(question, claims_by_id, self.lexicon, self.settings.weights)

            record.rule_score = result.score
            record.raw_score = result.raw_score
            record.signal = result.signal
            record.claim_signals = result.claim_signals
            record.final_score = result.score
            record.state = QuestionState.RULE_SCORED
            question.leakage_score = result.score
            records.append(record)

        logger.info(
            "leakage_rule_pass_complete",
            questions=len(records),
            above_trigger=sum(
                1 for r in records if r.rule_score >= self.settings.validation_trigger_threshold
            ),
        )
        return records

    def run(self, questions: list[Question], claims: list[Claim]) -> LeakageRunResult:
        claims_by_id = {c.claim_id: c for c in claims}
        records = self.rule_score(questions, claims_by_id)

        validation: ValidationRun | None = None
        if self.validator is not None:
            validation = self.validator.validate(records, claims_by_id)

        verdicts = validation.verdicts if validation else {}
        for record in records:
            verdict = verdicts.get(record.question_id)
            if verdict is None:
                record.state = QuestionState.UNVALIDATED
                continue
            record.verdict = verdict
            record.final_score = reconcile_score(record.rule_score, verdict, self.settings.bounds)
            record.state = QuestionState.VALIDATED

        # Reconciliation pass is complete; publish final scores (second write)
        for record in records:
            if record.state == QuestionState.VALIDATED:
                record.question.leakage_score = record.final_score
            record.state = QuestionState.FINALIZED

        report = build_report(records, self.settings.flag_threshold, validation)
        return LeakageRunResult(records=records, report=report, validation=validation)


def check_all_leakage(
    questions: list[Question],
    claims: list[Claim],
    judge: SemanticJudge | None = None,
    settings: LeakageSettings | None = None,
) -> LeakageRunResult:
    """Convenience wrapper: score (and optionally validate) one document's questions."""
    return LeakagePipeline(judge=judge, settings=settings).run(questions, claims)


# Pipeline runner utilities for CLI commands
_std_logger = logging.getLogger(__name__)


class PipelineRunner:
    """Common CLI run bookkeeping: run id, output path, step logging."""

    def __init__(
        self,
        input_path: str,
        output_path: str = "",
        output_dir: str = "outputs",
        output_prefix: str = "leakage",
    ):
        self.input_path = Path(input_path)
        self.output_dir = output_dir
        self.output_prefix = output_prefix

        if not self.input_path.exists():
            raise FileNotFoundError(f"Input file not found: {input_path}")

        self.run_id = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S") + "_" + uuid.uuid4().hex[:8]

        if output_path:
            self.output_file = Path(output_path)
        else:
            out_dir_path = Path(output_dir)
            out_dir_path.mkdir(parents=True, exist_ok=True)
            self.output_file = out_dir_path / f"{output_prefix}_{self.input_path.stem}_{self.run_id}.json"

    def log_plan(self, steps: list[str]) -> None:
        """Log the pipeline plan."""
        _std_logger.info("[plan] %s", steps[0] if steps else "Pipeline")
        for step in steps[1:]:
            _std_logger.info("[plan] - %s", step)

    def log_step(self, step_name: str, **kwargs) -> None:
        """Log a pipeline step with optional metrics."""
        if kwargs:
            metrics = " ".join(f"{k}={v}" for k, v in kwargs.items())
            _std_logger.info("[%s] %s", step_name, metrics)
        else:
            _std_logger.info("[%s] started", step_name)

    def write_output(self, payload: dict[str, Any]) -> None:
        """Write output to JSON file."""
        text = json.dumps(payload, indent=2)
        self.output_file.parent.mkdir(parents=True, exist_ok=True)
        self.output_file.write_text(text, encoding="utf-8")
        _std_logger.info("[output] wrote=%s", str(self.output_file))
