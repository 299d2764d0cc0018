from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from cli import build_parser, main

from helpers import FakeJudge, all_verdicts


def write_input(tmp_path: Path) -> Path:
    path = tmp_path / "extraction.json"
    path.write_text(
        json.dumps(
            {
                "doc_id": "doc-1",
                "doc_subject": "Armor production",
                "claims": [
                    {
                        "claim_id": "c1",
                        "claim_text": "Minister Kao said Taiwan has plans to produce tanks in the near future.",
                        "entities": ["Minister Kao", "Taiwan"],
                    }
                ],
                "questions": [
                    {
                        "question_id": "q1",
                        "question_text": "What plans to produce tanks were discussed?",
                        "targets_claim_id": "c1",
                    },
                    {
                        "question_id": "q2",
                        "question_text": "Which weapons programs were mentioned?",
                        "targets_claim_id": "c1",
                    },
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


def test_cli_parser_builds() -> None:
    args = build_parser().parse_args(["score", "--input", "doc.json", "--no-validate", "--batch-size", "5"])

    assert args.command == "score"
    assert args.input_path == "doc.json"
    assert args.validate is False
    assert args.batch_size == 5
    assert isinstance(args.output_dir, str)
    assert isinstance(args.log_level, str)


def test_cli_score_without_validation(tmp_path: Path) -> None:
    out_path = tmp_path / "out.json"

    code = main(["score", "--input", str(write_input(tmp_path)), "--output", str(out_path), "--no-validate"])

    assert code == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["doc_id"] == "doc-1"
    scores = {q["question_id"]: q["leakage_score"] for q in payload["questions"]}
    assert scores["q1"] == pytest.approx(0.35)
    assert scores["q2"] == 0.0
    assert payload["report"]["flagged_count"] == 1
    assert payload["report"]["validation"] is None


def test_cli_score_with_validation(tmp_path: Path) -> None:
    out_path = tmp_path / "out.json"
    judge = FakeJudge(all_verdicts("OK", "high"))

    with patch("cli.AnthropicLeakageJudge", return_value=judge):
        code = main(["score", "--input", str(write_input(tmp_path)), "--output", str(out_path)])

    assert code == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["questions"][0]["leakage_score"] == pytest.approx(0.15)
    assert payload["report"]["validation"]["ok_count"] == 1
    assert len(judge.calls) == 1


def test_cli_writes_to_output_dir(tmp_path: Path) -> None:
    out_dir = tmp_path / "outputs"

    code = main(["score", "--input", str(write_input(tmp_path)), "--output-dir", str(out_dir), "--no-validate"])

    assert code == 0
    written = list(out_dir.glob("leakage_extraction_*.json"))
    assert len(written) == 1


def test_cli_rejects_invalid_override(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["score", "--input", str(write_input(tmp_path)), "--batch-size", "0", "--no-validate"])


def test_cli_missing_input(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        main(["score", "--input", str(tmp_path / "missing.json"), "--no-validate"])
