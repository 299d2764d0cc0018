"""Tests for the Claude-backed semantic judge."""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from config.settings import JudgeSettings
from models.shared import QuestionStyle
from utils.error_handler import AuthenticationError, InvalidResponseError, OverloadedError
from validation.anthropic_judge import AnthropicLeakageJudge, build_user_prompt, parse_judge_payload
from validation.judge import JudgeRequestItem

ITEMS = [
    JudgeRequestItem("t1", "Did Kao approve the plan?", "Kao approved the plan.", QuestionStyle.TARGETED),
    JudgeRequestItem("t2", "What shaped regional policy?", "Chen moved the troops.", QuestionStyle.THEMATIC),
]

RESULTS = {
    "results": [
        {"question_id": "t1", "verdict": "LEAK", "confidence": "high", "reason": "Restates the claim"},
        {"question_id": "t2", "verdict": "OK", "confidence": "medium", "reason": "Broad"},
    ]
}


def make_response(text: str, input_tokens: int = 50, output_tokens: int = 10) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    response.usage = MagicMock(input_tokens=input_tokens, output_tokens=output_tokens)
    return response


def make_judge(client: MagicMock, max_retries: int = 3) -> tuple[AnthropicLeakageJudge, list[float]]:
    sleeps: list[float] = []
    judge = AnthropicLeakageJudge(
        client=client,
        model="test-model",
        settings=JudgeSettings(max_retries=max_retries, retry_backoff_base=2.0),
        max_tokens=1024,
        temperature=0.0,
        sleep=sleeps.append,
    )
    return judge, sleeps


class TestPrompt:
    def test_prompt_lists_every_pair(self) -> None:
        prompt = build_user_prompt(ITEMS)
        assert "Evaluate these 2 question-claim pairs" in prompt
        assert "Question ID: t1" in prompt
        assert 'Target Claim: "Chen moved the troops."' in prompt
        assert "Question Style: thematic" in prompt


class TestParsePayload:
    def test_results_object(self) -> None:
        assert parse_judge_payload(json.dumps(RESULTS)) == RESULTS["results"]

    def test_fenced_json(self) -> None:
        content = "```json\n" + json.dumps(RESULTS) + "\n```"
        assert len(parse_judge_payload(content)) == 2

    def test_bare_list(self) -> None:
        assert parse_judge_payload(json.dumps(RESULTS["results"])) == RESULTS["results"]

    def test_json_inside_prose(self) -> None:
        content = "Here are my verdicts:\n" + json.dumps(RESULTS) + "\nLet me know if you need more."
        assert len(parse_judge_payload(content)) == 2

    @pytest.mark.parametrize("content", ["", "not json at all", '{"verdicts": []}', '{"results": "none"}'])
    def test_unusable_content(self, content: str) -> None:
        with pytest.raises(InvalidResponseError):
            parse_judge_payload(content)


class TestJudge:
    def test_returns_entries_and_usage(self) -> None:
        client = MagicMock()
        client.messages.create.return_value = make_response(json.dumps(RESULTS), 120, 30)
        judge, sleeps = make_judge(client)

        response = judge.judge(ITEMS)

        assert response.entries == RESULTS["results"]
        assert response.input_tokens == 120
        assert response.output_tokens == 30
        assert sleeps == []
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.0
        assert "leakage" in kwargs["system"]

    def test_empty_batch_makes_no_call(self) -> None:
        client = MagicMock()
        judge, _ = make_judge(client)

        assert judge.judge([]).entries == []
        client.messages.create.assert_not_called()

    def test_retries_retryable_errors_with_backoff(self) -> None:
        client = MagicMock()
        client.messages.create.side_effect = [
            Exception("Error code: 529 - overloaded"),
            Exception("Request timed out"),
            make_response(json.dumps(RESULTS)),
        ]
        judge, sleeps = make_judge(client)

        response = judge.judge(ITEMS)

        assert len(response.entries) == 2
        assert client.messages.create.call_count == 3
        assert sleeps == [1.0, 2.0]

    def test_invalid_json_is_retried(self) -> None:
        client = MagicMock()
        client.messages.create.side_effect = [
            make_response("I cannot answer that."),
            make_response(json.dumps(RESULTS)),
        ]
        judge, sleeps = make_judge(client)

        assert len(judge.judge(ITEMS).entries) == 2
        assert sleeps == [1.0]

    def test_non_retryable_error_raises_immediately(self) -> None:
        client = MagicMock()
        client.messages.create.side_effect = Exception("Error code: 401 - authentication_error")
        judge, sleeps = make_judge(client)

        with pytest.raises(AuthenticationError):
            judge.judge(ITEMS)
        assert client.messages.create.call_count == 1
        assert sleeps == []

    def test_retry_budget_exhausted(self) -> None:
        client = MagicMock()
        client.messages.create.side_effect = Exception("Error code: 529 - overloaded")
        judge, sleeps = make_judge(client, max_retries=2)

        with pytest.raises(OverloadedError):
            judge.judge(ITEMS)
        assert client.messages.create.call_count == 3
        assert sleeps == [1.0, 2.0]
