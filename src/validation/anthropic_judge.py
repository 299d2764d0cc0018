"""Claude-backed semantic leakage judge.

Builds the batch prompt, calls the Anthropic API with retries and
exponential backoff, and returns the raw verdict entries.
"""
from __future__ import annotations

import json
import time
from typing import Any, Callable

import structlog
from anthropic import Anthropic

from config.loader import get_llm_max_tokens, get_llm_model, get_llm_temperature
from config.settings import JudgeSettings, get_judge_settings
from utils.error_handler import APIError, InvalidResponseError, handle_anthropic_error
from utils.llm_client import call_anthropic, get_anthropic_client
from validation.judge import JudgeRequestItem, JudgeResponse, SemanticJudge

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = """You are evaluating retrieval questions for "leakage": whether a question gives away its own answer.

A question LEAKS if:
- It contains or strongly implies the answer
- Someone could answer it without retrieving any documents
- It uses distinctive phrases that essentially state the fact being asked about
- It is structured as "Did X do Y?" where Y is exactly the fact under test

A question is OK if:
- It asks for information without revealing it
- It uses general domain vocabulary (countries, organizations, common terms)
- It genuinely requires document retrieval to answer
- An analyst could reasonably ask it without knowing the answer

Be lenient with generic diplomatic and domain terms. Words like "U.S.", "NATO", "allies", "proposal",
"modification", "air manpower", "ground forces" are domain vocabulary, not leakage.

Contextual and thematic questions are intentionally broad; judge them against the claim only for
direct giveaways."""

USER_PROMPT_TEMPLATE = """Evaluate these {count} question-claim pairs for leakage.

{pairs}

For each question, decide whether it LEAKS the answer or is OK.

Return JSON ONLY in this format:
{{
  "results": [
    {{
      "question_id": "t1",
      "verdict": "OK" or "LEAK",
      "confidence": "high", "medium", or "low",
      "reason": "Brief explanation"
    }}
  ]
}}"""


def build_user_prompt(items: list[JudgeRequestItem]) -> str:
    """Format the batch of pairs for the judge."""
    pairs: list[str] = []
    for item in items:
        pairs.append(
            "---\n"
            f"Question ID: {item.question_id}\n"
            f"Question: \"{item.question_text}\"\n"
            f"Target Claim: \"{item.claim_text}\"\n"
            f"Question Style: {item.question_style.value}\n"
            "---"
        )
    return USER_PROMPT_TEMPLATE.format(count=len(items), pairs="\n".join(pairs))


def _clean_content(content: str) -> str:
    """Clean LLM response content (remove markdown fences)."""
    content = content.strip()
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
    return content.strip()


def parse_judge_payload(content: str) -> list[Any]:
    """Extract the list of raw verdict entries from a judge response.

    Accepts ``{"results": [...]}`` or a bare list, optionally wrapped in a
    markdown fence or surrounded by prose.
    """
    cleaned = _clean_content(content or "")
    if not cleaned:
        raise InvalidResponseError("empty response")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        start = cleaned.find("{")
        end = cleaned.rfind("}") + 1
        if start == -1 or end <= start:
            raise InvalidResponseError("JSON parsing")
        try:
            data = json.loads(cleaned[start:end])
        except json.JSONDecodeError:
            raise InvalidResponseError("JSON parsing")

    if isinstance(data, dict):
        data = data.get("results")
    if not isinstance(data, list):
        raise InvalidResponseError("missing results list")
    return data


class AnthropicLeakageJudge(SemanticJudge):
    """Semantic judge backed by the Anthropic Messages API."""

    def __init__(
        self,
        client: Anthropic | None = None,
        model: str | None = None,
        settings: JudgeSettings | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or get_judge_settings()
        self.model = model or get_llm_model()
        self.max_tokens = max_tokens or get_llm_max_tokens()
        self.temperature = get_llm_temperature() if temperature is None else temperature
        self._client = client
        self._sleep = sleep

    @property
    def client(self) -> Anthropic:
        if self._client is None:
            self._client = get_anthropic_client(timeout=self.settings.request_timeout_seconds)
        return self._client

    def judge(self, items: list[JudgeRequestItem]) -> JudgeResponse:
        if not items:
            return JudgeResponse()

        user_prompt = build_user_prompt(items)
        attempts = self.settings.max_retries + 1
        last_error: APIError | None = None

        for attempt in range(attempts):
            try:
                content, input_tokens, output_tokens = call_anthropic(
                    self.client,
                    user_prompt,
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    system=SYSTEM_PROMPT,
                )
                entries = parse_judge_payload(content)
                logger.debug(
                    "leakage_judge_response",
                    items=len(items),
                    entries=len(entries),
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                )
                return JudgeResponse(
                    entries=entries,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                )
            except Exception as e:
                last_error = handle_anthropic_error(e)
                if not last_error.is_retryable or attempt == attempts - 1:
                    break
                delay = self.settings.retry_backoff_base ** attempt
                logger.warning(
                    "leakage_judge_retry",
                    attempt=attempt + 1,
                    max_retries=self.settings.max_retries,
                    error_type=last_error.error_type,
                    error=last_error.details or last_error.message,
                    delay_seconds=delay,
                )
                self._sleep(delay)

        raise last_error or APIError("UNKNOWN", "Semantic judge call failed")
