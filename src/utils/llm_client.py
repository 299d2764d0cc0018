"""Shared LLM client utilities for the semantic judge.

Provides a centralized factory for creating Anthropic clients with
consistent SSL handling for corporate proxy environments.
"""
from __future__ import annotations

import os

import httpx
from anthropic import Anthropic

import structlog

logger = structlog.get_logger(__name__)


def get_anthropic_client(timeout: float = 120.0) -> Anthropic:
    """Create an Anthropic client with appropriate SSL settings.

    SSL verification is disabled by default for corporate proxy environments.
    Set ANTHROPIC_VERIFY_SSL=true to enable verification.

    Args:
        timeout: Per-request timeout in seconds.

    Returns:
        Configured Anthropic client instance. Retries are handled by the
        caller, so the SDK's own retries are switched off.
    """
    verify_ssl = os.getenv("ANTHROPIC_VERIFY_SSL", "false").lower() == "true"

    if not verify_ssl:
        http_client = httpx.Client(verify=False, timeout=timeout)
        return Anthropic(http_client=http_client, timeout=timeout, max_retries=0)

    return Anthropic(timeout=timeout, max_retries=0)


def call_anthropic(
    client: Anthropic,
    prompt: str,
    model: str = "claude-sonnet-4-20250514",
    max_tokens: int = 8192,
    temperature: float = 0.0,
    system: str | None = None,
) -> tuple[str, int, int]:
    """Make a single call to the Anthropic API.

    Args:
        client: Anthropic client from ``get_anthropic_client``.
        prompt: The user message content.
        model: Model name to use.
        max_tokens: Maximum tokens in response.
        temperature: Sampling temperature.
        system: Optional system prompt.

    Returns:
        Tuple of (response_text, input_tokens, output_tokens).
    """
    messages = [{"role": "user", "content": prompt}]

    kwargs = {
        "model": model,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": messages,
    }

    if system:
        kwargs["system"] = system

    response = client.messages.create(**kwargs)

    content = response.content[0].text if response.content else ""
    input_tokens = response.usage.input_tokens if response.usage else 0
    output_tokens = response.usage.output_tokens if response.usage else 0

    return content, input_tokens, output_tokens
