"""Graceful error handling for semantic judge API failures."""
from __future__ import annotations

import sys
import structlog
from typing import Optional

logger = structlog.get_logger(__name__)

SERVER_ERROR_CODES = ("500", "502", "503", "504")


class APIError(Exception):
    """Base class for API-related errors with user-friendly messaging."""

    def __init__(self, error_type: str, message: str, details: str = "", is_retryable: bool = False):
        self.error_type = error_type
        self.message = message
        self.details = details
        self.is_retryable = is_retryable
        super().__init__(self.message)

    def get_user_message(self) -> str:
        """Return a user-friendly error message."""
        msg = f"\nError: {self.message}"
        if self.details:
            msg += f"\n   Details: {self.details}"
        if self.is_retryable:
            msg += "\n   Tip: This is a temporary issue. Please retry in a few moments."
        return msg


class OverloadedError(APIError):
    """The judge model is over capacity (HTTP 529); the batch can be retried."""

    def __init__(self, request_id: str = ""):
        super().__init__(
            error_type="API_OVERLOADED",
            message="Semantic judge unavailable: model overloaded",
            details=f"Request ID: {request_id}" if request_id else "Leakage verdicts fall back to rule-based scores",
            is_retryable=True
        )


class RateLimitError(APIError):
    """Judge requests were throttled (HTTP 429)."""

    def __init__(self, retry_after: Optional[int] = None):
        details = f"Retry after {retry_after} seconds" if retry_after else "Lower leakage.batch_size or retry later"
        super().__init__(
            error_type="RATE_LIMIT",
            message="Semantic judge throttled: rate limit exceeded",
            details=details,
            is_retryable=True
        )


class AuthenticationError(APIError):
    """Authentication failed (HTTP 401/403)."""

    def __init__(self):
        super().__init__(
            error_type="AUTH_FAILED",
            message="Semantic judge authentication failed",
            details="Set ANTHROPIC_API_KEY (or pass --no-validate for rule-based scores only)",
            is_retryable=False
        )


class InvalidResponseError(APIError):
    """The judge returned a response that could not be parsed."""

    def __init__(self, response_type: str = ""):
        super().__init__(
            error_type="INVALID_RESPONSE",
            message=f"Semantic judge returned invalid response{f' ({response_type})' if response_type else ''}",
            details="The API response could not be parsed. This may be a temporary issue.",
            is_retryable=True
        )


def handle_anthropic_error(error: Exception) -> APIError:
    """Convert Anthropic SDK exceptions to user-friendly APIError."""
    if isinstance(error, APIError):
        return error

    error_str = str(error)
    error_type = type(error).__name__

    if "529" in error_str or "overloaded" in error_str.lower():
        request_id = ""
        if "request_id" in error_str:
            try:
                request_id = error_str.split("request_id': '")[1].split("'")[0]
            except (IndexError, ValueError):
                pass
        return OverloadedError(request_id)

    elif "429" in error_str or "rate_limit" in error_str.lower():
        retry_after = None
        if "retry_after" in error_str:
            try:
                retry_after = int(error_str.split("retry_after")[1].split()[0])
            except (IndexError, ValueError):
                pass
        return RateLimitError(retry_after)

    elif "401" in error_str or "403" in error_str or "authentication" in error_str.lower():
        return AuthenticationError()

    elif "json" in error_str.lower() or "parse" in error_str.lower():
        return InvalidResponseError("JSON parsing")

    lowered = error_str.lower()
    return APIError(
        error_type=error_type,
        message="Semantic judge request failed",
        details=error_str[:200],  # Truncate long error messages
        is_retryable=(
            "timeout" in lowered
            or "timed out" in lowered
            or "connection" in lowered
            or any(code in error_str for code in SERVER_ERROR_CODES)
        ),
    )


def exit_with_error(error: APIError, context: str = "") -> int:
    """Log error and return a non-zero exit code with a user-friendly message."""
    logger.error(
        "pipeline_failed",
        error_type=error.error_type,
        message=error.message,
        details=error.details,
        context=context,
    )

    print(error.get_user_message(), file=sys.stderr)
    print("", file=sys.stderr)
    return 1
