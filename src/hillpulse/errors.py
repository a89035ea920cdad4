"""
Error codes and custom exceptions for hillpulse.

Every failure the relay can surface carries a predefined ErrorCode so the
HTTP layer can map it to a status and a stable, human-readable message.

Resolver failures never reach this module's exceptions: they degrade to an
empty text. Notifier failures are raised as DeliveryError and collected per
channel by the fan-out, so one channel can't mask another's success.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Predefined error codes for structured error handling."""

    # Configuration errors
    CONFIG_MISSING_API_KEY = "CONFIG_MISSING_API_KEY"
    CONFIG_INVALID_VALUE = "CONFIG_INVALID_VALUE"
    CONFIG_PROMPT_NOT_FOUND = "CONFIG_PROMPT_NOT_FOUND"

    # Request errors
    INGEST_NO_TEXT = "INGEST_NO_TEXT"
    INGEST_UNAUTHORIZED = "INGEST_UNAUTHORIZED"
    INGEST_PAYLOAD_TOO_LARGE = "INGEST_PAYLOAD_TOO_LARGE"

    # LLM API errors
    LLM_API_AUTH = "LLM_API_AUTH"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    LLM_OVERLOADED = "LLM_OVERLOADED"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    LLM_NETWORK_ERROR = "LLM_NETWORK_ERROR"
    LLM_INVALID_RESPONSE = "LLM_INVALID_RESPONSE"
    LLM_RETRIES_EXHAUSTED = "LLM_RETRIES_EXHAUSTED"

    # Delivery errors
    DELIVERY_SEND_FAILED = "DELIVERY_SEND_FAILED"
    DELIVERY_NETWORK_ERROR = "DELIVERY_NETWORK_ERROR"
    DELIVERY_AUTH_FAILED = "DELIVERY_AUTH_FAILED"


# Human-readable descriptions for error codes
ERROR_DESCRIPTIONS = {
    # Configuration
    ErrorCode.CONFIG_MISSING_API_KEY: "Missing GEMINI_API_KEY",
    ErrorCode.CONFIG_INVALID_VALUE: "Configuration field has invalid value",
    ErrorCode.CONFIG_PROMPT_NOT_FOUND: "Prompt template file not found",

    # Request
    ErrorCode.INGEST_NO_TEXT: "Could not retrieve tweet text",
    ErrorCode.INGEST_UNAUTHORIZED: "Unauthorized",
    ErrorCode.INGEST_PAYLOAD_TOO_LARGE: "Payload too large",

    # LLM
    ErrorCode.LLM_API_AUTH: "LLM API authentication failed",
    ErrorCode.LLM_RATE_LIMITED: "LLM API rate limit exceeded",
    ErrorCode.LLM_OVERLOADED: "LLM API temporarily overloaded",
    ErrorCode.LLM_TIMEOUT: "LLM API request timed out",
    ErrorCode.LLM_NETWORK_ERROR: "Network error calling LLM API",
    ErrorCode.LLM_INVALID_RESPONSE: "LLM response format invalid",
    ErrorCode.LLM_RETRIES_EXHAUSTED: "LLM API failed after all retries",

    # Delivery
    ErrorCode.DELIVERY_SEND_FAILED: "Failed to send notification",
    ErrorCode.DELIVERY_NETWORK_ERROR: "Network error during delivery",
    ErrorCode.DELIVERY_AUTH_FAILED: "Notification transport authentication failed",
}


# HTTP status returned by the ingestion endpoint for each surfaced code.
# Codes not listed here are server-side failures (500).
HTTP_STATUS = {
    ErrorCode.INGEST_NO_TEXT: 400,
    ErrorCode.INGEST_UNAUTHORIZED: 401,
    ErrorCode.INGEST_PAYLOAD_TOO_LARGE: 413,
}


class HillPulseError(Exception):
    """Base exception class for all hillpulse errors."""

    def __init__(self, code: ErrorCode, message: Optional[str] = None):
        self.code = code
        self.message = message or ERROR_DESCRIPTIONS.get(code, str(code.value))
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    @property
    def http_status(self) -> int:
        """HTTP status the ingestion endpoint responds with."""
        return HTTP_STATUS.get(self.code, 500)


class ConfigError(HillPulseError):
    """Missing credential or invalid configuration value."""
    pass


class LLMError(HillPulseError):
    """A single failed call to the LLM provider."""

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        retryable: bool = True,
    ):
        super().__init__(code, message)
        self.status_code = status_code
        self.retryable = retryable


class UpstreamError(HillPulseError):
    """An upstream call failed for good (e.g. summarization retries exhausted)."""
    pass


class DeliveryError(HillPulseError):
    """Notification transport errors."""
    pass


class ValidationError(HillPulseError):
    """The request can't be processed as given (e.g. no resolvable text)."""
    pass


class AuthorizationError(HillPulseError):
    """Shared-secret check failed."""
    pass
