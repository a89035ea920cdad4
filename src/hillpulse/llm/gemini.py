"""
Gemini LLM provider implementation.

Calls Google's Gemini generateContent endpoint and maps HTTP outcomes onto
LLMError codes. Each error is tagged retryable or not so the summarizer's
retry loop can tell transient overload from a permanent rejection.
"""

from typing import Dict, Any

import requests

from .base import LLMProvider
from ..errors import LLMError, ErrorCode


DEFAULT_MODEL = "gemini-2.0-flash-lite"

# Statuses worth another attempt: overload, rate limiting, server-side faults
RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class GeminiProvider(LLMProvider):
    """Gemini API provider for text generation."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 30,
        session: requests.Session = None,
    ):
        """
        Initialize Gemini provider.

        Args:
            api_key: Gemini API key
            model: Model name (default: gemini-2.0-flash-lite)
            timeout: Request timeout in seconds
            session: HTTP session to use (a new one is created if None)
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.base_url = "https://generativelanguage.googleapis.com/v1beta"

    def generate(self, prompt: str) -> str:
        """
        Generate text using Gemini API.

        Args:
            prompt: Main prompt text

        Returns:
            Trimmed text of the first candidate, "" if the response shape
            carries no text

        Raises:
            LLMError: If the API call fails
        """
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {
            "Content-Type": "application/json",
        }
        params = {"key": self.api_key}

        try:
            response = self.session.post(
                url,
                json=self._build_payload(prompt),
                headers=headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.Timeout:
            raise LLMError(ErrorCode.LLM_TIMEOUT)
        except requests.RequestException as e:
            raise LLMError(ErrorCode.LLM_NETWORK_ERROR, str(e))

        status = response.status_code
        if status != 200:
            raise self._error_for_status(status, response.text)

        try:
            response_data = response.json()
        except ValueError as e:
            raise LLMError(ErrorCode.LLM_INVALID_RESPONSE, f"Invalid JSON: {e}", status_code=status)

        return self._parse_response(response_data)

    def _build_payload(self, prompt: str) -> Dict[str, Any]:
        """Build Gemini API request payload."""
        return {
            "contents": [{
                "role": "user",
                "parts": [{"text": prompt}]
            }]
        }

    def _error_for_status(self, status: int, body: str) -> LLMError:
        """Map a non-200 response to an LLMError."""
        message = f"Gemini error {status}: {body}".strip()
        retryable = status in RETRYABLE_STATUSES

        if status == 503:
            code = ErrorCode.LLM_OVERLOADED
        elif status == 429:
            code = ErrorCode.LLM_RATE_LIMITED
        elif status in (401, 403):
            code = ErrorCode.LLM_API_AUTH
        else:
            code = ErrorCode.LLM_INVALID_RESPONSE

        return LLMError(code, message, status_code=status, retryable=retryable)

    def _parse_response(self, response_data: Dict[str, Any]) -> str:
        """
        Extract the first candidate's first text part.

        A missing or malformed shape yields "" rather than an error.
        """
        try:
            text = response_data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return ""
        if not isinstance(text, str):
            return ""
        return text.strip()
