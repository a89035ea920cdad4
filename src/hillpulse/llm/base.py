"""
Base LLM provider interface.

Defines the abstract base class that all LLM providers must implement.
Provides a mock implementation for testing and development.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union
from dataclasses import dataclass

from ..errors import LLMError


class LLMProvider(ABC):
    """Base class for all LLM providers."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Generate text from a prompt.

        Args:
            prompt: The full prompt text

        Returns:
            Generated text response ("" if the response carried no text)

        Raises:
            LLMError: If the call fails. LLMError.retryable tells callers
                whether trying again could help.
        """
        pass

    @property
    def name(self) -> str:
        """Provider name for logging."""
        return self.__class__.__name__


@dataclass
class LLMCall:
    """Record of an LLM call for testing/debugging."""
    prompt: str
    response: str


class MockLLMProvider(LLMProvider):
    """
    Mock LLM provider for testing.

    Returns predefined responses and tracks all calls for assertions.
    Can be scripted with a sequence of outcomes to exercise retry logic.
    """

    def __init__(
        self,
        response: str = "Mock response",
        error: Optional[Exception] = None,
        outcomes: Optional[List[Union[str, Exception]]] = None,
    ):
        """
        Initialize mock provider.

        Args:
            response: Fixed response to return
            error: Exception to raise instead of returning response
            outcomes: Per-call script; each entry is a response string or an
                exception to raise. Once exhausted, falls back to
                response/error.
        """
        self.response = response
        self.error = error
        self.outcomes = list(outcomes or [])
        self.calls: List[LLMCall] = []

    def generate(self, prompt: str) -> str:
        """Generate mock response and track call."""
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = self.error if self.error else self.response

        if isinstance(outcome, Exception):
            self.calls.append(LLMCall(prompt=prompt, response=""))
            raise outcome

        self.calls.append(LLMCall(prompt=prompt, response=outcome))
        return outcome

    def reset(self):
        """Clear call history."""
        self.calls = []

    def set_response(self, response: str):
        """Change the response for future calls."""
        self.response = response
        self.error = None

    def set_error(self, error: LLMError):
        """Set error to raise for future calls."""
        self.error = error
