"""
LLM provider interface and implementations.

Provides a pluggable interface for LLM providers. Gemini is the production
provider; MockLLMProvider backs tests and dry runs.
"""

from .base import LLMProvider, MockLLMProvider
from .gemini import GeminiProvider

__all__ = ["LLMProvider", "MockLLMProvider", "GeminiProvider"]
