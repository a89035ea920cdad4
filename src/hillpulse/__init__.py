"""
HillPulse: tweet summary relay

A small webhook service that turns incoming tweets into one-line summaries
for Hill comms staff and relays them to push and email.

This package provides:
- Tweet text resolution from oEmbed/syndication endpoints
- Gemini summarization with retry on transient failures
- Duplicate suppression over a 24-hour window
- Fan-out to Pushover and SMTP email with per-channel outcomes
- A FastAPI app and CLI to run it all
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports
from .errors import (
    ErrorCode, HillPulseError, ConfigError, LLMError, UpstreamError,
    DeliveryError, ValidationError, AuthorizationError,
)
from .models import IngestRequest, IngestResult, DeliveryResult, parse_ingest_payload
from .config import load_config

__all__ = [
    "ErrorCode", "HillPulseError", "ConfigError", "LLMError", "UpstreamError",
    "DeliveryError", "ValidationError", "AuthorizationError",
    "IngestRequest", "IngestResult", "DeliveryResult", "parse_ingest_payload",
    "load_config",
]
