"""
Data models for the ingestion pipeline.

Defines dataclasses for the incoming webhook payload, per-channel delivery
outcomes and the final ingestion result. Provides the parser that turns a
raw webhook body into an IngestRequest.

The parser is lenient: the webhook source is a third-party automation, so
missing or mistyped fields become empty strings and the pipeline decides
whether the request is still processable.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .utils import safe_str, status_id_from_url


@dataclass
class IngestRequest:
    """A tweet-like payload accepted for processing."""
    tweet_id: str  # "" when no identifier could be derived
    url: str = ""
    author: str = ""  # Handle without @, e.g. "repuser"
    text: str = ""


@dataclass
class DeliveryResult:
    """Outcome of one notifier for one request."""
    name: str  # e.g. "pushover", "email"
    delivered: bool
    error: Optional[str] = None


@dataclass
class IngestResult:
    """Outcome of one pipeline run."""
    duplicate: bool
    summary: str = ""
    deliveries: Dict[str, DeliveryResult] = field(default_factory=dict)

    def delivered(self, name: str) -> bool:
        """Whether the named channel delivered; False if it wasn't attempted."""
        result = self.deliveries.get(name)
        return bool(result and result.delivered)

    def to_response(self) -> Dict[str, Any]:
        """Render the JSON body returned by POST /ingest."""
        if self.duplicate:
            return {"ok": True, "duplicate": True}

        body: Dict[str, Any] = {
            "ok": True,
            "duplicate": False,
            "summary": self.summary,
            "pushed": self.delivered("pushover"),
        }
        if "email" in self.deliveries:
            body["emailed"] = self.delivered("email")

        errors = {
            name: result.error
            for name, result in self.deliveries.items()
            if result.error
        }
        if errors:
            body["delivery_errors"] = errors
        return body


def parse_ingest_payload(body: Any) -> IngestRequest:
    """
    Parse a webhook body into an IngestRequest.

    Accepts {"data": {...}} or the legacy {"tweet": {...}}. The tweet object
    may carry tweet_id or id, url, author and text.

    Identifier precedence: tweet_id, id, the status ID in the URL, the URL
    itself. If none is available the identifier is "".

    Args:
        body: Decoded JSON body (any type; non-objects are treated as empty)

    Returns:
        IngestRequest with all fields as strings
    """
    if not isinstance(body, dict):
        body = {}

    tweet = body.get("data") or body.get("tweet") or {}
    if not isinstance(tweet, dict):
        tweet = {}

    url = safe_str(tweet.get("url")).strip()
    tweet_id = (
        safe_str(tweet.get("tweet_id")).strip()
        or safe_str(tweet.get("id")).strip()
        or status_id_from_url(url)
        or url
    )

    return IngestRequest(
        tweet_id=tweet_id,
        url=url,
        author=safe_str(tweet.get("author")).strip().lstrip("@"),
        text=safe_str(tweet.get("text")).strip(),
    )
