"""
Ingestion pipeline.

Runs one webhook payload through: resolve text -> duplicate check ->
summarize -> notify. The HTTP layer handles authorization and renders the
result; everything between lives here so the CLI can run the same flow.

Failure semantics:
- No text after resolution raises ValidationError (400, not retried)
- Summarizer errors (ConfigError / UpstreamError) propagate; the dedup
  claim is released first so a redelivered webhook can succeed later
- Notifier failures never propagate; each channel's outcome is collected
"""

from typing import List, Optional, Dict, Any

from .dedup import SeenStore, MemorySeenStore
from .delivery.base import Notifier, notify_all
from .errors import ValidationError, ErrorCode
from .logging import get_logger
from .models import IngestRequest, IngestResult
from .resolve import TweetTextResolver
from .summarize import Summarizer


DEFAULT_TITLE = "HillPulse"


class IngestPipeline:
    """Orchestrates text resolution, dedup, summarization and fan-out."""

    def __init__(
        self,
        resolver: TweetTextResolver,
        summarizer: Summarizer,
        notifiers: List[Notifier],
        seen_store: Optional[SeenStore] = None,
        title: str = DEFAULT_TITLE,
    ):
        """
        Initialize pipeline.

        Args:
            resolver: Looks up text when the payload has none
            summarizer: Produces the summary
            notifiers: Channels to fan out to, in order
            seen_store: Dedup store, or None to disable duplicate suppression
            title: Push notification title
        """
        self.resolver = resolver
        self.summarizer = summarizer
        self.notifiers = notifiers
        self.seen_store = seen_store
        self.title = title
        self.logger = get_logger("pipeline")

    def process(self, request: IngestRequest) -> IngestResult:
        """
        Process one ingest request.

        Args:
            request: Parsed webhook payload

        Returns:
            IngestResult (duplicate=True if suppressed)

        Raises:
            ValidationError: If no tweet text could be obtained
            ConfigError: If summarization isn't configured
            UpstreamError: If summarization failed after retries
        """
        text = request.text
        if not text and request.url:
            self.logger.debug("No text in payload, resolving %s", request.url)
            text = self.resolver.resolve(request.url)
        if not text:
            raise ValidationError(ErrorCode.INGEST_NO_TEXT)

        claimed = False
        if self.seen_store is not None and request.tweet_id:
            if not self.seen_store.claim(request.tweet_id):
                self.logger.info("Duplicate tweet %s suppressed", request.tweet_id)
                return IngestResult(duplicate=True)
            claimed = True

        try:
            summary = self.summarizer.summarize(text, request.author, request.url)
        except Exception:
            if claimed:
                self.seen_store.forget(request.tweet_id)
            raise

        self.logger.info("Summarized tweet %s: %s", request.tweet_id or "(no id)", summary)

        deliveries = notify_all(
            self.notifiers,
            title=self.title,
            message=summary,
            url=request.url or None,
            titles={"email": f"{self.title}: @{request.author}"},
        )

        return IngestResult(duplicate=False, summary=summary, deliveries=deliveries)


def build_pipeline(
    config: Dict[str, Any],
    summarizer: Optional[Summarizer] = None,
    notifiers: Optional[List[Notifier]] = None,
    seen_store: Optional[SeenStore] = None,
    resolver: Optional[TweetTextResolver] = None,
) -> IngestPipeline:
    """
    Assemble a pipeline from configuration.

    Any component passed explicitly replaces the one built from config.

    Args:
        config: Loaded configuration dictionary

    Returns:
        Ready-to-use IngestPipeline
    """
    from .delivery.base import get_notifiers
    from .summarize import build_summarizer

    timeout = config["http"]["timeout_seconds"]

    if seen_store is None and config["features"]["dedup"]:
        seen_store = MemorySeenStore(
            retention_seconds=config["dedup"]["retention_hours"] * 3600
        )

    return IngestPipeline(
        resolver=resolver or TweetTextResolver(timeout=timeout),
        summarizer=summarizer or build_summarizer(config),
        notifiers=notifiers if notifiers is not None else get_notifiers(config),
        seen_store=seen_store,
        title=config["pushover"]["title"],
    )
