"""
Base notifier interface.

Defines the abstract interface for notification channels, the fan-out that
attempts every channel independently, and a mock notifier for tests.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
import time

from ..errors import DeliveryError, ErrorCode
from ..logging import get_logger
from ..models import DeliveryResult


class Notifier(ABC):
    """Base class for all notification channels."""

    #: Key used in delivery results and the ingest response
    channel: str = "notifier"

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials for this channel are present."""
        pass

    @abstractmethod
    def notify(self, title: str, message: str, url: Optional[str] = None) -> bool:
        """
        Deliver a message.

        Args:
            title: Short title or subject
            message: Message body
            url: Optional link to attach (channels may ignore it)

        Returns:
            True if delivered, False if the channel is unconfigured or the
            transport reported failure

        Raises:
            DeliveryError: If the transport itself fails (network, SMTP)
        """
        pass

    @property
    def name(self) -> str:
        """Provider name for logging."""
        return self.__class__.__name__


class MockNotifier(Notifier):
    """
    Mock notifier for testing.

    Records every notify() call and succeeds, fails or raises as configured.
    """

    def __init__(
        self,
        channel: str = "mock",
        configured: bool = True,
        success: bool = True,
        error: Optional[Exception] = None,
    ):
        """
        Initialize mock notifier.

        Args:
            channel: Channel key reported in results
            configured: Whether is_configured() returns True
            success: Return value of notify() when configured
            error: Exception to raise from notify()
        """
        self.channel = channel
        self.configured = configured
        self.success = success
        self.error = error
        self.sends: List[Dict[str, Any]] = []

    def is_configured(self) -> bool:
        return self.configured

    def notify(self, title: str, message: str, url: Optional[str] = None) -> bool:
        """Mock notify implementation."""
        if not self.configured:
            return False

        self.sends.append({
            "title": title,
            "message": message,
            "url": url,
            "timestamp": time.time(),
        })

        if self.error:
            raise self.error
        return self.success

    def reset(self):
        """Reset call tracking."""
        self.sends = []


def notify_all(
    notifiers: List[Notifier],
    title: str,
    message: str,
    url: Optional[str] = None,
    titles: Optional[Dict[str, str]] = None,
) -> Dict[str, DeliveryResult]:
    """
    Send a message through every notifier, collecting each outcome.

    Args:
        notifiers: Channels to attempt, in order
        title: Default title/subject
        message: Message body
        url: Optional link
        titles: Per-channel title overrides, keyed by channel

    Returns:
        Mapping of channel to DeliveryResult

    Behavior:
    - Every notifier is attempted, whatever happened to the previous ones
    - A DeliveryError (or any other exception) from one notifier becomes
      delivered=False with the error message; it is never re-raised
    - No retries: each channel gets a single attempt
    """
    logger = get_logger("delivery")
    titles = titles or {}
    results: Dict[str, DeliveryResult] = {}

    for notifier in notifiers:
        channel = notifier.channel
        try:
            delivered = notifier.notify(titles.get(channel, title), message, url)
            results[channel] = DeliveryResult(name=channel, delivered=bool(delivered))
            if delivered:
                logger.info("Delivered via %s", notifier.name)
            elif notifier.is_configured():
                logger.warning("%s reported delivery failure", notifier.name)
            else:
                logger.debug("%s not configured, skipped", notifier.name)
        except DeliveryError as e:
            logger.error("%s failed: %s", notifier.name, e)
            results[channel] = DeliveryResult(name=channel, delivered=False, error=e.message)
        except Exception as e:
            logger.exception("%s raised unexpectedly", notifier.name)
            results[channel] = DeliveryResult(
                name=channel,
                delivered=False,
                error=DeliveryError(ErrorCode.DELIVERY_SEND_FAILED, str(e)).message,
            )

    return results


def get_notifiers(config: Dict[str, Any]) -> List[Notifier]:
    """
    Build the notifier list from configuration.

    Pushover is always included (it no-ops without credentials). Email is
    included when the email feature is enabled.

    Args:
        config: Loaded configuration dictionary

    Returns:
        Notifiers in delivery order
    """
    from .pushover import PushoverNotifier
    from .smtp import EmailNotifier

    timeout = config["http"]["timeout_seconds"]
    pushover = config["pushover"]
    notifiers: List[Notifier] = [
        PushoverNotifier(
            api_token=pushover["api_token"],
            user_key=pushover["user_key"],
            default_title=pushover["title"],
            timeout=timeout,
        )
    ]

    if config["features"]["email"]:
        email = config["email"]
        notifiers.append(EmailNotifier(
            host=email["host"],
            port=email["port"],
            user=email["user"],
            password=email["password"],
            recipient=email["to"],
            sender=email["sender"],
            timeout=timeout,
        ))

    return notifiers
