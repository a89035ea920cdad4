"""
Pushover delivery.

Posts a form-encoded message to the Pushover messages API. Without an API
token and user key the notifier is a no-op.
"""

from typing import Optional

import requests

from .base import Notifier
from ..errors import DeliveryError, ErrorCode


PUSHOVER_URL = "https://api.pushover.net/1/messages.json"
DEFAULT_TITLE = "HillPulse"

# Pushover rejects longer messages
MAX_MESSAGE_LENGTH = 1024


class PushoverNotifier(Notifier):
    """Pushover push notification channel."""

    channel = "pushover"

    def __init__(
        self,
        api_token: str,
        user_key: str,
        default_title: str = DEFAULT_TITLE,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Pushover notifier.

        Args:
            api_token: Application API token
            user_key: User or group key to deliver to
            default_title: Title used when notify() gets an empty one
            timeout: Request timeout in seconds
            session: HTTP session to use (a new one is created if None)
        """
        self.api_token = api_token
        self.user_key = user_key
        self.default_title = default_title
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self.api_token and self.user_key)

    def notify(self, title: str, message: str, url: Optional[str] = None) -> bool:
        """
        Send a push notification.

        Returns:
            True if Pushover answered with a success status, False if
            unconfigured or the API rejected the message

        Raises:
            DeliveryError: On network failure
        """
        if not self.is_configured():
            return False

        form = {
            "token": self.api_token,
            "user": self.user_key,
            "title": title or self.default_title,
            "message": message[:MAX_MESSAGE_LENGTH],
        }
        if url:
            form["url"] = url

        try:
            response = self.session.post(PUSHOVER_URL, data=form, timeout=self.timeout)
        except requests.Timeout:
            raise DeliveryError(ErrorCode.DELIVERY_NETWORK_ERROR, "Pushover API timeout")
        except requests.RequestException as e:
            raise DeliveryError(ErrorCode.DELIVERY_NETWORK_ERROR, str(e))

        return response.ok
