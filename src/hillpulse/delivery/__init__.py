"""
Notification channels for hillpulse.

Each channel implements Notifier. notify_all() fans a summary out to every
channel and collects a per-channel outcome.
"""

from .base import Notifier, MockNotifier, notify_all, get_notifiers
from .pushover import PushoverNotifier
from .smtp import EmailNotifier

__all__ = [
    "Notifier", "MockNotifier", "notify_all", "get_notifiers",
    "PushoverNotifier", "EmailNotifier",
]
