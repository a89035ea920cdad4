"""
Duplicate suppression for ingested tweets.

Webhook sources redeliver; the relay remembers which tweet IDs it has
processed within a retention window and drops repeats. A shared backend
with TTL semantics can implement SeenStore in place of the in-memory one
when running several instances.

MemorySeenStore state lives in process memory only: it resets on restart
and is not shared between instances.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict


DEFAULT_RETENTION_SECONDS = 24 * 60 * 60


class SeenStore(ABC):
    """Set of recently processed tweet IDs."""

    @abstractmethod
    def is_seen(self, tweet_id: str) -> bool:
        """True if tweet_id was marked within the retention window."""
        pass

    @abstractmethod
    def mark_seen(self, tweet_id: str) -> None:
        """Record tweet_id as processed now."""
        pass

    @abstractmethod
    def forget(self, tweet_id: str) -> None:
        """Drop tweet_id so it can be processed again."""
        pass

    def claim(self, tweet_id: str) -> bool:
        """
        Mark tweet_id unless it is already seen.

        Returns:
            True if the caller now owns processing of tweet_id, False if it
            is a duplicate
        """
        if self.is_seen(tweet_id):
            return False
        self.mark_seen(tweet_id)
        return True


class MemorySeenStore(SeenStore):
    """
    In-memory seen set with time-based expiry.

    Expired entries are pruned on every mark_seen() call; there is no
    background timer. A lock guards all access since the API serves
    requests from a thread pool.
    """

    def __init__(
        self,
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize store.

        Args:
            retention_seconds: How long a marked ID stays seen (default 24h)
            clock: Returns the current time in epoch seconds (injected by tests)
        """
        self.retention_seconds = retention_seconds
        self.clock = clock
        self._seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def is_seen(self, tweet_id: str) -> bool:
        with self._lock:
            seen_at = self._seen.get(tweet_id)
            if seen_at is None:
                return False
            return (self.clock() - seen_at) < self.retention_seconds

    def mark_seen(self, tweet_id: str) -> None:
        with self._lock:
            now = self.clock()
            self._seen[tweet_id] = now
            self._prune(now)

    def forget(self, tweet_id: str) -> None:
        with self._lock:
            self._seen.pop(tweet_id, None)

    def claim(self, tweet_id: str) -> bool:
        with self._lock:
            now = self.clock()
            seen_at = self._seen.get(tweet_id)
            if seen_at is not None and (now - seen_at) < self.retention_seconds:
                return False
            self._seen[tweet_id] = now
            self._prune(now)
            return True

    def _prune(self, now: float) -> None:
        # Caller holds the lock
        expired = [
            key for key, seen_at in self._seen.items()
            if now - seen_at >= self.retention_seconds
        ]
        for key in expired:
            del self._seen[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

    def __contains__(self, tweet_id: str) -> bool:
        return self.is_seen(tweet_id)
