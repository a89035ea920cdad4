"""
Tweet text resolution.

When a webhook arrives without the tweet text, the text is looked up from
public embed endpoints: the oEmbed API first (HTML snippet, first paragraph
is the tweet body), then the syndication widget API (JSON with a "text"
field).

Resolution is best-effort. Every network, HTTP or parsing failure is logged
and degrades to an empty string; it never fails the request by itself.
"""

from typing import Optional

import requests

from .logging import get_logger
from .utils import extract_first_paragraph, html_to_text


OEMBED_URL = "https://publish.twitter.com/oembed"
SYNDICATION_URL = "https://cdn.syndication.twimg.com/widgets/tweet"
DEFAULT_TIMEOUT_SECONDS = 30


class TweetTextResolver:
    """Looks up tweet text from embed endpoints."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize resolver.

        Args:
            session: HTTP session to use (a new one is created if None)
            timeout: Per-request timeout in seconds
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = get_logger("resolve")

    def resolve(self, url: str) -> str:
        """
        Resolve tweet text for a URL.

        Args:
            url: Tweet URL (x.com or twitter.com)

        Returns:
            Tweet text, or "" if the URL is empty or nothing could be resolved
        """
        if not url:
            return ""

        try:
            text = self._from_oembed(url)
            if text is not None:
                return text

            text = self._from_syndication(url)
            if text:
                return text
        except (requests.RequestException, ValueError) as e:
            # ValueError covers JSON decode failures
            self.logger.warning("Tweet fetch failed for %s: %s", url, e)
            return ""

        self.logger.info("No text resolvable for %s", url)
        return ""

    def _from_oembed(self, url: str) -> Optional[str]:
        """Text of the first paragraph in the oEmbed HTML, or None."""
        response = self.session.get(
            OEMBED_URL,
            params={"omit_script": "1", "hide_thread": "1", "url": url},
            timeout=self.timeout,
        )
        if response.status_code != 200:
            self.logger.debug("oEmbed returned HTTP %d for %s", response.status_code, url)
            return None

        data = response.json()
        html = data.get("html") if isinstance(data, dict) else None
        fragment = extract_first_paragraph(html or "")
        if fragment is None:
            return None

        return html_to_text(fragment)

    def _from_syndication(self, url: str) -> str:
        """Text field of the syndication payload, or ""."""
        response = self.session.get(
            SYNDICATION_URL,
            params={"url": url},
            timeout=self.timeout,
        )
        if response.status_code != 200:
            self.logger.debug("Syndication returned HTTP %d for %s", response.status_code, url)
            return ""

        data = response.json()
        if not isinstance(data, dict):
            return ""
        text = data.get("text")
        return text if isinstance(text, str) else ""
