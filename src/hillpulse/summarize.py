"""
Tweet summarization with retry.

Wraps an LLM provider with the summary prompt and an exponential backoff
retry loop. Transient failures (overload, rate limits, 5xx, network errors)
are retried; permanent rejections such as a bad request or bad key fail on
the first attempt.
"""

import time
from typing import Callable, Optional, Dict, Any

from .errors import ConfigError, LLMError, UpstreamError, ErrorCode
from .llm.base import LLMProvider
from .logging import get_logger
from .prompts import PROMPT_VERSION, SUMMARY_PROMPT_TEMPLATE, build_summary_prompt


DEFAULT_MAX_ATTEMPTS = 4
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_BACKOFF_MULTIPLIER = 2.0


class Summarizer:
    """Produces "@author: summary\\nLink: url" text for a tweet."""

    def __init__(
        self,
        provider: Optional[LLMProvider],
        template: str = SUMMARY_PROMPT_TEMPLATE,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize summarizer.

        Args:
            provider: LLM provider, or None when no API key is configured
            template: Prompt template with {text}, {author}, {url}
            max_attempts: Total attempts including the first (4 = 3 retries)
            initial_delay: Seconds to wait before the first retry
            backoff_multiplier: Delay growth factor between retries
            sleep: Sleep function (injected by tests)
        """
        self.provider = provider
        self.template = template
        self.prompt_version = PROMPT_VERSION if template == SUMMARY_PROMPT_TEMPLATE else "custom"
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.backoff_multiplier = backoff_multiplier
        self.sleep = sleep
        self.logger = get_logger("summarize")

    def backoff_delays(self):
        """Delays slept between attempts, e.g. [1, 2, 4] for 4 attempts."""
        return [
            self.initial_delay * (self.backoff_multiplier ** i)
            for i in range(self.max_attempts - 1)
        ]

    def summarize(self, text: str, author: str, url: str) -> str:
        """
        Summarize a tweet.

        Args:
            text: Tweet text
            author: Author handle without @
            url: Tweet URL

        Returns:
            Summary text ("" if the provider returned no text)

        Raises:
            ConfigError: If no provider is configured
            UpstreamError: If every attempt failed, or a permanent error
                ended the loop early
        """
        if self.provider is None:
            raise ConfigError(ErrorCode.CONFIG_MISSING_API_KEY)

        prompt = build_summary_prompt(text, author, url, self.template)
        delays = self.backoff_delays()
        last_error: Optional[LLMError] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                summary = self.provider.generate(prompt)
                self.logger.debug("Summary from %s, prompt %s", self.provider.name, self.prompt_version)
                if attempt > 1:
                    self.logger.info("Summary succeeded on attempt %d", attempt)
                return summary
            except LLMError as e:
                last_error = e
            except Exception as e:
                last_error = LLMError(ErrorCode.LLM_NETWORK_ERROR, str(e) or e.__class__.__name__)

            if not last_error.retryable:
                self.logger.error("Summary failed permanently: %s", last_error)
                break

            if attempt < self.max_attempts:
                delay = delays[attempt - 1]
                self.logger.warning(
                    "Summary attempt %d/%d failed (%s), retrying in %gs",
                    attempt, self.max_attempts, last_error.code.value, delay
                )
                self.sleep(delay)

        raise UpstreamError(ErrorCode.LLM_RETRIES_EXHAUSTED, last_error.message)


def build_summarizer(
    config: Dict[str, Any],
    provider: Optional[LLMProvider] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Summarizer:
    """
    Build a Summarizer from configuration.

    Args:
        config: Loaded configuration dictionary
        provider: Explicit provider (skips construction from config)
        sleep: Sleep function for backoff

    Returns:
        Configured Summarizer; its provider is None when GEMINI_API_KEY is
        unset, so summarize() raises ConfigError per request.
    """
    from .llm.gemini import GeminiProvider
    from .prompts import load_prompt_template

    llm_config = config["llm"]
    if provider is None and llm_config["api_key"]:
        provider = GeminiProvider(
            api_key=llm_config["api_key"],
            model=llm_config["model"],
            timeout=config["http"]["timeout_seconds"],
        )

    retry = config["retry"]
    return Summarizer(
        provider=provider,
        template=load_prompt_template(llm_config["prompt_file"]),
        max_attempts=retry["max_attempts"],
        initial_delay=retry["initial_delay_seconds"],
        backoff_multiplier=retry["backoff_multiplier"],
        sleep=sleep,
    )
