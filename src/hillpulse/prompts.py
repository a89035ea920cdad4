"""
Prompt templates for tweet summarization.

The template is versioned so a summary can be traced back to the wording
that produced it. Deployments can replace it with a file
(HILLPULSE_PROMPT_FILE) without touching code; the file must keep the
{text}, {author} and {url} placeholders.
"""

from pathlib import Path
from typing import Optional

from .errors import ConfigError, ErrorCode


PROMPT_VERSION = "2025-01"

SUMMARY_PROMPT_TEMPLATE = (
    "Summarize this tweet for Hill comms staff in 6-17 words. "
    "Closer to 17 is preferred but not necessary. "
    "Use shorthand and abbreviations when clear (e.g., McCarthy backs CR, Jeffries opposes). "
    "Include names of any Members of Congress or key figures mentioned. "
    "Focus only on the new info or key statement. "
    "Be factual and neutral: no adjectives, hashtags, emojis, or filler. "
    "MAKE SURE TO NOT SHARE ANY INFO THAT ISN'T ACCURATE TO THE ORIGINAL TEXT. "
    "Always start your summary with the username of the author for the post, then a : "
    "and the text of your summary after. "
    "Then append the tweet URL on a new line starting with 'Link:'.\n"
    "\n"
    "Tweet text: {text}\n"
    "Tweet author: @{author}\n"
    "Tweet URL: {url}"
)

REQUIRED_PLACEHOLDERS = ("{text}", "{author}", "{url}")


def load_prompt_template(path: Optional[str] = None) -> str:
    """
    Load the summary prompt template.

    Args:
        path: Template file to read. If None or empty, the built-in
            template is returned.

    Returns:
        Template string with {text}, {author} and {url} placeholders

    Raises:
        ConfigError: If the file is missing or lacks a placeholder
    """
    if not path:
        return SUMMARY_PROMPT_TEMPLATE

    try:
        template = Path(path).read_text(encoding="utf-8")
    except OSError:
        raise ConfigError(ErrorCode.CONFIG_PROMPT_NOT_FOUND, f"Prompt template not found: {path}")

    missing = [p for p in REQUIRED_PLACEHOLDERS if p not in template]
    if missing:
        raise ConfigError(
            ErrorCode.CONFIG_INVALID_VALUE,
            f"Prompt template missing placeholders: {', '.join(missing)}"
        )
    return template


def build_summary_prompt(text: str, author: str, url: str, template: str = SUMMARY_PROMPT_TEMPLATE) -> str:
    """
    Fill the summary template.

    Placeholders are substituted literally; braces in tweet text are kept.
    """
    return (
        template
        .replace("{author}", author or "")
        .replace("{url}", url or "")
        .replace("{text}", text or "")
    )
