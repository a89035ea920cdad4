"""
Utility functions shared across hillpulse modules.

Small text helpers for turning oEmbed markup into plain tweet text and for
coercing loosely-typed webhook and environment values.
"""

import re
from typing import Optional


# First paragraph of an oEmbed blockquote, e.g. <p lang="en" dir="ltr">...</p>
_PARAGRAPH_RE = re.compile(r"<p[^>]*>(.*?)</p>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_STATUS_ID_RE = re.compile(r"/status(?:es)?/(\d+)")

# Only this fixed set is decoded. &amp; goes first so "&amp;lt;" becomes
# "&lt;" rather than "<", matching a single left-to-right replacement pass.
HTML_ENTITIES = [
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
]


def extract_first_paragraph(html: str) -> Optional[str]:
    """
    Return the inner markup of the first <p> element, or None if absent.

    Args:
        html: oEmbed HTML snippet

    Returns:
        Raw inner HTML of the first paragraph, or None
    """
    if not html:
        return None
    match = _PARAGRAPH_RE.search(html)
    if not match:
        return None
    return match.group(1)


def strip_tags(text: str) -> str:
    """Remove every <...> fragment from text."""
    return _TAG_RE.sub("", text)


def decode_entities(text: str) -> str:
    """
    Decode the fixed set of named entities used in tweet embeds.

    Handles &amp; &lt; &gt; &quot; &#39; only; anything else is left as-is.
    """
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def html_to_text(fragment: str) -> str:
    """Strip tags, then decode entities."""
    return decode_entities(strip_tags(fragment))


def status_id_from_url(url: str) -> Optional[str]:
    """
    Extract the numeric status ID from a tweet URL.

    >>> status_id_from_url("https://x.com/u/status/123")
    '123'
    """
    if not url:
        return None
    match = _STATUS_ID_RE.search(url)
    return match.group(1) if match else None


def parse_bool(value, default: bool = False) -> bool:
    """
    Parse a boolean from an environment-style string.

    Args:
        value: "true"/"false", "1"/"0", "yes"/"no", "on"/"off" (any case) or a bool
        default: Returned when value is None or empty

    Returns:
        Parsed boolean

    Raises:
        ValueError: If value is not a recognised boolean string
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if not normalized:
        return default
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def safe_str(value, default: str = "") -> str:
    """
    Safely convert value to string with default fallback.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        String value or default
    """
    try:
        return str(value) if value is not None else default
    except Exception:
        return default
