"""
Text Utilities

Helper functions for text processing and cleanup.
"""

import re
from typing import Optional

# Letters (ASCII + Latin-1 accented), digits, whitespace, common punctuation
# and currency symbols. Everything else (emoji, control chars, dingbats) is dropped.
_DISALLOWED_CHARS = re.compile(
    r"[^A-Za-z0-9À-ÖØ-öø-ÿ\s.,;:!?'\"()\[\]\-–—/%&+@#*ºª°$€£¥₹¢]"
)
_WHITESPACE = re.compile(r"\s+")


def normalize(raw: Optional[str]) -> str:
    """
    Normalize scraped text for display.

    Strips characters outside the allow-list, collapses runs of
    whitespace (newlines, tabs, nbsp) into a single space and trims.

    Args:
        raw: Text as found in the document (may be None)

    Returns:
        Normalized text, or empty string for empty/None input
    """
    if not raw:
        return ""

    text = _DISALLOWED_CHARS.sub("", raw)
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, limit: int) -> str:
    """
    Cut text to at most `limit` characters.

    Trailing whitespace left by the cut is removed, so the result
    never ends in a space.
    """
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit].rstrip()
