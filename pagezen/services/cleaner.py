"""Plain-text cleanup for extracted article content."""

import re
from typing import Iterable, Pattern

# Runs of three or more line breaks, with any whitespace in between
_BLANK_LINES_RE = re.compile(r"\n\s*\n\s*\n+")

_INLINE_SPACE_RE = re.compile(r"[ \t]+")

# Filler phrases that survive readability scoring
BOILERPLATE_PATTERNS = (
    re.compile(r"subscribe\s+to\s+our\s+newsletter", re.IGNORECASE),
    re.compile(r"follow\s+us\s+on", re.IGNORECASE),
    re.compile(r"share\s+this\s+article", re.IGNORECASE),
    re.compile(r"related\s+articles?", re.IGNORECASE),
    re.compile(r"you\s+might\s+also\s+like", re.IGNORECASE),
    re.compile(r"recommended\s+for\s+you", re.IGNORECASE),
    re.compile(r"advertisement", re.IGNORECASE),
    re.compile(r"sponsored\s+content", re.IGNORECASE),
    # Cookie banners
    re.compile(r"this\s+(?:web)?site\s+uses\s+cookies", re.IGNORECASE),
    re.compile(r"we\s+use\s+cookies", re.IGNORECASE),
    re.compile(r"accept\s+all\s+cookies", re.IGNORECASE),
)

EXCERPT_LENGTH = 200
ELLIPSIS = "..."


def clean_text(text: str, patterns: Iterable[Pattern[str]] = BOILERPLATE_PATTERNS) -> str:
    """Collapse whitespace in *text* and strip known boilerplate phrases."""
    text = _BLANK_LINES_RE.sub("\n\n", text)
    text = _INLINE_SPACE_RE.sub(" ", text)

    for pattern in patterns:
        text = pattern.sub("", text)

    return text.strip()


def generate_excerpt(content: str, max_length: int = EXCERPT_LENGTH) -> str:
    """Return a short preview of *content*.

    Content no longer than *max_length* is returned unchanged.  Otherwise the
    first *max_length* characters are kept, cut back to the last space when
    that space falls within the final 50 characters, and ``...`` is appended.
    """
    if len(content) <= max_length:
        return content

    excerpt = content[:max_length]
    last_space = excerpt.rfind(" ")
    if last_space > 0 and last_space > max_length - 50:
        excerpt = excerpt[:last_space]

    return excerpt + ELLIPSIS
