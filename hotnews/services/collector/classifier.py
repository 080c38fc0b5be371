"""Relevance classification, tagging and entity extraction.

All keyword patterns are compiled once at import time and shared by every
collector in the process.
"""

import re

from hotnews.services.collector.keywords import (
    AI_KEYWORDS,
    FALLBACK_TAG,
    MAJOR_ENTITIES,
    TAG_PATTERNS,
)


def _word_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    """Compile a case-insensitive whole-word alternation of literal keywords."""
    alternation = "|".join(re.escape(kw) for kw in keywords)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE | re.ASCII)


_AI_PATTERN = _word_pattern(AI_KEYWORDS)
_TAG_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (tag, _word_pattern(keywords)) for tag, keywords in TAG_PATTERNS.items()
)


def is_relevant(title: str, body: str | None = None) -> bool:
    """Check whether a title (and optional body) mentions any AI keyword.

    Matching is whole-word, so "ai" matches "New AI model" but not "said".

    Args:
        title: Item title
        body: Optional body text

    Returns:
        True if any keyword matches
    """
    return _AI_PATTERN.search(f"{title} {body or ''}") is not None


def detect_tags(title: str) -> list[str]:
    """Return tag labels whose keywords appear in the title.

    Tags follow registry order and never repeat. When nothing matches the
    result is ["AI"], so it is never empty.
    """
    lowered = title.lower()
    tags = [tag for tag, pattern in _TAG_PATTERNS if pattern.search(lowered)]
    return tags or [FALLBACK_TAG]


def extract_entities(title: str) -> list[str]:
    """Return major entities whose names appear anywhere in the title."""
    lowered = title.lower()
    return [entity for entity in MAJOR_ENTITIES if entity in lowered]


__all__ = [
    "detect_tags",
    "extract_entities",
    "is_relevant",
]
