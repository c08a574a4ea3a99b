"""
Text helpers shared by the builder, scorer and extractor.
"""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    if not text:
        return 0
    return len(text.split())


def contains_any(text: str, terms) -> bool:
    """Case-insensitive substring check against a collection of terms."""
    lowered = text.lower()
    return any(term in lowered for term in terms)
