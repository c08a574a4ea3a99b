"""
Utilities module - Common utility functions.
"""

from page_lens.utils.logging import setup_logging, setup_logging_from_settings
from page_lens.utils.text import normalize_whitespace, count_words, contains_any

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "normalize_whitespace",
    "count_words",
    "contains_any",
]
