"""
Exceptions module - Custom exception hierarchy.

Build, scoring, extraction and caching never raise for bad input;
these exceptions surface only at the edges (providers, deserialization,
configuration).
"""

from page_lens.exceptions.base import (
    PageLensError,
    ConfigurationError,
)
from page_lens.exceptions.provider import (
    ProviderError,
    SnapshotError,
)
from page_lens.exceptions.document import DocumentFormatError

__all__ = [
    "PageLensError",
    "ConfigurationError",
    "ProviderError",
    "SnapshotError",
    "DocumentFormatError",
]
