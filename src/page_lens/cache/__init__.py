"""Analysis cache."""

from page_lens.cache.analysis_cache import (
    AnalysisCache,
    CacheEntry,
    CacheStats,
    content_fingerprint,
    make_cache_key,
)

__all__ = [
    "AnalysisCache",
    "CacheEntry",
    "CacheStats",
    "content_fingerprint",
    "make_cache_key",
]
