"""
Analysis Cache - Time and size bounded store of built, scored documents.

Entries are keyed by page URL (query and fragment stripped), optionally
suffixed with a fingerprint of the page markup. When the store is full
the oldest-inserted entry is evicted (first in, first out; reads do not
refresh an entry's position).

The cache is a plain object owned by whoever hosts the pipeline. There
is no module-level instance. Concurrent set() calls for the same key are
last-write-wins, and two concurrent misses on one key both build.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from page_lens.tree.nodes import PageDocument

logger = logging.getLogger(__name__)


DEFAULT_MAX_SIZE = 50
DEFAULT_TTL_SECONDS = 180.0
FINGERPRINT_SAMPLE = 10000


def make_cache_key(url: str, fingerprint: Optional[str] = None) -> str:
    """URL without query and fragment, optionally suffixed with ':fingerprint'."""
    base = url.split("#", 1)[0].split("?", 1)[0]
    return f"{base}:{fingerprint}" if fingerprint else base


def content_fingerprint(markup: str) -> str:
    """Short hash of the first 10,000 characters of page markup."""
    sample = (markup or "")[:FINGERPRINT_SAMPLE]
    return hashlib.md5(sample.encode("utf-8", errors="replace")).hexdigest()[:12]


@dataclass
class CacheEntry:
    """One cached document."""
    key: str
    url: str
    document: PageDocument
    expires_at: float
    # Bare-URL key shared by every fingerprinted variant
    base: str = ""
    
    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    """
    Cache occupancy.
    
    Attributes:
        size: Stored entries (expired ones included until swept)
        max_size: Capacity
        entries: Per entry key, url and whole seconds until expiry
    """
    size: int
    max_size: int
    entries: List[Dict[str, object]]


class AnalysisCache:
    """
    In-memory document cache with TTL and FIFO eviction.
    
    Example:
        >>> cache = AnalysisCache(max_size=10, default_ttl=60)
        >>> cache.set("https://example.com/docs?page=2", document)
        >>> cache.get("https://example.com/docs") is document
        True
    """
    
    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.
        
        Args:
            max_size: Maximum number of entries (at least 1)
            default_ttl: Entry lifetime in seconds when set() gets none
            clock: Time source in seconds; inject a fake one for tests
        """
        self.max_size = max(1, max_size)
        self.default_ttl = default_ttl
        self._clock = clock
        # dict preserves insertion order, which is the eviction order
        self._entries: Dict[str, CacheEntry] = {}
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def get(self, url: str, fingerprint: Optional[str] = None) -> Optional[PageDocument]:
        """
        Look up a live document.
        
        A fingerprinted lookup that misses falls back to the bare-URL key.
        Expired or corrupt entries are dropped and reported as a miss.
        """
        document = self._lookup(make_cache_key(url, fingerprint))
        if document is None and fingerprint:
            document = self._lookup(make_cache_key(url))
            if document is not None:
                logger.debug(f"Cache hit (base URL) {url}")
        if document is None:
            logger.debug(f"Cache miss {url}")
        return document
    
    def _lookup(self, key: str) -> Optional[PageDocument]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        
        if not isinstance(getattr(entry, "document", None), PageDocument):
            logger.warning(f"Dropping corrupt cache entry {key}")
            self._entries.pop(key, None)
            return None
        
        if entry.is_expired(self._clock()):
            logger.debug(f"Cache expired {key}")
            del self._entries[key]
            return None
        
        logger.debug(f"Cache hit {key}")
        return entry.document
    
    def set(
        self,
        url: str,
        document: PageDocument,
        fingerprint: Optional[str] = None,
        ttl: Optional[float] = None,
    ) -> str:
        """
        Store a document.
        
        Overwriting an existing key keeps its position. Inserting a new
        key into a full cache evicts the oldest-inserted entry first.
        
        Returns:
            The cache key used
        """
        key = make_cache_key(url, fingerprint)
        ttl = self.default_ttl if ttl is None else ttl
        
        if key not in self._entries and len(self._entries) >= self.max_size:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Cache evicted {oldest} (max size {self.max_size} reached)")
        
        self._entries[key] = CacheEntry(
            key=key,
            url=url,
            document=document,
            expires_at=self._clock() + ttl,
            base=make_cache_key(url),
        )
        logger.debug(f"Cache stored {key} (expires in {ttl}s, size: {len(self._entries)})")
        return key
    
    def delete(self, url: str) -> int:
        """Remove the bare key and every fingerprinted variant of url."""
        base = make_cache_key(url)
        keys = [key for key, entry in self._entries.items() if entry.base == base]
        for key in keys:
            del self._entries[key]
            logger.debug(f"Cache deleted {key}")
        return len(keys)
    
    def has(self, url: str) -> bool:
        """True if any live variant of url is stored."""
        base = make_cache_key(url)
        now = self._clock()
        return any(
            not entry.is_expired(now)
            for entry in self._entries.values()
            if entry.base == base
        )
    
    def clear_expired(self) -> int:
        """Sweep entries past their expiry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Cache cleanup removed {len(expired)} expired entries")
        return len(expired)
    
    def clear(self) -> int:
        """Drop everything. Returns the number removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug(f"Cache cleared ({count} entries)")
        return count
    
    def stats(self) -> CacheStats:
        now = self._clock()
        return CacheStats(
            size=len(self._entries),
            max_size=self.max_size,
            entries=[
                {
                    "key": entry.key,
                    "url": entry.url,
                    "expires_in": max(0, round(entry.expires_at - now)),
                }
                for entry in self._entries.values()
            ],
        )
