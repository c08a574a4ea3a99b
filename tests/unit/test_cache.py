"""
Tests for the analysis cache.
"""

import pytest

from page_lens.cache import AnalysisCache, content_fingerprint, make_cache_key
from page_lens.tree import PageDocument


def doc(url="https://example.com/a"):
    return PageDocument(url=url, title="t")


class TestCacheKeys:
    """Test key and fingerprint helpers."""
    
    def test_query_and_fragment_stripped(self):
        assert make_cache_key("https://example.com/docs?page=2#intro") == "https://example.com/docs"
        assert make_cache_key("https://example.com/docs#a?b") == "https://example.com/docs"
    
    def test_fingerprint_suffix(self):
        assert make_cache_key("https://example.com/docs?x=1", "abc") == "https://example.com/docs:abc"
    
    def test_fingerprint_stable(self):
        """Test fingerprints depend only on the first 10k chars."""
        base = "<p>" + "x" * 20000
        
        assert content_fingerprint(base) == content_fingerprint(base + "tail")
        assert content_fingerprint("<p>one</p>") != content_fingerprint("<p>two</p>")
        assert len(content_fingerprint("")) == 12


class TestCacheOperations:
    """Test get/set/delete behavior."""
    
    def test_hit_then_expiry(self, clock):
        """Test an entry expires after its TTL."""
        cache = AnalysisCache(default_ttl=0.1, clock=clock)
        document = doc()
        cache.set("https://example.com/a", document)
        
        assert cache.get("https://example.com/a") is document
        
        clock.advance(0.2)
        
        assert cache.get("https://example.com/a") is None
        assert len(cache) == 0
    
    def test_same_page_with_query(self, clock):
        """Test query strings address the same entry."""
        cache = AnalysisCache(clock=clock)
        document = doc()
        cache.set("https://example.com/a?ref=1", document)
        
        assert cache.get("https://example.com/a#top") is document
    
    def test_per_entry_ttl(self, clock):
        cache = AnalysisCache(default_ttl=100, clock=clock)
        cache.set("https://example.com/a", doc(), ttl=5)
        
        clock.advance(6)
        
        assert cache.get("https://example.com/a") is None
    
    def test_fifo_eviction(self, clock):
        """Test the oldest-inserted entry goes first, even if recently read."""
        cache = AnalysisCache(max_size=2, clock=clock)
        cache.set("https://example.com/1", doc())
        cache.set("https://example.com/2", doc())
        cache.get("https://example.com/1")
        
        cache.set("https://example.com/3", doc())
        
        assert len(cache) == 2
        assert cache.get("https://example.com/1") is None
        assert cache.get("https://example.com/2") is not None
        assert cache.get("https://example.com/3") is not None
    
    def test_overwrite_keeps_position(self, clock):
        """Test overwriting a key neither evicts nor moves it."""
        cache = AnalysisCache(max_size=2, clock=clock)
        cache.set("https://example.com/1", doc())
        cache.set("https://example.com/2", doc())
        newer = doc()
        
        cache.set("https://example.com/1", newer)
        
        assert len(cache) == 2
        assert cache.get("https://example.com/1") is newer
        
        cache.set("https://example.com/3", doc())
        
        assert cache.get("https://example.com/1") is None
        assert cache.get("https://example.com/2") is not None
    
    def test_fingerprint_fallback(self, clock):
        """Test a fingerprinted miss falls back to the bare URL entry."""
        cache = AnalysisCache(clock=clock)
        bare = doc()
        cache.set("https://example.com/a", bare)
        
        assert cache.get("https://example.com/a", "deadbeef") is bare
    
    def test_fingerprint_exact_match_preferred(self, clock):
        cache = AnalysisCache(clock=clock)
        bare, exact = doc(), doc()
        cache.set("https://example.com/a", bare)
        cache.set("https://example.com/a", exact, fingerprint="fp1")
        
        assert cache.get("https://example.com/a", "fp1") is exact
        assert cache.get("https://example.com/a") is bare
    
    def test_fingerprint_not_found_without_base(self, clock):
        cache = AnalysisCache(clock=clock)
        cache.set("https://example.com/a", doc(), fingerprint="fp1")
        
        assert cache.get("https://example.com/a", "fp2") is None
        assert cache.get("https://example.com/a") is None
    
    def test_delete_all_variants(self, clock):
        """Test delete removes the bare key and fingerprinted keys."""
        cache = AnalysisCache(clock=clock)
        cache.set("https://example.com/a", doc())
        cache.set("https://example.com/a", doc(), fingerprint="fp1")
        cache.set("https://example.com/a", doc(), fingerprint="fp2")
        cache.set("https://example.com/ab", doc())
        
        removed = cache.delete("https://example.com/a?x=1")
        
        assert removed == 3
        assert cache.has("https://example.com/a") is False
        assert cache.has("https://example.com/ab") is True
    
    def test_delete_missing(self, clock):
        assert AnalysisCache(clock=clock).delete("https://example.com/none") == 0
    
    def test_has(self, clock):
        """Test has() only reports live entries."""
        cache = AnalysisCache(default_ttl=10, clock=clock)
        cache.set("https://example.com/a", doc(), fingerprint="fp")
        
        assert cache.has("https://example.com/a") is True
        assert cache.has("https://example.com/b") is False
        
        clock.advance(10)
        
        assert cache.has("https://example.com/a") is False
    
    def test_clear_expired(self, clock):
        cache = AnalysisCache(clock=clock)
        cache.set("https://example.com/short", doc(), ttl=1)
        cache.set("https://example.com/long", doc(), ttl=100)
        
        clock.advance(5)
        
        assert cache.clear_expired() == 1
        assert len(cache) == 1
        assert cache.clear_expired() == 0
    
    def test_clear(self, clock):
        cache = AnalysisCache(clock=clock)
        cache.set("https://example.com/1", doc())
        cache.set("https://example.com/2", doc())
        
        assert cache.clear() == 2
        assert len(cache) == 0
    
    def test_corrupt_entry_is_miss(self, clock):
        """Test an entry not holding a document is dropped."""
        cache = AnalysisCache(clock=clock)
        key = cache.set("https://example.com/a", doc())
        cache._entries[key].document = {"not": "a document"}
        
        assert cache.get("https://example.com/a") is None
        assert len(cache) == 0
    
    def test_stats(self, clock):
        """Test stats report remaining whole seconds."""
        cache = AnalysisCache(max_size=7, default_ttl=60, clock=clock)
        cache.set("https://example.com/a?q=1", doc())
        clock.advance(10.4)
        
        stats = cache.stats()
        
        assert stats.size == 1
        assert stats.max_size == 7
        assert stats.entries == [
            {"key": "https://example.com/a", "url": "https://example.com/a?q=1", "expires_in": 50}
        ]
    
    def test_stats_never_negative(self, clock):
        cache = AnalysisCache(default_ttl=1, clock=clock)
        cache.set("https://example.com/a", doc())
        clock.advance(30)
        
        assert cache.stats().entries[0]["expires_in"] == 0
    
    @pytest.mark.parametrize("size", [0, -3])
    def test_minimum_capacity(self, size):
        assert AnalysisCache(max_size=size).max_size == 1


class TestCacheVariants:
    """Test variant matching does not leak across URLs sharing a prefix."""
    
    def test_other_port_not_matched(self, clock):
        """Test a host without a port does not match the same host on another port."""
        cache = AnalysisCache(clock=clock)
        cache.set("https://example.com:8080/page", doc())
        
        assert cache.has("https://example.com") is False
        assert cache.delete("https://example.com") == 0
        assert len(cache) == 1
        assert cache.has("https://example.com:8080/page") is True
    
    def test_fingerprinted_variant_still_matched(self, clock):
        cache = AnalysisCache(clock=clock)
        cache.set("https://example.com", doc(), fingerprint="a1b2c3d4e5f6")
        cache.set("https://example.com:8080", doc())
        
        assert cache.has("https://example.com") is True
        assert cache.delete("https://example.com") == 1
        assert cache.has("https://example.com:8080") is True
