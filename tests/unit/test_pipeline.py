"""
Tests for the analysis pipeline.
"""

import pytest

from page_lens.cache import AnalysisCache
from page_lens.config import CacheSettings, Settings
from page_lens.pipeline import PageAnalyzer
from page_lens.providers import HtmlSnapshotProvider


class CountingProvider(HtmlSnapshotProvider):
    """HTML provider that counts snapshot captures."""
    
    def __init__(self, html, url="https://example.com/guide"):
        super().__init__(html, url=url)
        self.snapshots = 0
    
    async def snapshot(self):
        self.snapshots += 1
        return await super().snapshot()


def analyzer_with_cache(clock, **cache_settings):
    settings = Settings(cache=CacheSettings(**cache_settings))
    cache = AnalysisCache(
        max_size=settings.cache.max_size,
        default_ttl=settings.cache.ttl_seconds,
        clock=clock,
    )
    return PageAnalyzer(cache=cache, settings=settings)


class TestAnalyze:
    """Test PageAnalyzer.analyze."""
    
    @pytest.mark.asyncio
    async def test_produces_scored_document(self, article_html):
        """Test analyze builds and scores."""
        analyzer = PageAnalyzer()
        
        document = await analyzer.analyze(HtmlSnapshotProvider(article_html, url="https://example.com/guide"))
        
        assert document.scored is True
        assert document.title == "Widget Guide"
        assert document.url == "https://example.com/guide"
    
    @pytest.mark.asyncio
    async def test_cache_hit_skips_snapshot(self, article_html, clock):
        """Test a second analysis of the same URL reuses the document."""
        analyzer = analyzer_with_cache(clock)
        provider = CountingProvider(article_html)
        
        first = await analyzer.analyze(provider)
        second = await analyzer.analyze(provider)
        
        assert second is first
        assert provider.snapshots == 1
        assert analyzer.cache.has("https://example.com/guide")
    
    @pytest.mark.asyncio
    async def test_cache_bypassed(self, article_html, clock):
        """Test use_cache=False always captures and stores nothing."""
        analyzer = analyzer_with_cache(clock)
        provider = CountingProvider(article_html)
        
        await analyzer.analyze(provider, use_cache=False)
        await analyzer.analyze(provider, use_cache=False)
        
        assert provider.snapshots == 2
        assert len(analyzer.cache) == 0
    
    @pytest.mark.asyncio
    async def test_cache_disabled_in_settings(self, article_html, clock):
        analyzer = analyzer_with_cache(clock, enabled=False)
        provider = CountingProvider(article_html)
        
        await analyzer.analyze(provider)
        await analyzer.analyze(provider)
        
        assert analyzer.caching is False
        assert provider.snapshots == 2
    
    @pytest.mark.asyncio
    async def test_expired_entry_rebuilt(self, article_html, clock):
        """Test an expired entry triggers a fresh build."""
        analyzer = analyzer_with_cache(clock, ttl_seconds=30)
        provider = CountingProvider(article_html)
        
        first = await analyzer.analyze(provider)
        clock.advance(31)
        second = await analyzer.analyze(provider)
        
        assert second is not first
        assert provider.snapshots == 2
    
    @pytest.mark.asyncio
    async def test_fingerprint_mode(self, clock):
        """Test changed markup under the same URL is rebuilt."""
        analyzer = analyzer_with_cache(clock, use_fingerprint=True)
        old = CountingProvider("<body><p>Old version of the page text.</p></body>")
        new = CountingProvider("<body><p>New version of the page text.</p></body>")
        
        first = await analyzer.analyze(old)
        again = await analyzer.analyze(old)
        changed = await analyzer.analyze(new)
        
        assert again is first
        assert changed is not first
        assert old.snapshots == 2
        assert len(analyzer.cache) == 2
        assert "New version" in changed.main_content[0].text
    
    @pytest.mark.asyncio
    async def test_without_cache(self, article_html):
        """Test an analyzer with no cache still works."""
        analyzer = PageAnalyzer()
        provider = CountingProvider(article_html)
        
        await analyzer.analyze(provider)
        await analyzer.analyze(provider)
        
        assert analyzer.caching is False
        assert provider.snapshots == 2


class TestAnalyzerViews:
    """Test the extraction wrappers."""
    
    def test_analyze_snapshot(self, make_snapshot, article_html):
        document = PageAnalyzer().analyze_snapshot(make_snapshot(article_html))
        
        assert document.scored is True
        assert document.page_meta.main_content_area.locator == "//main[1]"
    
    def test_wrappers(self, make_snapshot, article_html):
        """Test extract, summary, section and overview go through the extractor."""
        analyzer = PageAnalyzer()
        document = analyzer.analyze_snapshot(make_snapshot(article_html))
        
        assert "Widget Guide" in analyzer.extract(document).content
        assert analyzer.summary(document).startswith("# Widget Guide")
        assert "community edition" in analyzer.section(document, "Pricing").content
        assert analyzer.overview(document).startswith("Page: Widget Guide")
    
    def test_extract_uses_configured_defaults(self, make_snapshot, article_html):
        """Test the configured budget applies when no options are given."""
        from page_lens.config import ExtractionSettings
        
        settings = Settings(extraction=ExtractionSettings(max_chars=250))
        analyzer = PageAnalyzer(settings=settings)
        document = analyzer.analyze_snapshot(make_snapshot(article_html))
        
        result = analyzer.extract(document)
        
        assert len(result.content) <= 250
        assert result.truncated is True
