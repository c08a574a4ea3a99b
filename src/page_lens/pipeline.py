"""
Pipeline - Provider -> cache check -> build -> score -> cache store.

PageAnalyzer wires the stages together. The cache, if any, is passed in
by the host; the analyzer never creates a shared one.

Example:
    >>> cache = AnalysisCache()
    >>> analyzer = PageAnalyzer(cache=cache)
    >>> document = await analyzer.analyze(HtmlSnapshotProvider(html, url))
    >>> print(analyzer.overview(document))
"""

import logging
import time
from typing import Optional

from page_lens.cache.analysis_cache import AnalysisCache, content_fingerprint
from page_lens.config.settings import Settings
from page_lens.extraction.extractor import ContentExtractor, ExtractionResult
from page_lens.extraction.options import ExtractionOptions
from page_lens.interfaces.provider import DocumentSnapshot, IDocumentProvider
from page_lens.scoring.scorer import ImportanceScorer
from page_lens.tree.builder import ASTBuilder
from page_lens.tree.nodes import PageDocument

logger = logging.getLogger(__name__)


class PageAnalyzer:
    """
    Builds, scores and caches page documents, and extracts from them.
    
    Attributes:
        builder: Content tree builder
        scorer: Importance scorer
        cache: Optional analysis cache owned by the caller
        extractor: Extractor sharing the scorer
    """
    
    def __init__(
        self,
        builder: Optional[ASTBuilder] = None,
        scorer: Optional[ImportanceScorer] = None,
        cache: Optional[AnalysisCache] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.builder = builder or ASTBuilder(self.settings.builder)
        self.scorer = scorer or ImportanceScorer()
        self.cache = cache
        self.extractor = ContentExtractor(self.scorer, self.settings.extraction)
    
    @property
    def caching(self) -> bool:
        return self.cache is not None and self.settings.cache.enabled
    
    async def analyze(self, provider: IDocumentProvider, use_cache: bool = True) -> PageDocument:
        """
        Produce a scored document for the provider's page.
        
        Without fingerprinting the cache is checked before the snapshot is
        taken; with it, the snapshot markup is hashed into the key first.
        
        Args:
            provider: Snapshot source
            use_cache: Consult and fill the cache
            
        Returns:
            Scored PageDocument, possibly shared with other callers
        """
        use_cache = use_cache and self.caching
        url = await provider.current_url()
        
        if use_cache and not self.settings.cache.use_fingerprint:
            cached = self.cache.get(url)
            if cached is not None:
                logger.info(f"Using cached analysis for {url}")
                return cached
        
        snapshot = await provider.snapshot()
        
        fingerprint = None
        if use_cache and self.settings.cache.use_fingerprint:
            fingerprint = content_fingerprint(snapshot.markup)
            cached = self.cache.get(url, fingerprint)
            if cached is not None:
                logger.info(f"Using cached analysis for {url}")
                return cached
        
        document = self.analyze_snapshot(snapshot)
        
        if use_cache:
            self.cache.set(url, document, fingerprint=fingerprint, ttl=self.settings.cache.ttl_seconds)
        return document
    
    def analyze_snapshot(self, snapshot: DocumentSnapshot) -> PageDocument:
        """Build and score a snapshot without touching the cache."""
        start = time.time()
        document = self.scorer.score(self.builder.build(snapshot))
        elapsed = (time.time() - start) * 1000
        logger.info(f"Analyzed {snapshot.url} in {elapsed:.1f}ms ({document.page_meta.total_words} words)")
        return document
    
    def extract(self, document: PageDocument, options: Optional[ExtractionOptions] = None) -> ExtractionResult:
        if options is None:
            options = ExtractionOptions.from_settings(self.settings.extraction)
        return self.extractor.extract(document, options)
    
    def summary(self, document: PageDocument, max_length: Optional[int] = None) -> str:
        return self.extractor.summary(document, max_length)
    
    def section(self, document: PageDocument, name: str) -> Optional[ExtractionResult]:
        return self.extractor.section(document, name)
    
    def overview(self, document: PageDocument) -> str:
        return self.extractor.overview(document)
