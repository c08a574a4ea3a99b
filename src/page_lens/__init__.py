"""
Page Lens - Semantic page-content extraction for automated agents.

Turns a rendered page's element tree into a typed content tree, scores
every node for importance, and renders bounded, truncation-safe extracts.

Example:
    >>> from page_lens import PageAnalyzer, AnalysisCache, HtmlSnapshotProvider
    >>> analyzer = PageAnalyzer(cache=AnalysisCache())
    >>> document = await analyzer.analyze(HtmlSnapshotProvider(html, url))
    >>> print(analyzer.extract(document).content)
"""

__version__ = "0.1.0"

# Public API exports
from page_lens.cache import AnalysisCache
from page_lens.config.settings import Settings
from page_lens.extraction import ContentExtractor, ExtractionOptions, ExtractionResult, PriorityOrder
from page_lens.pipeline import PageAnalyzer
from page_lens.providers import HtmlSnapshotProvider, PlaywrightSnapshotProvider
from page_lens.scoring import ImportanceScorer
from page_lens.tree import ASTBuilder, ContentNode, NodeKind, PageDocument

__all__ = [
    "AnalysisCache",
    "Settings",
    "ContentExtractor",
    "ExtractionOptions",
    "ExtractionResult",
    "PriorityOrder",
    "PageAnalyzer",
    "HtmlSnapshotProvider",
    "PlaywrightSnapshotProvider",
    "ImportanceScorer",
    "ASTBuilder",
    "ContentNode",
    "NodeKind",
    "PageDocument",
    "__version__",
]
