"""
Reporting - Plain-text reports for a tool or agent layer.

Every function returns a string; callers decide where it goes.
"""

from page_lens.cache.analysis_cache import AnalysisCache
from page_lens.extraction.extractor import ExtractionResult
from page_lens.scoring.scorer import score_stats, top_nodes
from page_lens.tree.nodes import PageDocument
from page_lens.tree.stats import tree_stats

TOP_NODE_PREVIEW = 200

# Rough per-document footprint used for the memory estimate
ESTIMATED_KB_PER_ENTRY = 50


def format_extraction(result: ExtractionResult) -> str:
    """Extract content followed by the truncation notice, if any."""
    output = result.content
    if result.truncated and result.truncation_info:
        output += f"\n\n--- {result.truncation_info} ---"
    return output


def format_tree_stats(document: PageDocument) -> str:
    """Node counts, importance distribution and page metadata."""
    basic = tree_stats(document)
    scores = score_stats(document)
    meta = document.page_meta
    bands = scores.distribution
    
    lines = [
        "=== Page Content Statistics ===\n",
        f"Total nodes: {basic.total_nodes}",
        f"Main content nodes: {basic.main_content_nodes}",
        f"Headings: {basic.heading_count}",
        f"Paragraphs: {basic.paragraph_count}",
        f"Lists: {basic.list_count}",
        f"Average depth: {basic.avg_depth:.1f}",
        "",
        "=== Content Importance Distribution ===",
        f"Average importance: {scores.avg:.3f}",
        f"Range: {scores.min:.3f} - {scores.max:.3f}",
        f"Median: {scores.median:.3f}",
        "",
        "Distribution:",
        f"  Very High (0.9-1.0): {bands['very_high']} nodes",
        f"  High (0.7-0.9): {bands['high']} nodes",
        f"  Medium (0.5-0.7): {bands['medium']} nodes",
        f"  Low (0.3-0.5): {bands['low']} nodes",
        f"  Very Low (0-0.3): {bands['very_low']} nodes",
        "",
        "=== Page Metadata ===",
        f"Total words: {meta.total_words}",
        f"Reading time: ~{meta.estimated_reading_minutes} minutes",
        f"Content density: {meta.content_density * 100:.1f}%",
        f"Structure score: {meta.structure_score * 100:.0f}%",
        f"Main content confidence: {meta.main_content_area.confidence * 100:.0f}%",
    ]
    return "\n".join(lines)


def format_top_nodes(document: PageDocument, n: int = 10) -> str:
    """The n most important nodes with a text preview each."""
    lines = [f"=== Top {n} Most Important Content ===\n"]
    for rank, node in enumerate(top_nodes(document, n), start=1):
        preview = node.text[:TOP_NODE_PREVIEW]
        if len(node.text) > TOP_NODE_PREVIEW:
            preview += "..."
        lines.append(f"{rank}. [{node.kind.value}] (importance: {node.importance:.3f})")
        lines.append(f"   {preview}")
        lines.append("")
    return "\n".join(lines)


def format_cache_stats(cache: AnalysisCache) -> str:
    stats = cache.stats()
    lines = [
        "=== Analysis Cache Statistics ===\n",
        f"Cached pages: {stats.size}/{stats.max_size}",
        f"Memory usage: ~{stats.size * ESTIMATED_KB_PER_ENTRY}KB estimated",
        "",
        "Cached URLs:",
    ]
    for index, entry in enumerate(stats.entries, start=1):
        lines.append(f"  {index}. {entry['url']} (expires in {entry['expires_in']}s)")
    return "\n".join(lines)


def format_cache_info(cache: AnalysisCache) -> str:
    stats = cache.stats()
    return "\n".join([
        "=== Analysis Cache Configuration ===\n",
        f"TTL (time to live): {cache.default_ttl:g} seconds",
        f"Max cache size: {stats.max_size} pages",
        f"Current size: {stats.size} pages",
        "Storage: in-memory, owned by the host process",
        "",
        "Cache policy:",
        f"  • Entries expire after {cache.default_ttl:g} seconds",
        "  • Oldest-inserted entry evicted when max size is reached",
    ])
