"""Bounded content extraction."""

from page_lens.extraction.options import MIN_VIABLE_BUDGET, ExtractionOptions, PriorityOrder
from page_lens.extraction.truncation import truncate_gracefully
from page_lens.extraction.extractor import (
    ContentExtractor,
    ExtractionResult,
    format_node,
    order_nodes,
)

__all__ = [
    "MIN_VIABLE_BUDGET",
    "ExtractionOptions",
    "PriorityOrder",
    "truncate_gracefully",
    "ContentExtractor",
    "ExtractionResult",
    "format_node",
    "order_nodes",
]
