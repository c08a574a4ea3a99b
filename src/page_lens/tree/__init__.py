"""Content tree - data model, builder and region detection."""

from page_lens.tree.nodes import (
    NEUTRAL_IMPORTANCE,
    ContentNode,
    MainContentArea,
    NodeKind,
    NodeMeta,
    NodeRect,
    PageDocument,
    PageMeta,
)
from page_lens.tree.builder import ASTBuilder, classify_tag, structure_score
from page_lens.tree.regions import SnapshotIndex
from page_lens.tree.stats import TreeStats, tree_stats

__all__ = [
    "NEUTRAL_IMPORTANCE",
    "ContentNode",
    "MainContentArea",
    "NodeKind",
    "NodeMeta",
    "NodeRect",
    "PageDocument",
    "PageMeta",
    "ASTBuilder",
    "classify_tag",
    "structure_score",
    "SnapshotIndex",
    "TreeStats",
    "tree_stats",
]
