"""Structural statistics over a built content tree."""

from dataclasses import dataclass

from page_lens.tree.nodes import NodeKind, PageDocument


@dataclass
class TreeStats:
    """Node counts across all three regions."""
    total_nodes: int = 0
    main_content_nodes: int = 0
    heading_count: int = 0
    paragraph_count: int = 0
    list_count: int = 0
    avg_depth: float = 0.0


def tree_stats(document: PageDocument) -> TreeStats:
    stats = TreeStats()
    depth_total = 0
    for node in document.iter_nodes():
        stats.total_nodes += 1
        depth_total += node.meta.depth
        if node.meta.is_main_content:
            stats.main_content_nodes += 1
        if node.kind == NodeKind.HEADING:
            stats.heading_count += 1
        elif node.kind == NodeKind.PARAGRAPH:
            stats.paragraph_count += 1
        elif node.kind == NodeKind.LIST:
            stats.list_count += 1
    if stats.total_nodes:
        stats.avg_depth = depth_total / stats.total_nodes
    return stats
