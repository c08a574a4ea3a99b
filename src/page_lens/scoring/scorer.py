"""
Importance Scorer - Assigns every content node a 0-1 relevance score.

Scores come from structural and lexical proxies only: the tag, where the
node sits (main content, first in its section, depth), how much text it
holds, whether it mentions high-signal terms, its rendered size and how
link-heavy its subtree is.

The scorer never mutates its input. score() returns a new document, so a
built tree can be scored, cached and shared without coordination.

Example:
    >>> scored = ImportanceScorer().score(document)
    >>> [node.text for node in top_nodes(scored, n=3)]
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple

from page_lens.scoring.weights import KEY_SECTION_TERMS, tag_weight
from page_lens.tree.nodes import ContentNode, NodeKind, PageDocument
from page_lens.utils.text import contains_any

logger = logging.getLogger(__name__)


MAIN_CONTENT_BOOST = 1.5
FIRST_IN_SECTION_BOOST = 1.1
OWN_WEIGHT = 0.8
PARENT_WEIGHT = 0.2
KEY_TERM_BOOST = 1.25
SMALL_AREA = 100
CODE_FLOOR = 0.75

# Region starting context: (parent importance, in main content)
REGION_CONTEXT = {
    "main": (1.0, True),
    "supplementary": (0.6, False),
    "navigation": (0.3, False),
}


@dataclass
class _Context:
    in_main: bool
    parent_importance: float
    section_depth: int = 0
    first_in_section: bool = True
    parent_has_key_terms: bool = False


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def has_key_terms(text: str) -> bool:
    """True if text mentions any high-signal section term."""
    return bool(text) and contains_any(text, KEY_SECTION_TERMS)


class ImportanceScorer:
    """
    Computes importance for every node of a PageDocument.
    
    Re-running on a scored document recomputes from tag and context, so
    the result is identical to scoring the unscored tree.
    """
    
    def score(self, document: PageDocument) -> PageDocument:
        """
        Score a document.
        
        Args:
            document: Built (scored or unscored) document
            
        Returns:
            New document with importance set on every node and scored=True
        """
        start = time.time()
        
        regions = {}
        for name, roots in (
            ("main", document.main_content),
            ("supplementary", document.supplementary),
            ("navigation", document.navigation),
        ):
            parent_importance, in_main = REGION_CONTEXT[name]
            link_counts: Dict[int, Tuple[int, int]] = {}
            for root in roots:
                self._count_links(root, link_counts)
            regions[name] = self._score_siblings(
                roots,
                _Context(in_main=in_main, parent_importance=parent_importance),
                link_counts,
            )
        
        elapsed = (time.time() - start) * 1000
        logger.debug(f"Scored {document.url} in {elapsed:.1f}ms")
        
        return replace(
            document,
            main_content=regions["main"],
            supplementary=regions["supplementary"],
            navigation=regions["navigation"],
            scored=True,
        )
    
    def _score_siblings(
        self,
        nodes: List[ContentNode],
        context: _Context,
        link_counts: Dict[int, Tuple[int, int]],
    ) -> List[ContentNode]:
        scored = []
        for position, node in enumerate(nodes):
            node_context = replace(context, first_in_section=position == 0)
            importance = self.node_importance(node, node_context, link_counts.get(id(node), (0, 1)))
            
            child_context = _Context(
                in_main=context.in_main and node.meta.is_main_content,
                parent_importance=importance,
                section_depth=context.section_depth + (1 if node.is_heading else 0),
                first_in_section=False,
                parent_has_key_terms=has_key_terms(node.text),
            )
            children = self._score_siblings(node.children, child_context, link_counts)
            scored.append(node.with_importance(importance, children))
        return scored
    
    def node_importance(self, node: ContentNode, context: _Context, links: Tuple[int, int]) -> float:
        """
        Importance of one node given its context.
        
        Args:
            node: Node to score
            context: Region, parent score and section position
            links: (link nodes, total nodes) in the node's subtree
        """
        meta = node.meta
        importance = tag_weight(node.tag_name)
        
        if context.in_main:
            importance *= MAIN_CONTENT_BOOST
        if context.first_in_section:
            importance *= FIRST_IN_SECTION_BOOST
        
        importance = importance * OWN_WEIGHT + context.parent_importance * PARENT_WEIGHT
        
        if meta.word_count > 100:
            importance *= 1.3
        elif meta.word_count > 50:
            importance *= 1.15
        elif meta.word_count < 10 and node.kind != NodeKind.HEADING:
            importance *= 0.8
        
        if context.parent_has_key_terms or has_key_terms(node.text):
            importance *= KEY_TERM_BOOST
        
        if node.kind == NodeKind.HEADING and node.heading_level:
            importance *= 1.0 + (7 - node.heading_level) * 0.1
        
        if meta.depth > 6:
            importance *= 0.7
        elif meta.depth > 4:
            importance *= 0.85
        
        if context.section_depth > 4:
            importance *= 0.8
        
        if meta.rect is not None and meta.rect.area < SMALL_AREA:
            importance *= 0.7
        
        link_total, node_total = links
        if node_total > 0 and link_total / node_total > 0.5:
            importance *= 0.5
        
        if node.kind == NodeKind.CODE:
            importance = max(importance, CODE_FLOOR)
        
        if node.kind == NodeKind.LIST and context.in_main:
            importance *= 1.1
        
        if node.kind == NodeKind.TABLE:
            if context.in_main and meta.word_count > 50:
                importance *= 1.2
            else:
                importance *= 0.8
        
        return _clamp(importance)
    
    def _count_links(self, node: ContentNode, counts: Dict[int, Tuple[int, int]]) -> Tuple[int, int]:
        """Fill counts with (link nodes, total nodes) for node's subtree."""
        links = 1 if node.kind == NodeKind.LINK else 0
        total = 1
        for child in node.children:
            child_links, child_total = self._count_links(child, counts)
            links += child_links
            total += child_total
        counts[id(node)] = (links, total)
        return links, total


# =============================================================================
# Read operations
# =============================================================================


@dataclass
class ScoreStats:
    """
    Importance distribution over a document.
    
    Attributes:
        count: Number of scored nodes
        avg, min, max, median: Score summary
        distribution: Counts per band: very_low [0, .3), low [.3, .5),
            medium [.5, .7), high [.7, .9), very_high [.9, 1]
    """
    count: int = 0
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0
    median: float = 0.0
    distribution: Dict[str, int] = field(default_factory=lambda: {
        "very_low": 0, "low": 0, "medium": 0, "high": 0, "very_high": 0,
    })


def _band(score: float) -> str:
    if score < 0.3:
        return "very_low"
    if score < 0.5:
        return "low"
    if score < 0.7:
        return "medium"
    if score < 0.9:
        return "high"
    return "very_high"


def top_nodes(document: PageDocument, n: int = 10) -> List[ContentNode]:
    """The n highest-scoring nodes of main content and supplementary."""
    nodes = list(document.iter_nodes(document.main_content, document.supplementary))
    nodes.sort(key=lambda node: node.importance, reverse=True)
    return nodes[:max(n, 0)]


def nodes_above(document: PageDocument, threshold: float) -> List[ContentNode]:
    """Main content and supplementary nodes scoring at least threshold, in document order."""
    return [
        node for node in document.iter_nodes(document.main_content, document.supplementary)
        if node.importance >= threshold
    ]


def score_stats(document: PageDocument) -> ScoreStats:
    """Score distribution across all three regions."""
    scores = sorted(node.importance for node in document.iter_nodes())
    stats = ScoreStats()
    if not scores:
        return stats
    
    stats.count = len(scores)
    stats.avg = sum(scores) / len(scores)
    stats.min = scores[0]
    stats.max = scores[-1]
    stats.median = scores[len(scores) // 2]
    for score in scores:
        stats.distribution[_band(score)] += 1
    return stats
