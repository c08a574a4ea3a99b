"""
AST Builder - Converts a rendered snapshot into a PageDocument.

One pass classifies elements into typed content nodes. Main content,
navigation and supplementary regions are detected beforehand on an
index of the raw snapshot; page-level metadata comes from the same index.

Example:
    >>> builder = ASTBuilder()
    >>> document = builder.build(snapshot)
    >>> document.page_meta.main_content_area.locator
    '//main[1]'
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from page_lens.config.settings import BuilderSettings
from page_lens.interfaces.provider import DocumentSnapshot, ElementSnapshot
from page_lens.tree.nodes import (
    ContentNode,
    MainContentArea,
    NodeKind,
    NodeMeta,
    NodeRect,
    PageDocument,
    PageMeta,
)
from page_lens.tree.regions import (
    SKIPPED_TAGS,
    ElementInfo,
    SnapshotIndex,
    child_locator,
    detect_main_region,
    detect_navigation,
    detect_supplementary,
)
from page_lens.utils.text import count_words, normalize_whitespace

logger = logging.getLogger(__name__)


TAG_KINDS = {
    "p": NodeKind.PARAGRAPH,
    "ul": NodeKind.LIST,
    "ol": NodeKind.LIST,
    "li": NodeKind.LIST_ITEM,
    "table": NodeKind.TABLE,
    "pre": NodeKind.CODE,
    "code": NodeKind.CODE,
    "blockquote": NodeKind.BLOCKQUOTE,
    "a": NodeKind.LINK,
    "em": NodeKind.EMPHASIS,
    "i": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
    "b": NodeKind.STRONG,
    "img": NodeKind.IMAGE,
}

# Kept even without any words
WORDLESS_KINDS = {NodeKind.IMAGE, NodeKind.TABLE}


def classify_tag(tag: str) -> Tuple[NodeKind, Optional[int]]:
    """Map a tag to its node kind and, for headings, its level."""
    if len(tag) == 2 and tag[0] == "h" and tag[1] in "123456":
        return NodeKind.HEADING, int(tag[1])
    return TAG_KINDS.get(tag, NodeKind.CONTAINER), None


def structure_score(h1_count: int, h2_count: int, h3_count: int, paragraph_count: int) -> float:
    """Rate the heading/paragraph organization of a page in [0, 1]."""
    score = 0.0
    if h1_count == 1:
        score += 0.3
    if h2_count > 0:
        score += 0.3
    if h3_count > 0:
        score += 0.2
    if paragraph_count > h2_count * 2:
        score += 0.2
    return min(score, 1.0)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass
class _WalkContext:
    """State shared by one region walk."""
    in_main: bool
    excluded: Set[int]
    visited: Set[int] = field(default_factory=set)


class ASTBuilder:
    """
    Builds unscored content trees from provider snapshots.
    
    Never raises for bad input: skipped tags, invisible elements,
    malformed children and repeated (cyclic) elements are dropped, and
    the walk stops descending at max_depth.
    """
    
    def __init__(self, settings: Optional[BuilderSettings] = None):
        self.settings = settings or BuilderSettings()
    
    def build(self, snapshot: DocumentSnapshot) -> PageDocument:
        """
        Build a PageDocument from a snapshot.
        
        Args:
            snapshot: Materialized element tree of the page
            
        Returns:
            Document with every node at neutral importance
        """
        start = time.time()
        
        body = snapshot.body
        if body is None:
            logger.info(f"Empty snapshot for {snapshot.url}")
            return PageDocument(url=snapshot.url, title=snapshot.title)
        
        index = SnapshotIndex(body)
        main, main_score = detect_main_region(
            index,
            threshold=self.settings.main_content_threshold,
            min_candidate_chars=self.settings.min_candidate_chars,
        )
        navigation = detect_navigation(index, main)
        supplementary = detect_supplementary(index, main, navigation)
        
        nav_ids = {id(info.element) for info in navigation}
        visited: Set[int] = set()
        
        main_nodes = self._walk_region(main, _WalkContext(True, nav_ids, visited))
        supplementary_nodes: List[ContentNode] = []
        for info in supplementary:
            supplementary_nodes.extend(self._walk_region(info, _WalkContext(False, nav_ids, visited)))
        navigation_nodes: List[ContentNode] = []
        for info in navigation:
            navigation_nodes.extend(self._walk_region(info, _WalkContext(False, set(), visited)))
        
        document = PageDocument(
            url=snapshot.url,
            title=snapshot.title,
            main_content=main_nodes,
            supplementary=supplementary_nodes,
            navigation=navigation_nodes,
            page_meta=self._page_meta(index, main, main_score),
        )
        
        elapsed = (time.time() - start) * 1000
        logger.debug(
            f"Built {snapshot.url}: {len(main_nodes)} main, {len(supplementary_nodes)} supplementary, "
            f"{len(navigation_nodes)} navigation roots in {elapsed:.1f}ms"
        )
        return document
    
    def _walk_region(self, region: ElementInfo, ctx: _WalkContext) -> List[ContentNode]:
        """Turn a region's children into depth-0 roots."""
        return self._walk_children(region.element, region.locator, 0, ctx)
    
    def _walk_children(
        self,
        element: ElementSnapshot,
        locator: str,
        depth: int,
        ctx: _WalkContext,
    ) -> List[ContentNode]:
        nodes: List[ContentNode] = []
        positions = {}
        for child in element.children:
            try:
                tag = child.tag.lower()
                positions[tag] = positions.get(tag, 0) + 1
                node = self._build_node(child, child_locator(locator, tag, positions[tag]), depth, ctx)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed element under {locator}: {e}")
                continue
            if node is not None:
                nodes.append(node)
        return nodes
    
    def _build_node(
        self,
        element: ElementSnapshot,
        locator: str,
        depth: int,
        ctx: _WalkContext,
    ) -> Optional[ContentNode]:
        key = id(element)
        if key in ctx.visited:
            logger.warning(f"Element at {locator} already visited, breaking cycle")
            return None
        ctx.visited.add(key)
        
        tag = element.tag.lower()
        if not element.visible or tag in SKIPPED_TAGS or key in ctx.excluded:
            return None
        
        kind, level = classify_tag(tag)
        raw_text = element.text or ""
        text = raw_text.strip() if kind == NodeKind.CODE else normalize_whitespace(raw_text)
        word_count = count_words(text)
        if word_count == 0 and kind not in WORDLESS_KINDS:
            return None
        
        if depth < self.settings.max_depth:
            children = self._walk_children(element, locator, depth + 1, ctx)
        else:
            logger.debug(f"Depth cap {self.settings.max_depth} reached at {locator}")
            children = []
        
        rect = None
        if element.rect is not None:
            rect = NodeRect(width=element.rect.width, height=element.rect.height, area=element.rect.area)
        
        return ContentNode(
            kind=kind,
            tag_name=tag,
            text=text,
            heading_level=level,
            children=children,
            meta=NodeMeta(
                locator=locator,
                word_count=word_count,
                depth=depth,
                is_main_content=ctx.in_main,
                rect=rect,
            ),
        )
    
    def _page_meta(self, index: SnapshotIndex, main: ElementInfo, main_score: float) -> PageMeta:
        body = index.root.element
        text = body.text or ""
        total_words = count_words(text)
        
        density = 0.0
        if body.markup_length:
            density = _clamp(len(text) / body.markup_length)
        
        counts = index.count_rendered(("h1", "h2", "h3", "p"))
        
        return PageMeta(
            total_words=total_words,
            estimated_reading_minutes=math.ceil(total_words / self.settings.words_per_minute),
            content_density=density,
            structure_score=structure_score(counts["h1"], counts["h2"], counts["h3"], counts["p"]),
            main_content_area=MainContentArea(
                locator=main.locator,
                confidence=_clamp(main_score / 100),
            ),
        )
