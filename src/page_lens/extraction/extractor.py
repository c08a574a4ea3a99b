"""
Content Extractor - Bounded text output from a scored content tree.

Collects candidate nodes, filters them by importance, orders them and
renders them into a character budget. The node that overflows the
budget may be cut once at a sentence or word boundary; output never
exceeds the budget.

Example:
    >>> extractor = ContentExtractor()
    >>> result = extractor.extract(document, ExtractionOptions(max_chars=2000))
    >>> result.truncated
    False
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from page_lens.config.settings import ExtractionSettings
from page_lens.extraction.options import ExtractionOptions, PriorityOrder
from page_lens.extraction.truncation import ELLIPSIS, truncate_gracefully
from page_lens.scoring.scorer import ImportanceScorer
from page_lens.tree.nodes import ContentNode, NodeKind, PageDocument

logger = logging.getLogger(__name__)


# Importance band width used by the mixed ordering
MIXED_BAND_WIDTH = 0.2
MIXED_TOP_BAND = 4

# Adaptive truncation only runs while the budget is less than 95% full
ADAPTIVE_FILL_LIMIT = 0.95
# Fragments this short are not worth emitting
MIN_FRAGMENT_LENGTH = 50

SUMMARY_SNIPPET_LENGTH = 150


@dataclass
class ExtractionResult:
    """
    Rendered extract and how it was produced.
    
    Attributes:
        content: Rendered text
        chars_extracted: len(content)
        nodes_included: Nodes that contributed text (a cut node counts)
        sections_included: Headings emitted
        truncated: Budget ran out before all candidates were rendered
        truncation_info: Remaining node count and last section, when truncated
    """
    content: str = ""
    chars_extracted: int = 0
    nodes_included: int = 0
    sections_included: int = 0
    truncated: bool = False
    truncation_info: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "metadata": {
                "charsExtracted": self.chars_extracted,
                "nodesIncluded": self.nodes_included,
                "sectionsIncluded": self.sections_included,
                "truncated": self.truncated,
                "truncationInfo": self.truncation_info,
            },
        }


def _mixed_band(importance: float) -> int:
    # Small epsilon keeps 0.6 in the [0.6, 0.8) band despite float error
    return min(int(math.floor(importance / MIXED_BAND_WIDTH + 1e-9)), MIXED_TOP_BAND)


def order_nodes(nodes: List[ContentNode], order: PriorityOrder) -> List[ContentNode]:
    """
    Order candidate nodes.
    
    dom-order keeps traversal order, importance sorts strictly
    descending, mixed sorts by importance band (width 0.2) descending and
    keeps traversal order within a band.
    """
    if order == PriorityOrder.DOM_ORDER:
        return list(nodes)
    if order == PriorityOrder.IMPORTANCE:
        return sorted(nodes, key=lambda node: node.importance, reverse=True)
    indexed = list(enumerate(nodes))
    indexed.sort(key=lambda pair: (-_mixed_band(pair[1].importance), pair[0]))
    return [node for _, node in indexed]


def format_node(node: ContentNode) -> str:
    """
    Structured rendering of one node.
    
    Returns an empty string for nodes that emit nothing (lists, and
    containers whose children carry the text).
    """
    kind = node.kind
    if kind == NodeKind.HEADING:
        return "\n" + "#" * (node.heading_level or 1) + " " + node.text + "\n"
    if kind == NodeKind.LIST:
        return ""
    if kind == NodeKind.LIST_ITEM:
        return "• " + node.text
    if kind == NodeKind.CODE:
        return "```\n" + node.text + "\n```"
    if kind == NodeKind.BLOCKQUOTE:
        return "> " + node.text
    if kind == NodeKind.TABLE:
        return f"[Table: {node.meta.word_count} words]"
    if kind == NodeKind.IMAGE:
        return "[Image]"
    if kind == NodeKind.CONTAINER and node.children:
        return ""
    return node.text


def format_flat(node: ContentNode) -> str:
    """Plain rendering: trimmed text, nothing for text-less nodes."""
    return node.text.strip()


class ContentExtractor:
    """
    Produces bounded extracts and read views of a PageDocument.
    
    Unscored documents are scored first (on a copy).
    """
    
    def __init__(
        self,
        scorer: Optional[ImportanceScorer] = None,
        settings: Optional[ExtractionSettings] = None,
    ):
        self.scorer = scorer or ImportanceScorer()
        self.settings = settings or ExtractionSettings()
    
    def ensure_scored(self, document: PageDocument) -> PageDocument:
        if document.scored:
            return document
        logger.debug(f"Document {document.url} not scored yet, scoring before extraction")
        return self.scorer.score(document)
    
    def extract(
        self,
        document: PageDocument,
        options: Optional[ExtractionOptions] = None,
    ) -> ExtractionResult:
        """
        Extract text within a character budget.
        
        Args:
            document: Built document (scored or not)
            options: Request options, configured defaults if omitted
            
        Returns:
            ExtractionResult whose content never exceeds options.max_chars
        """
        start = time.time()
        options = options or ExtractionOptions.from_settings(self.settings)
        document = self.ensure_scored(document)
        
        nodes = self._collect(document, options)
        nodes = [node for node in nodes if node.importance >= options.min_importance]
        nodes = order_nodes(nodes, options.priority_order)
        
        result = self.render(
            nodes,
            max_chars=options.max_chars,
            structured=options.include_structure,
            adaptive=options.adaptive_chunking,
        )
        
        elapsed = (time.time() - start) * 1000
        logger.info(
            f"Extracted {result.chars_extracted} chars from {result.nodes_included} nodes in {elapsed:.1f}ms"
        )
        return result
    
    def _collect(self, document: PageDocument, options: ExtractionOptions) -> List[ContentNode]:
        regions = [document.main_content]
        if not options.main_content_only:
            regions.append(document.supplementary)
        
        wanted = [name.lower() for name in options.sections] if options.sections else None
        nodes = []
        for node in document.iter_nodes(*regions):
            if wanted and node.is_heading:
                heading = node.text.lower()
                if not any(name in heading for name in wanted):
                    continue
            nodes.append(node)
        return nodes
    
    def render(
        self,
        nodes: List[ContentNode],
        max_chars: int,
        structured: bool = False,
        adaptive: bool = True,
    ) -> ExtractionResult:
        """
        Render ordered nodes into at most max_chars characters.
        
        Pieces are joined with newlines. The first piece that does not
        fit ends rendering; with adaptive set and the budget under 95%
        full it is cut gracefully and kept if more than 50 chars remain.
        """
        pieces: List[str] = []
        used = 0
        nodes_included = 0
        sections_included = 0
        last_section = ""
        truncated = False
        remaining_nodes = 0
        
        for position, node in enumerate(nodes):
            piece = format_node(node) if structured else format_flat(node)
            if not piece:
                continue
            
            separator = 1 if pieces else 0
            if used + separator + len(piece) > max_chars:
                truncated = True
                remaining_nodes = len(nodes) - position
                if adaptive and used < max_chars * ADAPTIVE_FILL_LIMIT:
                    fragment = truncate_gracefully(piece, max_chars - used - separator)
                    if len(fragment) > MIN_FRAGMENT_LENGTH:
                        pieces.append(fragment)
                        used += separator + len(fragment)
                        nodes_included += 1
                        remaining_nodes -= 1
                break
            
            pieces.append(piece)
            used += separator + len(piece)
            nodes_included += 1
            if node.is_heading:
                sections_included += 1
                last_section = node.text
        
        content = "\n".join(pieces)
        
        truncation_info = None
        if truncated:
            truncation_info = (
                f"Content truncated after {sections_included} sections. "
                f"{remaining_nodes} more nodes available."
            )
            if last_section:
                truncation_info += f' Last section: "{last_section}"'
        
        return ExtractionResult(
            content=content,
            chars_extracted=len(content),
            nodes_included=nodes_included,
            sections_included=sections_included,
            truncated=truncated,
            truncation_info=truncation_info,
        )
    
    # =========================================================================
    # Read views
    # =========================================================================
    
    def section(self, document: PageDocument, name: str) -> Optional[ExtractionResult]:
        """
        Render one section in structured form.
        
        The section is the first main-content heading containing name
        (case-insensitive) and every node after it up to the next heading
        of the same or higher level, or the first node shallower than
        the heading.
        
        Returns:
            ExtractionResult, or None if no heading matches
        """
        document = self.ensure_scored(document)
        wanted = name.strip().lower()
        nodes = list(document.iter_nodes(document.main_content))
        
        start = next(
            (i for i, node in enumerate(nodes) if node.is_heading and wanted in node.text.lower()),
            None,
        )
        if start is None:
            logger.debug(f"Section '{name}' not found in {document.url}")
            return None
        
        heading = nodes[start]
        level = heading.heading_level or 1
        selected = [heading]
        for node in nodes[start + 1:]:
            if node.meta.depth < heading.meta.depth:
                break
            if node.is_heading and (node.heading_level or 1) <= level:
                break
            selected.append(node)
        
        return self.render(selected, max_chars=self.settings.section_budget, structured=True, adaptive=True)
    
    def summary(self, document: PageDocument, max_length: Optional[int] = None) -> str:
        """
        Title plus the first paragraph after each level-1/2 heading.
        
        Never longer than max_length.
        """
        max_length = max_length if max_length is not None else self.settings.summary_max_length
        if max_length <= 0:
            return ""
        
        parts = [f"# {document.title}\n"[:max_length]]
        length = len(parts[0])
        
        nodes = list(document.iter_nodes(document.main_content))
        for index, node in enumerate(nodes):
            if length >= max_length:
                break
            if not node.is_heading or (node.heading_level or 1) > 2:
                continue
            paragraph = self._first_paragraph_after(nodes, index)
            if paragraph is None:
                continue
            snippet = paragraph.text[:SUMMARY_SNIPPET_LENGTH]
            if len(paragraph.text) > SUMMARY_SNIPPET_LENGTH:
                snippet += ELLIPSIS
            text = f"\n## {node.text}\n{snippet}\n"
            if length + len(text) <= max_length:
                parts.append(text)
                length += len(text)
        
        return "".join(parts)
    
    @staticmethod
    def _first_paragraph_after(nodes: List[ContentNode], index: int) -> Optional[ContentNode]:
        for node in nodes[index + 1:]:
            if node.is_heading and (node.heading_level or 1) <= 2:
                return None
            if node.kind == NodeKind.PARAGRAPH:
                return node
        return None
    
    def overview(self, document: PageDocument) -> str:
        """Title, URL, size, reading time, structure and main headings."""
        meta = document.page_meta
        lines = [
            f"Page: {document.title}",
            f"URL: {document.url}",
            f"Total words: {meta.total_words}",
            f"Reading time: ~{meta.estimated_reading_minutes} minutes",
            f"Structure score: {meta.structure_score * 100:.0f}%\n",
        ]
        
        headings = [
            node for node in document.iter_nodes(document.main_content)
            if node.is_heading and (node.heading_level or 1) <= 2
        ]
        if headings:
            lines.append("Main sections:")
            for node in headings:
                marker = "  •" if node.heading_level == 1 else "    ◦"
                lines.append(f"{marker} {node.text}")
        
        return "\n".join(lines)
