"""
Content tree model - typed nodes and the page document.

A PageDocument is built fresh from one snapshot, annotated once by the
importance scorer (which returns a new document), and treated as
read-only afterwards so it can be cached and shared between extractions.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from page_lens.exceptions import DocumentFormatError

NEUTRAL_IMPORTANCE = 0.5


class NodeKind(str, Enum):
    """Content node kinds."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list-item"
    TABLE = "table"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    LINK = "link"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    IMAGE = "image"
    CONTAINER = "container"
    TEXT = "text"


@dataclass
class NodeRect:
    """Rendered box of a node."""
    width: float
    height: float
    area: float
    
    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height, "area": self.area}
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeRect":
        return cls(width=float(data["width"]), height=float(data["height"]), area=float(data["area"]))


@dataclass
class NodeMeta:
    """
    Per-node metadata.
    
    Attributes:
        locator: Stable position-derived path (e.g. //main[1]/p[2])
        importance: Relevance score in [0, 1]
        word_count: Words in the node's text
        depth: Depth below the region root (roots are 0)
        is_main_content: Node belongs to the main-content region
        rect: Rendered size, when the provider measured layout
    """
    locator: str
    importance: float = NEUTRAL_IMPORTANCE
    word_count: int = 0
    depth: int = 0
    is_main_content: bool = False
    rect: Optional[NodeRect] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "locator": self.locator,
            "importance": self.importance,
            "wordCount": self.word_count,
            "depth": self.depth,
            "isMainContent": self.is_main_content,
            "rect": self.rect.to_dict() if self.rect else None,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeMeta":
        rect = data.get("rect")
        return cls(
            locator=str(data["locator"]),
            importance=float(data.get("importance", NEUTRAL_IMPORTANCE)),
            word_count=int(data.get("wordCount", 0)),
            depth=int(data.get("depth", 0)),
            is_main_content=bool(data.get("isMainContent", False)),
            rect=NodeRect.from_dict(rect) if rect else None,
        )


@dataclass
class ContentNode:
    """
    One content unit in the tree.
    
    Children are owned exclusively by their parent: the tree never
    shares nodes and never contains cycles.
    
    Attributes:
        kind: Content kind derived from the tag
        tag_name: Source element tag (lowercase)
        text: Descendant text, trimmed
        meta: Locator, score and measurements
        heading_level: 1-6, only for headings
        children: Child nodes in document order
    """
    kind: NodeKind
    tag_name: str
    text: str
    meta: NodeMeta
    heading_level: Optional[int] = None
    children: List["ContentNode"] = field(default_factory=list)
    
    @property
    def importance(self) -> float:
        return self.meta.importance
    
    @property
    def is_heading(self) -> bool:
        return self.kind == NodeKind.HEADING
    
    def walk(self) -> Iterator["ContentNode"]:
        """Yield this node and its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
    
    def descendants(self) -> Iterator["ContentNode"]:
        """Yield descendants in pre-order (excluding this node)."""
        for child in self.children:
            yield from child.walk()
    
    def with_importance(self, importance: float, children: List["ContentNode"]) -> "ContentNode":
        """Copy of this node with a new score and the given children."""
        return replace(self, meta=replace(self.meta, importance=importance), children=children)
    
    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "tagName": self.tag_name,
            "text": self.text,
            "meta": self.meta.to_dict(),
            "children": [child.to_dict() for child in self.children],
        }
        if self.heading_level is not None:
            data["headingLevel"] = self.heading_level
        return data
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentNode":
        level = data.get("headingLevel")
        return cls(
            kind=NodeKind(data["kind"]),
            tag_name=str(data["tagName"]),
            text=str(data.get("text", "")),
            meta=NodeMeta.from_dict(data["meta"]),
            heading_level=int(level) if level is not None else None,
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )


@dataclass
class MainContentArea:
    """Where the main content was found and how sure we are."""
    locator: str = "//body"
    confidence: float = 0.0
    
    def to_dict(self) -> Dict[str, Any]:
        return {"locator": self.locator, "confidence": self.confidence}


@dataclass
class PageMeta:
    """
    Page-level metadata.
    
    Attributes:
        total_words: Words in the document's visible text
        estimated_reading_minutes: ceil(total_words / reading speed)
        content_density: Text length / markup length, in [0, 1]
        structure_score: Heading/paragraph organization rating, in [0, 1]
        main_content_area: Locator and confidence of the main region
    """
    total_words: int = 0
    estimated_reading_minutes: int = 0
    content_density: float = 0.0
    structure_score: float = 0.0
    main_content_area: MainContentArea = field(default_factory=MainContentArea)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalWords": self.total_words,
            "estimatedReadingMinutes": self.estimated_reading_minutes,
            "contentDensity": self.content_density,
            "structureScore": self.structure_score,
            "mainContentArea": self.main_content_area.to_dict(),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageMeta":
        area = data.get("mainContentArea") or {}
        return cls(
            total_words=int(data.get("totalWords", 0)),
            estimated_reading_minutes=int(data.get("estimatedReadingMinutes", 0)),
            content_density=float(data.get("contentDensity", 0.0)),
            structure_score=float(data.get("structureScore", 0.0)),
            main_content_area=MainContentArea(
                locator=str(area.get("locator", "//body")),
                confidence=float(area.get("confidence", 0.0)),
            ),
        )


@dataclass
class PageDocument:
    """
    Root artifact of a build.
    
    Attributes:
        url: Document URL
        title: Document title
        main_content: Roots of the main-content region
        supplementary: Roots of sidebars/complementary regions outside main
        navigation: Roots of navigation regions
        page_meta: Page-level metadata
        scored: True once the importance scorer has annotated the tree
    """
    url: str
    title: str
    main_content: List[ContentNode] = field(default_factory=list)
    supplementary: List[ContentNode] = field(default_factory=list)
    navigation: List[ContentNode] = field(default_factory=list)
    page_meta: PageMeta = field(default_factory=PageMeta)
    scored: bool = False
    
    @property
    def is_empty(self) -> bool:
        return not (self.main_content or self.supplementary or self.navigation)
    
    def iter_nodes(self, *regions: List[ContentNode]) -> Iterator[ContentNode]:
        """
        Yield nodes of the given root lists in pre-order.
        
        With no arguments, walks main content, supplementary and navigation.
        """
        if not regions:
            regions = (self.main_content, self.supplementary, self.navigation)
        for roots in regions:
            for root in roots:
                yield from root.walk()
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "mainContent": [node.to_dict() for node in self.main_content],
            "supplementary": [node.to_dict() for node in self.supplementary],
            "navigation": [node.to_dict() for node in self.navigation],
            "pageMeta": self.page_meta.to_dict(),
            "scored": self.scored,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageDocument":
        """
        Rebuild a document from its plain form.
        
        Raises:
            DocumentFormatError: If required fields are missing or invalid
        """
        try:
            return cls(
                url=str(data["url"]),
                title=str(data.get("title", "")),
                main_content=[ContentNode.from_dict(n) for n in data.get("mainContent", [])],
                supplementary=[ContentNode.from_dict(n) for n in data.get("supplementary", [])],
                navigation=[ContentNode.from_dict(n) for n in data.get("navigation", [])],
                page_meta=PageMeta.from_dict(data.get("pageMeta") or {}),
                scored=bool(data.get("scored", False)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DocumentFormatError("Invalid page document", details={"error": str(e)}) from e
    
    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
    
    @classmethod
    def from_json(cls, payload: str) -> "PageDocument":
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DocumentFormatError("Page document is not valid JSON", details={"error": str(e)}) from e
        if not isinstance(data, dict):
            raise DocumentFormatError("Page document must be a JSON object")
        return cls.from_dict(data)
