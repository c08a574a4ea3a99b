"""
Document Provider Interface - Contract for rendered element trees.

A provider hands the builder an already-materialized snapshot of a
rendered document. Capturing the snapshot is the only operation in the
pipeline that may suspend; everything downstream runs synchronously.

Example:
    >>> provider = HtmlSnapshotProvider(html, url="https://example.com/docs")
    >>> snapshot = await provider.snapshot()
    >>> snapshot.body.tag
    'body'
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Rect:
    """Rendered box size."""
    width: float
    height: float
    
    @property
    def area(self) -> float:
        return self.width * self.height
    
    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}
    
    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Rect"]:
        if not data:
            return None
        return cls(width=float(data.get("width", 0)), height=float(data.get("height", 0)))


@dataclass(eq=False)
class ElementSnapshot:
    """
    One rendered element as seen by the provider.
    
    Identity (not value) equality: the builder tracks elements it has
    already visited to break cycles in malformed snapshots.
    
    Attributes:
        tag: Lowercase tag name
        attributes: Element attributes (at least id, class and role when present)
        own_text: Text of direct text children only
        text: Rendered descendant text (hidden content excluded)
        markup_length: Length of the element's inner markup
        visible: Whether the element has a rendered box
        rect: Rendered size, if the provider measures layout
        children: Child elements in document order
    """
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    own_text: str = ""
    text: str = ""
    markup_length: int = 0
    visible: bool = True
    rect: Optional[Rect] = None
    children: List["ElementSnapshot"] = field(default_factory=list)
    
    @property
    def element_id(self) -> str:
        return self.attributes.get("id", "") or ""
    
    @property
    def class_list(self) -> List[str]:
        class_attr = self.attributes.get("class", "") or ""
        return class_attr.split()
    
    @property
    def role(self) -> str:
        return (self.attributes.get("role", "") or "").lower()
    
    def iter_descendants(self, max_depth: int = 512):
        """Yield descendants depth-first (pre-order), bounded by max_depth."""
        stack = [(child, 1) for child in reversed(self.children)]
        seen = {id(self)}
        while stack:
            element, depth = stack.pop()
            if id(element) in seen:
                continue
            seen.add(id(element))
            yield element
            if depth < max_depth:
                stack.extend((child, depth + 1) for child in reversed(element.children))
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "attributes": dict(self.attributes),
            "ownText": self.own_text,
            "text": self.text,
            "markupLength": self.markup_length,
            "visible": self.visible,
            "rect": self.rect.to_dict() if self.rect else None,
            "children": [child.to_dict() for child in self.children],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], max_depth: int = 512, _depth: int = 0) -> "ElementSnapshot":
        """
        Build a snapshot from the plain structure a provider produces.
        
        Malformed children are skipped; nesting beyond max_depth is dropped.
        
        Raises:
            ValueError: If data itself is not an element mapping
        """
        if not isinstance(data, dict) or not data.get("tag"):
            raise ValueError(f"Not an element mapping: {type(data).__name__}")
        
        children: List[ElementSnapshot] = []
        if _depth < max_depth:
            for raw_child in data.get("children") or []:
                try:
                    children.append(cls.from_dict(raw_child, max_depth, _depth + 1))
                except (ValueError, TypeError) as e:
                    logger.warning(f"Skipping malformed child of <{data.get('tag')}>: {e}")
        
        attributes = data.get("attributes") or {}
        return cls(
            tag=str(data["tag"]).lower(),
            attributes={str(k): str(v) for k, v in attributes.items() if v is not None},
            own_text=data.get("ownText") or "",
            text=data.get("text") or "",
            markup_length=int(data.get("markupLength") or 0),
            visible=bool(data.get("visible", True)),
            rect=Rect.from_dict(data.get("rect")),
            children=children,
        )


@dataclass
class DocumentSnapshot:
    """
    A captured document.
    
    Attributes:
        url: Document URL
        title: Document title
        body: Root body element, None for an empty document
        markup: Raw markup sample used for content fingerprints (optional)
    """
    url: str
    title: str = ""
    body: Optional[ElementSnapshot] = None
    markup: str = ""
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "body": self.body.to_dict() if self.body else None,
            "markup": self.markup,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], max_depth: int = 512) -> "DocumentSnapshot":
        body = None
        raw_body = data.get("body")
        if raw_body:
            try:
                body = ElementSnapshot.from_dict(raw_body, max_depth=max_depth)
            except (ValueError, TypeError) as e:
                logger.warning(f"Discarding malformed document body: {e}")
        return cls(
            url=data.get("url") or "",
            title=data.get("title") or "",
            body=body,
            markup=data.get("markup") or "",
        )


class IDocumentProvider(ABC):
    """
    Abstract source of rendered document snapshots.
    
    Implementations wrap whatever renders the page (a live browser tab,
    a static HTML string) and expose it as a DocumentSnapshot.
    """

    @abstractmethod
    async def current_url(self) -> str:
        """
        Get the URL of the document without capturing it.
        
        Used for cache lookups before any tree walk happens.
        
        Returns:
            The document URL
        """
        ...

    @abstractmethod
    async def snapshot(self) -> DocumentSnapshot:
        """
        Capture the rendered element tree.
        
        Returns:
            The captured document
            
        Raises:
            SnapshotError: If the tree could not be captured
        """
        ...
