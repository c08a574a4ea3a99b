"""
Static HTML provider - snapshots parsed from markup with BeautifulSoup.

There is no layout engine here, so visibility comes from markup signals
only (non-rendered tags, the hidden attribute, inline display/visibility)
and no rects are produced.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.element import Declaration, Doctype, ProcessingInstruction

from page_lens.interfaces.provider import DocumentSnapshot, ElementSnapshot, IDocumentProvider
from page_lens.utils.text import normalize_whitespace

logger = logging.getLogger(__name__)


# Tags that never produce a rendered box
NON_RENDERED_TAGS = {
    "head", "script", "style", "template", "noscript",
    "title", "meta", "link", "base",
}

# Tags whose text starts on its own line when flattened
BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
}

VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
}

_HIDDEN_STYLE_RE = re.compile(r"(display\s*:\s*none|visibility\s*:\s*(hidden|collapse))", re.IGNORECASE)

_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


def _flatten_attributes(tag: Tag) -> Dict[str, str]:
    attributes = {}
    for key, value in tag.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        attributes[key.lower()] = "" if value is None else str(value)
    return attributes


def _is_rendered(name: str, attributes: Dict[str, str]) -> bool:
    if name in NON_RENDERED_TAGS:
        return False
    if "hidden" in attributes:
        return False
    if name == "input" and attributes.get("type", "").lower() == "hidden":
        return False
    style = attributes.get("style", "")
    if style and _HIDDEN_STYLE_RE.search(style):
        return False
    return True


def _tag_overhead(name: str, attributes: Dict[str, str]) -> int:
    """Length of the opening and closing tags around an element's content."""
    opening = len(name) + 2 + sum(len(k) + len(v) + 4 for k, v in attributes.items())
    closing = 0 if name in VOID_TAGS else len(name) + 3
    return opening + closing


def _flat_text(tag: Tag) -> str:
    """Rendered text of a whole subtree, without building snapshots for it."""
    pieces: List[str] = []
    stack: List[object] = [tag]
    while stack:
        node = stack.pop()
        if isinstance(node, _NON_TEXT_STRINGS):
            continue
        if isinstance(node, NavigableString):
            pieces.append(str(node))
            continue
        if isinstance(node, str):
            # closes a block element
            pieces.append(node)
            continue
        if not isinstance(node, Tag):
            continue
        name = (node.name or "").lower()
        if not _is_rendered(name, _flatten_attributes(node)):
            continue
        if name in BLOCK_TAGS:
            pieces.append(" ")
            stack.append(" ")
        elif name == "br":
            pieces.append(" ")
        stack.extend(reversed(list(node.children)))
    return normalize_whitespace("".join(pieces))


class HtmlSnapshotProvider(IDocumentProvider):
    """
    Provide snapshots from an HTML string.
    
    Example:
        >>> provider = HtmlSnapshotProvider("<main><h1>Hi</h1></main>", url="https://x.test/")
        >>> snapshot = await provider.snapshot()
        >>> snapshot.body.children[0].tag
        'main'
    """
    
    def __init__(self, html: str, url: str = "about:blank", max_depth: int = 256):
        """
        Initialize the provider.
        
        Args:
            html: Document markup
            url: URL reported for the document
            max_depth: Elements nested deeper than this are dropped
        """
        self.html = html or ""
        self.url = url
        self.max_depth = max_depth
    
    @classmethod
    def from_file(cls, path: Union[str, Path], url: Optional[str] = None, **kwargs) -> "HtmlSnapshotProvider":
        """
        Create a provider for an HTML file on disk.
        
        Args:
            path: File to read
            url: URL to report (defaults to the file URI)
        """
        path = Path(path)
        html = path.read_text(encoding="utf-8", errors="replace")
        return cls(html, url=url or path.resolve().as_uri(), **kwargs)
    
    async def current_url(self) -> str:
        return self.url
    
    async def snapshot(self) -> DocumentSnapshot:
        return self.parse()
    
    def parse(self) -> DocumentSnapshot:
        """Parse the markup synchronously."""
        soup = BeautifulSoup(self.html, "html.parser")
        
        title = ""
        if soup.title is not None:
            title = soup.title.get_text(strip=True)
        
        root = soup.body or soup.html or soup
        body = self._convert(root, depth=0, name_override="body")
        if not body.children and not normalize_whitespace(body.text):
            logger.debug(f"Empty document at {self.url}")
        
        return DocumentSnapshot(url=self.url, title=title, body=body, markup=self.html)
    
    def _convert(self, tag: Tag, depth: int, name_override: Optional[str] = None) -> ElementSnapshot:
        name = name_override or (tag.name or "").lower()
        attributes = _flatten_attributes(tag)
        visible = _is_rendered(name, attributes) if name_override is None else True
        
        children: List[ElementSnapshot] = []
        pieces: List[str] = []
        own: List[str] = []
        markup_length = 0
        
        for child in tag.children:
            if isinstance(child, _NON_TEXT_STRINGS):
                markup_length += len(str(child))
                continue
            if isinstance(child, NavigableString):
                value = str(child)
                markup_length += len(value)
                pieces.append(value)
                if value.strip():
                    own.append(value.strip())
                continue
            if not isinstance(child, Tag):
                continue
            
            child_name = (child.name or "").lower()
            if child_name == "br":
                pieces.append("\n")
            if depth + 1 > self.max_depth:
                # Element dropped, its rendered text kept for the ancestors
                logger.debug(f"Flattening <{child_name}> nested beyond depth {self.max_depth}")
                flat = _flat_text(child)
                markup_length += len(flat) + _tag_overhead(child_name, _flatten_attributes(child))
                if flat:
                    pieces.append(f"\n{flat}\n" if child_name in BLOCK_TAGS else flat)
                continue
            
            snap = self._convert(child, depth + 1)
            children.append(snap)
            markup_length += snap.markup_length + _tag_overhead(child_name, snap.attributes)
            if snap.visible and snap.text:
                if child_name in BLOCK_TAGS:
                    pieces.append(f"\n{snap.text}\n")
                else:
                    pieces.append(snap.text)
        
        text = "".join(pieces).strip() if visible else ""
        
        return ElementSnapshot(
            tag=name,
            attributes=attributes,
            own_text=" ".join(own) if visible else "",
            text=text,
            markup_length=markup_length,
            visible=visible,
            rect=None,
            children=children,
        )
