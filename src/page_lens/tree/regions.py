"""
Region detection - main content, navigation and supplementary areas.

Works on an index of the raw snapshot built in one iterative pass, so
content scores (which need descendant paragraph/heading/link counts)
are cheap to evaluate for every candidate.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from page_lens.interfaces.provider import ElementSnapshot

logger = logging.getLogger(__name__)


BODY_LOCATOR = "//body"

# Whole subtrees that never hold page content
SKIPPED_TAGS = {
    "script", "style", "noscript", "svg", "iframe", "template",
    "object", "embed", "canvas", "audio", "video", "head", "meta", "link",
}

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}

SEMANTIC_MAIN_TAGS = {"main", "article"}

# Conventional main-content identifiers, tried in order
MAIN_CONTENT_SELECTORS = [
    "#content", "#main-content", "#main", "#article",
    "#primary", "#page-content", ".content", ".main",
]

DENSITY_CANDIDATE_TAGS = {"div", "section", "article"}

NAVIGATION_TOKENS = ("nav", "menu")
SUPPLEMENTARY_TOKENS = ("sidebar", "aside")

# Nodes deeper than this are not indexed (guards pathological snapshots)
INDEX_DEPTH_LIMIT = 1024

LINK_HEAVY_THRESHOLD = 10


@dataclass
class ElementInfo:
    """Index entry for one snapshot element."""
    element: ElementSnapshot
    locator: str
    parent: Optional["ElementInfo"]
    order: int
    rendered: bool
    paragraphs: int = 0
    headings: int = 0
    links: int = 0
    
    @property
    def tag(self) -> str:
        return self.element.tag
    
    def is_inside(self, other: "ElementInfo") -> bool:
        """True if this element is other or one of its descendants."""
        node: Optional[ElementInfo] = self
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False


def child_locator(parent_locator: str, tag: str, position: int) -> str:
    """Locator of the position-th (1-based) same-tag child."""
    if parent_locator == BODY_LOCATOR:
        return f"//{tag}[{position}]"
    return f"{parent_locator}/{tag}[{position}]"


class SnapshotIndex:
    """
    Document-order index of a snapshot's elements.
    
    Records locators, parent links, effective visibility (an element is
    rendered only if every ancestor is) and descendant counts of
    paragraphs, headings and links.
    """
    
    def __init__(self, body: ElementSnapshot):
        self.root: Optional[ElementInfo] = None
        self.infos: List[ElementInfo] = []
        self._by_id: Dict[int, ElementInfo] = {}
        self._build(body)
    
    def _build(self, body: ElementSnapshot) -> None:
        stack: List[Tuple[ElementSnapshot, Optional[ElementInfo], str, int]] = [
            (body, None, BODY_LOCATOR, 0)
        ]
        while stack:
            element, parent, locator, depth = stack.pop()
            if id(element) in self._by_id:
                logger.warning(f"Element reachable twice at {locator}, skipping repeat")
                continue
            
            rendered = (
                bool(element.visible)
                and (parent is None or parent.rendered)
                and element.tag not in SKIPPED_TAGS
            )
            info = ElementInfo(
                element=element,
                locator=locator,
                parent=parent,
                order=len(self.infos),
                rendered=rendered,
            )
            self.infos.append(info)
            self._by_id[id(element)] = info
            if parent is None:
                self.root = info
            
            if depth >= INDEX_DEPTH_LIMIT:
                continue
            
            positions: Dict[str, int] = {}
            pending = []
            for child in element.children:
                if not isinstance(child, ElementSnapshot):
                    logger.warning(f"Ignoring non-element child under {locator}")
                    continue
                positions[child.tag] = positions.get(child.tag, 0) + 1
                pending.append((child, info, child_locator(locator, child.tag, positions[child.tag]), depth + 1))
            stack.extend(reversed(pending))
        
        # Children always follow their parent in document order
        for info in reversed(self.infos):
            parent = info.parent
            if parent is None:
                continue
            parent.paragraphs += info.paragraphs + (1 if info.tag == "p" else 0)
            parent.headings += info.headings + (1 if info.tag in HEADING_TAGS else 0)
            parent.links += info.links + (1 if info.tag == "a" else 0)
    
    def get(self, element: ElementSnapshot) -> Optional[ElementInfo]:
        return self._by_id.get(id(element))
    
    def rendered(self) -> Iterator[ElementInfo]:
        """Rendered elements in document order, body excluded."""
        for info in self.infos:
            if info.rendered and info is not self.root:
                yield info
    
    def count_rendered(self, tags) -> Dict[str, int]:
        counts = {tag: 0 for tag in tags}
        for info in self.rendered():
            if info.tag in counts:
                counts[info.tag] += 1
        return counts
    
    def content_score(self, info: ElementInfo) -> float:
        """
        Content score of an element.
        
        100 * text/markup ratio + 10 per paragraph + 5 per heading,
        halved when the element holds more than 10 links.
        """
        text_length = len(info.element.text or "")
        markup_length = info.element.markup_length
        if not text_length or not markup_length:
            return 0.0
        density = text_length / markup_length
        score = density * 100 + info.paragraphs * 10 + info.headings * 5
        if info.links > LINK_HEAVY_THRESHOLD:
            score *= 0.5
        return score


def _attribute_contains(element: ElementSnapshot, tokens) -> bool:
    id_value = element.element_id.lower()
    class_value = (element.attributes.get("class") or "").lower()
    return any(token in id_value or token in class_value for token in tokens)


def _matches_selector(element: ElementSnapshot, selector: str) -> bool:
    if selector.startswith("#"):
        return element.element_id == selector[1:]
    if selector.startswith("."):
        return selector[1:] in element.class_list
    return element.tag == selector


def detect_main_region(
    index: SnapshotIndex,
    threshold: float = 50.0,
    min_candidate_chars: int = 100,
) -> Tuple[ElementInfo, float]:
    """
    Find the main-content region.
    
    Tried in order, first qualifying candidate wins:
    1. main/article/role=main elements scoring above threshold
    2. conventional identifiers (#content, .main, ...) scoring above threshold
    3. the visible div/section/article with the best score among those
       holding more than min_candidate_chars of text
    Falls back to the body.
    
    Returns:
        (region, content score)
    """
    for info in index.rendered():
        element = info.element
        if element.tag in SEMANTIC_MAIN_TAGS or element.role == "main":
            score = index.content_score(info)
            if score > threshold:
                logger.debug(f"Main content (semantic): {info.locator} score={score:.1f}")
                return info, score
    
    for selector in MAIN_CONTENT_SELECTORS:
        match = next((i for i in index.rendered() if _matches_selector(i.element, selector)), None)
        if match is None:
            continue
        score = index.content_score(match)
        if score > threshold:
            logger.debug(f"Main content ({selector}): {match.locator} score={score:.1f}")
            return match, score
    
    best: Optional[ElementInfo] = None
    best_score = 0.0
    for info in index.rendered():
        if info.tag not in DENSITY_CANDIDATE_TAGS:
            continue
        if len(info.element.text or "") <= min_candidate_chars:
            continue
        score = index.content_score(info)
        if best is None or score > best_score:
            best, best_score = info, score
    
    if best is not None:
        logger.debug(f"Main content (density): {best.locator} score={best_score:.1f}")
        return best, best_score
    
    root = index.root
    return root, index.content_score(root)


def _outermost(candidates: List[ElementInfo]) -> List[ElementInfo]:
    selected: List[ElementInfo] = []
    for info in sorted(candidates, key=lambda i: i.order):
        if any(info.is_inside(chosen) for chosen in selected):
            continue
        selected.append(info)
    return selected


def detect_navigation(index: SnapshotIndex, main: ElementInfo) -> List[ElementInfo]:
    """
    Find navigation regions.
    
    nav elements, role=navigation, or ids/classes mentioning nav/menu.
    Regions wrapping the main region are ignored; nested regions collapse
    into the outermost one.
    """
    candidates = []
    for info in index.rendered():
        element = info.element
        is_nav = (
            element.tag == "nav"
            or element.role == "navigation"
            or _attribute_contains(element, NAVIGATION_TOKENS)
        )
        if not is_nav or main.is_inside(info):
            continue
        candidates.append(info)
    return _outermost(candidates)


def detect_supplementary(
    index: SnapshotIndex,
    main: ElementInfo,
    navigation: List[ElementInfo],
) -> List[ElementInfo]:
    """
    Find supplementary regions outside the main region.
    
    aside elements, role=complementary, or ids/classes mentioning
    sidebar/aside. Candidates inside the main region or a navigation
    region are dropped.
    """
    candidates = []
    for info in index.rendered():
        element = info.element
        is_supplementary = (
            element.tag == "aside"
            or element.role == "complementary"
            or _attribute_contains(element, SUPPLEMENTARY_TOKENS)
        )
        if not is_supplementary:
            continue
        if info.is_inside(main) or main.is_inside(info):
            continue
        if any(info.is_inside(nav) for nav in navigation):
            continue
        candidates.append(info)
    return _outermost(candidates)
