"""
Playwright provider - snapshots of a live, rendered page.

The whole element tree is serialized in one page.evaluate() round trip;
nothing afterwards touches the browser.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError, async_playwright

from page_lens.exceptions import SnapshotError
from page_lens.interfaces.provider import DocumentSnapshot, IDocumentProvider

logger = logging.getLogger(__name__)


# JavaScript that serializes the rendered element tree
SERIALIZE_TREE_JS = '''(maxDepth) => {
    const OPAQUE = new Set(['script', 'style', 'noscript', 'template', 'svg', 'iframe']);

    function isVisible(el) {
        if (el === document.body) return true;
        if (!el.getClientRects().length) return false;
        const style = window.getComputedStyle(el);
        return style.visibility !== 'hidden' && style.visibility !== 'collapse';
    }

    function ownText(el) {
        const parts = [];
        for (const node of el.childNodes) {
            if (node.nodeType === Node.TEXT_NODE) {
                const text = (node.textContent || '').trim();
                if (text) parts.push(text);
            }
        }
        return parts.join(' ');
    }

    function className(el) {
        if (typeof el.className === 'string') return el.className;
        return el.getAttribute('class') || '';
    }

    function serialize(el, depth) {
        const tag = el.tagName.toLowerCase();
        const visible = isVisible(el);
        const opaque = OPAQUE.has(tag);
        const box = visible ? el.getBoundingClientRect() : null;
        const node = {
            tag: tag,
            attributes: {
                id: el.id || '',
                class: className(el),
                role: el.getAttribute('role') || '',
            },
            ownText: visible && !opaque ? ownText(el) : '',
            text: visible && !opaque ? (el.innerText || '') : '',
            markupLength: el.innerHTML ? el.innerHTML.length : 0,
            visible: visible,
            rect: box ? { width: box.width, height: box.height } : null,
            children: [],
        };
        if (visible && !opaque && depth < maxDepth) {
            for (const child of el.children) {
                node.children.push(serialize(child, depth + 1));
            }
        }
        return node;
    }

    return {
        url: window.location.href,
        title: document.title || '',
        body: document.body ? serialize(document.body, 0) : null,
        markup: document.documentElement ? document.documentElement.outerHTML.slice(0, 10000) : '',
    };
}'''


class PlaywrightSnapshotProvider(IDocumentProvider):
    """
    Provide snapshots from a Playwright page.
    
    Example:
        >>> provider = PlaywrightSnapshotProvider(page)
        >>> doc = await analyzer.analyze(provider)
    """
    
    def __init__(
        self,
        page: Page,
        max_depth: int = 64,
        wait_for_load: bool = False,
        timeout_ms: int = 30000,
    ):
        """
        Initialize the provider.
        
        Args:
            page: Playwright page showing the document
            max_depth: Depth cap for the in-page serializer
            wait_for_load: Wait for network idle before capturing
            timeout_ms: Load-state timeout
        """
        self._page = page
        self.max_depth = max_depth
        self.wait_for_load = wait_for_load
        self.timeout_ms = timeout_ms
    
    async def current_url(self) -> str:
        return self._page.url
    
    async def snapshot(self) -> DocumentSnapshot:
        if self.wait_for_load:
            try:
                await self._page.wait_for_load_state("networkidle", timeout=self.timeout_ms)
            except PlaywrightTimeoutError:
                logger.warning(f"Network did not become idle within {self.timeout_ms}ms, capturing anyway")
        
        try:
            raw: Any = await self._page.evaluate(SERIALIZE_TREE_JS, self.max_depth)
        except PlaywrightError as e:
            raise SnapshotError("Failed to serialize element tree", url=self._page.url) from e
        
        if not isinstance(raw, dict):
            raise SnapshotError(
                "Serializer returned unexpected data",
                url=self._page.url,
                details={"type": type(raw).__name__},
            )
        
        # +1: the body itself sits at depth 0
        return DocumentSnapshot.from_dict(raw, max_depth=self.max_depth + 1)


@asynccontextmanager
async def open_page(
    url: str,
    headless: bool = True,
    timeout_ms: int = 30000,
) -> AsyncIterator[Page]:
    """
    Launch Chromium, navigate to url and yield the page.
    
    Args:
        url: Page to open
        headless: Run without a visible window
        timeout_ms: Navigation timeout
        
    Raises:
        SnapshotError: If navigation fails
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            try:
                await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            except PlaywrightError as e:
                raise SnapshotError(f"Could not open {url}", url=url) from e
            yield page
        finally:
            await browser.close()


async def capture_url(
    url: str,
    headless: bool = True,
    timeout_ms: int = 30000,
    max_depth: int = 64,
    wait_for_load: bool = True,
) -> DocumentSnapshot:
    """
    Open a URL in a fresh browser and capture one snapshot.
    
    Returns:
        The captured document
    """
    async with open_page(url, headless=headless, timeout_ms=timeout_ms) as page:
        provider = PlaywrightSnapshotProvider(
            page,
            max_depth=max_depth,
            wait_for_load=wait_for_load,
            timeout_ms=timeout_ms,
        )
        return await provider.snapshot()
