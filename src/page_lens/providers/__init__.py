"""
Providers module - Concrete document snapshot sources.
"""

from page_lens.providers.html_provider import HtmlSnapshotProvider
from page_lens.providers.playwright_provider import (
    PlaywrightSnapshotProvider,
    capture_url,
    open_page,
)

__all__ = [
    "HtmlSnapshotProvider",
    "PlaywrightSnapshotProvider",
    "capture_url",
    "open_page",
]
