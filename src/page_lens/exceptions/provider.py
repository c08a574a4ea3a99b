"""
Provider exceptions - failures while obtaining a document snapshot.
"""

from page_lens.exceptions.base import PageLensError


class ProviderError(PageLensError):
    """
    Base exception for document provider errors.
    
    Attributes:
        url: URL of the page being read, when known
    """
    
    def __init__(self, message: str, url: str | None = None, details: dict | None = None):
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url


class SnapshotError(ProviderError):
    """
    Raised when the rendered element tree could not be captured.
    
    Common causes:
    - The page was closed or navigated away mid-capture
    - The serialization script failed in the page context
    - The provider returned data that is not an element tree
    """
    pass
