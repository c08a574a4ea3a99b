"""
Interfaces module - Abstract contracts for external collaborators.
"""

from page_lens.interfaces.provider import (
    Rect,
    ElementSnapshot,
    DocumentSnapshot,
    IDocumentProvider,
)

__all__ = [
    "Rect",
    "ElementSnapshot",
    "DocumentSnapshot",
    "IDocumentProvider",
]
