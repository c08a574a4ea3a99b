"""
Document exceptions - invalid serialized page documents.
"""

from page_lens.exceptions.base import PageLensError


class DocumentFormatError(PageLensError):
    """
    Raised when a serialized PageDocument cannot be decoded.
    
    Only raised when loading documents from outside the pipeline;
    documents built in-process are always well formed.
    """
    pass
