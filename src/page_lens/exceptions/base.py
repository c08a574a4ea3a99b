"""
Root page-lens errors.
"""


class PageLensError(Exception):
    """
    Raised at the edges of page-lens: configuration, providers and
    foreign document payloads.
    
    Attributes:
        details: Structured context (path, url, validation errors) that
            the CLI and logs append to the message
    """
    
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}
    
    def __str__(self) -> str:
        message = super().__str__()
        if not self.details:
            return message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{message} ({context})"


class ConfigurationError(PageLensError):
    """
    A config file is missing, unreadable or holds invalid values.
    
    Attributes:
        path: Config file involved, when known
    """
    
    def __init__(self, message: str, path: str | None = None, details: dict | None = None):
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)
        self.path = path
