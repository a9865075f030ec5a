"""
Domain-specific exception hierarchy for the stylebook application.
"""


class StylebookError(Exception):
    """Base class for all application-level errors."""


class DocumentStoreError(StylebookError):
    """Raised when the document store cannot be read or written."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when an update targets a document that does not exist."""


class ServiceNotFoundError(StylebookError):
    """Raised when a provider does not offer the requested service."""
