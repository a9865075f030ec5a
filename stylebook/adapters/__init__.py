"""
Adapters layer - External integrations (document store).
"""

from .http_store import HttpDocumentStore
from .mock_store import MockDocumentStore

__all__ = ["HttpDocumentStore", "MockDocumentStore"]
