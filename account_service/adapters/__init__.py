"""
Auth provider and document store adapters

SDK-backed adapters live in their own modules and are imported on demand
so that only the selected backend's library is loaded.
"""

from .base import AuthProvider, Document, DocumentStore, SessionListener
from .memory import InMemoryAuthProvider, InMemoryDocumentStore, InvalidCredentialsError

__all__ = [
    "AuthProvider",
    "Document",
    "DocumentStore",
    "SessionListener",
    "InMemoryAuthProvider",
    "InMemoryDocumentStore",
    "InvalidCredentialsError",
]
