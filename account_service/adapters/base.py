"""
Collaborator Interfaces
Contracts for the authentication provider and the document store
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel

from account_service.models.session import AuthSession

ModelT = TypeVar("ModelT", bound=BaseModel)

SessionListener = Callable[[Optional[AuthSession]], None]
"""Called with the new session (or None) whenever the auth state changes"""


@dataclass
class Document:
    """A record returned by a document store query"""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_object(self, model: Type[ModelT]) -> ModelT:
        """Deserialize the document data into ``model``"""
        return model.model_validate(self.data)


class AuthProvider(Protocol):
    """Managed authentication provider.

    Implementations:
        - SupabaseAuthProvider (adapters/supabase_auth.py)
        - InMemoryAuthProvider (adapters/memory.py)
    """

    @property
    def current_session(self) -> Optional[AuthSession]:
        """Identity currently signed in, or None"""
        ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Verify credentials and make the identity current.

        Raises the provider's own error on rejected credentials.
        """
        ...

    async def sign_in_anonymously(self) -> AuthSession:
        """Create an anonymous identity and make it current"""
        ...

    async def link_with_password(self, email: str, password: str) -> AuthSession:
        """Attach an e-mail/password credential to the current identity"""
        ...

    async def send_password_reset_email(self, email: str) -> None:
        ...

    def add_session_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for auth state changes.

        Returns:
            Callable that removes the listener again
        """
        ...

    async def sign_out(self) -> None:
        ...

    async def delete_user(self, uid: str) -> None:
        """Delete an identity. Deleting the current identity ends the session."""
        ...

    def close(self) -> None:
        """Release listeners the provider registered with its SDK"""
        ...


class DocumentStore(Protocol):
    """Managed document database.

    Implementations:
        - SupabaseDocumentStore (adapters/supabase_store.py)
        - FirestoreDocumentStore (adapters/firestore_store.py)
        - InMemoryDocumentStore (adapters/memory.py)
    """

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        """All documents in ``collection`` whose ``field`` equals ``value``"""
        ...

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert a document and return its generated key"""
        ...

    async def delete_by_key(self, collection: str, key: str) -> None:
        ...
