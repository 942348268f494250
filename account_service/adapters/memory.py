"""
In-Memory Adapters
Process-local auth provider and document store for development mode and tests
"""

import asyncio
import uuid
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from account_service.adapters.base import Document, SessionListener
from account_service.models.session import AuthSession
from account_service.utils.logger import get_logger

logger = get_logger(__name__)


class InvalidCredentialsError(Exception):
    """Raised by the in-memory provider for unknown accounts or wrong passwords"""
    pass


@dataclass
class _Identity:
    uid: str
    is_anonymous: bool
    email: Optional[str] = None
    password: Optional[str] = None

    def to_session(self) -> AuthSession:
        return AuthSession(uid=self.uid, is_anonymous=self.is_anonymous, email=self.email)


class InMemoryAuthProvider:
    """Auth provider keeping identities in a dict.

    Listeners are called synchronously on every state change, like the
    provider SDKs do from their own event dispatch.
    """

    def __init__(self):
        self._identities: Dict[str, _Identity] = {}
        self._current: Optional[_Identity] = None
        self._listeners: List[SessionListener] = []
        self.sent_reset_emails: List[str] = []

    @property
    def current_session(self) -> Optional[AuthSession]:
        return self._current.to_session() if self._current else None

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def register(self, email: str, password: str) -> str:
        """Create a named identity without signing in. Returns its uid."""
        if self._find_by_email(email):
            raise InvalidCredentialsError(f"Email already registered: {email}")
        identity = _Identity(uid=uuid.uuid4().hex, is_anonymous=False, email=email, password=password)
        self._identities[identity.uid] = identity
        return identity.uid

    def has_identity(self, uid: str) -> bool:
        return uid in self._identities

    def refresh_token(self) -> None:
        """Simulate a token refresh event for the current session"""
        self._notify()

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        await asyncio.sleep(0)
        identity = self._find_by_email(email)
        if identity is None or identity.password != password:
            raise InvalidCredentialsError("Invalid login credentials")
        self._set_current(identity)
        return identity.to_session()

    async def sign_in_anonymously(self) -> AuthSession:
        await asyncio.sleep(0)
        identity = _Identity(uid=uuid.uuid4().hex, is_anonymous=True)
        self._identities[identity.uid] = identity
        self._set_current(identity)
        return identity.to_session()

    async def link_with_password(self, email: str, password: str) -> AuthSession:
        await asyncio.sleep(0)
        if self._current is None:
            raise InvalidCredentialsError("No user signed in")
        if self._find_by_email(email):
            raise InvalidCredentialsError(f"Email already registered: {email}")
        self._current.email = email
        self._current.password = password
        self._current.is_anonymous = False
        self._notify()
        return self._current.to_session()

    async def send_password_reset_email(self, email: str) -> None:
        await asyncio.sleep(0)
        if self._find_by_email(email) is None:
            raise InvalidCredentialsError(f"No user registered with {email}")
        self.sent_reset_emails.append(email)

    def add_session_listener(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def sign_out(self) -> None:
        await asyncio.sleep(0)
        self._set_current(None)

    async def delete_user(self, uid: str) -> None:
        await asyncio.sleep(0)
        if uid not in self._identities:
            raise InvalidCredentialsError(f"User not found: {uid}")
        del self._identities[uid]
        if self._current is not None and self._current.uid == uid:
            self._set_current(None)

    def close(self) -> None:
        pass

    def _find_by_email(self, email: str) -> Optional[_Identity]:
        for identity in self._identities.values():
            if identity.email == email:
                return identity
        return None

    def _set_current(self, identity: Optional[_Identity]) -> None:
        self._current = identity
        self._notify()

    def _notify(self) -> None:
        session = self.current_session
        for listener in list(self._listeners):
            listener(session)


class InMemoryDocumentStore:
    """Document store keeping collections as dicts of key -> data.

    Every call yields to the event loop before touching the data, so
    concurrent callers interleave between a query and a later write.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def documents(self, collection: str) -> List[Document]:
        """Snapshot of every document in ``collection``"""
        return [Document(id=key, data=deepcopy(data))
                for key, data in self._collections.get(collection, {}).items()]

    async def query_by_field(self, collection: str, field: str, value: Any) -> List[Document]:
        await asyncio.sleep(0)
        return [doc for doc in self.documents(collection) if doc.data.get(field) == value]

    async def add(self, collection: str, data: Dict[str, Any]) -> str:
        await asyncio.sleep(0)
        key = uuid.uuid4().hex
        self._collections.setdefault(collection, {})[key] = deepcopy(data)
        logger.debug("Document added", collection=collection, key=key)
        return key

    async def delete_by_key(self, collection: str, key: str) -> None:
        await asyncio.sleep(0)
        self._collections.get(collection, {}).pop(key, None)
