"""
Session Subscription
Stream of User snapshots following the auth provider's session state
"""

import asyncio
from typing import Callable, Optional

from account_service.adapters.base import AuthProvider
from account_service.exceptions import PreconditionFailedError
from account_service.models.session import AuthSession
from account_service.models.user import User
from account_service.utils.logger import get_logger

logger = get_logger(__name__)

_CLOSED = object()


def snapshot_user(session: Optional[AuthSession]) -> User:
    """User value for a session, or the default User when signed out"""
    if session is None:
        return User()
    return User(user_id=session.uid, is_anonymous=session.is_anonymous)


class UserSubscription:
    """Async iterator of User snapshots.

    Nothing is registered until the subscription starts (``start()``,
    ``async with`` or the first ``__anext__``). Starting emits the current
    session once and then one snapshot per auth state change. ``close()``
    deregisters the provider listener; cancelling a task blocked on the
    iterator closes it as well.

    Usage:
        async with service.current_user() as users:
            async for user in users:
                ...
    """

    def __init__(self, auth: AuthProvider):
        self._auth = auth
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._remove_listener: Optional[Callable[[], None]] = None
        self._closed = False

    @property
    def active(self) -> bool:
        return self._remove_listener is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> Callable[[], None]:
        """
        Register with the auth provider

        Returns:
            Cancellation handle; calling it closes the subscription
        """
        if self._closed:
            raise PreconditionFailedError("Subscription already closed")
        if self._remove_listener is None:
            self._queue.put_nowait(snapshot_user(self._auth.current_session))
            self._remove_listener = self._auth.add_session_listener(self._on_session_change)
            logger.debug("Session listener registered")
        return self.close

    def close(self) -> None:
        """Deregister the listener and end iteration. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
            logger.debug("Session listener removed")
        self._queue.put_nowait(_CLOSED)

    async def aclose(self) -> None:
        self.close()

    def _on_session_change(self, session: Optional[AuthSession]) -> None:
        if not self._closed:
            self._queue.put_nowait(snapshot_user(session))

    def __aiter__(self) -> "UserSubscription":
        return self

    async def __anext__(self) -> User:
        if self._closed:
            raise StopAsyncIteration
        self.start()
        try:
            item = await self._queue.get()
        except asyncio.CancelledError:
            self.close()
            raise
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    async def __aenter__(self) -> "UserSubscription":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
