"""
Supabase Auth Adapter
AuthProvider backed by Supabase Auth (GoTrue)
"""

from typing import Any, Callable, Optional

from supabase import AsyncClient

from account_service.adapters.base import SessionListener
from account_service.exceptions import ConfigurationError, PreconditionFailedError
from account_service.models.session import AuthSession
from account_service.utils.logger import get_logger

logger = get_logger(__name__)


def to_auth_session(user: Any) -> Optional[AuthSession]:
    """Map a GoTrue user object to an AuthSession"""
    if user is None:
        return None
    return AuthSession(
        uid=str(user.id),
        is_anonymous=bool(getattr(user, "is_anonymous", False)),
        email=getattr(user, "email", None) or None,
    )


def _session_user(session: Any) -> Any:
    return session.user if session is not None else None


class SupabaseAuthProvider:
    """AuthProvider using the Supabase async client.

    The latest session is cached from call results and auth state events so
    ``current_session`` can be read without a round-trip. Deleting users
    goes through ``admin_client``, which must use the service-role key.
    """

    def __init__(self, client: AsyncClient, admin_client: Optional[AsyncClient] = None):
        self._client = client
        self._admin_client = admin_client
        self._session: Optional[AuthSession] = None
        self._state_subscription = client.auth.on_auth_state_change(self._on_auth_state_change)

    def _on_auth_state_change(self, event, session) -> None:
        self._session = to_auth_session(_session_user(session))
        logger.debug("Auth state changed", auth_event=str(event), uid=self.current_uid)

    @property
    def current_session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def current_uid(self) -> Optional[str]:
        return self._session.uid if self._session else None

    def _session_from_response(self, response: Any, operation: str) -> AuthSession:
        session = to_auth_session(getattr(response, "user", None))
        if session is None:
            raise PreconditionFailedError(f"Supabase returned no user for {operation}")
        self._session = session
        return session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = await self._client.auth.sign_in_with_password({
            "email": email,
            "password": password
        })
        return self._session_from_response(response, "sign_in_with_password")

    async def sign_in_anonymously(self) -> AuthSession:
        response = await self._client.auth.sign_in_anonymously()
        return self._session_from_response(response, "sign_in_anonymously")

    async def link_with_password(self, email: str, password: str) -> AuthSession:
        # Updating an anonymous user with an e-mail identity converts it in place
        response = await self._client.auth.update_user({
            "email": email,
            "password": password
        })
        return self._session_from_response(response, "update_user")

    async def send_password_reset_email(self, email: str) -> None:
        await self._client.auth.reset_password_for_email(email)
        logger.info("Password reset email requested", email=email)

    def add_session_listener(self, listener: SessionListener) -> Callable[[], None]:
        def callback(event, session):
            listener(to_auth_session(_session_user(session)))

        subscription = self._client.auth.on_auth_state_change(callback)
        return subscription.unsubscribe

    async def sign_out(self) -> None:
        await self._client.auth.sign_out()
        self._session = None

    async def delete_user(self, uid: str) -> None:
        if self._admin_client is None:
            raise ConfigurationError("SUPABASE_SERVICE_KEY is required to delete users")

        await self._admin_client.auth.admin.delete_user(uid)
        logger.info("Supabase user deleted", uid=uid)

        if self.current_uid == uid:
            await self._client.auth.sign_out()
            self._session = None

    def close(self) -> None:
        """Stop tracking auth state events"""
        self._state_subscription.unsubscribe()
