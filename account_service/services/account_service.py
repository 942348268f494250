"""
Account Service
Bridges the application's User model to the auth provider and the profile store
"""

import asyncio
from typing import Optional, Set

from account_service.adapters.base import AuthProvider, DocumentStore
from account_service.exceptions import NotFoundError, PreconditionFailedError
from account_service.models.session import AuthCredential, AuthSession
from account_service.models.user import AuthMethod, User
from account_service.services.subscription import UserSubscription
from account_service.utils.logger import get_audit_logger, get_logger, performance_timer

logger = get_logger(__name__)

USER_COLLECTION = "users"
USER_ID_FIELD = "userId"
LINK_ACCOUNT_TRACE = "linkAccount"
SAVE_USER_DATA_TRACE = "saveUserData"
COMPONENT = "account_service"


class AccountService:
    """Account operations for the signed-in user.

    Holds no state of its own: the session lives in the auth provider and
    profiles live in the document store, one document per user located by
    its ``userId`` field.
    """

    def __init__(
        self,
        auth: AuthProvider,
        store: DocumentStore,
        users_collection: str = USER_COLLECTION,
        await_anonymous_delete: bool = True,
    ):
        self.auth = auth
        self.store = store
        self.users_collection = users_collection
        self.await_anonymous_delete = await_anonymous_delete
        self.audit = get_audit_logger()
        self._background_tasks: Set[asyncio.Task] = set()

    # ===== SESSION =====

    @property
    def current_user_id(self) -> str:
        """Uid of the current session, empty string when signed out"""
        session = self.auth.current_session
        return session.uid if session else ""

    @property
    def current_user_data(self) -> User:
        return User(user_id=self.current_user_id)

    @property
    def has_user(self) -> bool:
        """True for a signed-in, non-anonymous session"""
        session = self.auth.current_session
        return session is not None and not session.is_anonymous

    def current_user(self) -> UserSubscription:
        """Subscribe to User snapshots of the session state"""
        return UserSubscription(self.auth)

    def close(self) -> None:
        """Release the auth provider's own SDK listeners"""
        self.auth.close()
        logger.debug("Account service closed")

    def _require_session(self, operation: str) -> AuthSession:
        session = self.auth.current_session
        if session is None:
            raise PreconditionFailedError(f"{operation} requires a signed-in user")
        return session

    # ===== AUTHENTICATION =====

    async def authenticate(self, email: str, password: str) -> None:
        """
        Sign in with e-mail and password and make sure a profile exists

        Args:
            email: Login e-mail
            password: Password

        Raises:
            Provider error on rejected credentials
        """
        try:
            await self.auth.sign_in_with_password(email, password)
        except Exception as e:
            logger.warning("Authentication failed", email=email, error=str(e))
            raise

        new_user = User(
            user_id=self.current_user_id,
            auth_method=AuthMethod.MAIL,
            is_anonymous=False,
            login=email,
        )
        await self.save_current_user_data(new_user)
        self.audit.log_user_action(self.current_user_id, "authenticate", {"auth_method": AuthMethod.MAIL.value})

    async def send_recovery_email(self, email: str) -> None:
        await self.auth.send_password_reset_email(email)
        logger.info("Recovery email sent", email=email)

    async def link_account(self, email: str, password: str) -> None:
        """
        Create an anonymous identity, attach the e-mail credential to it and
        create a mail profile. Leaves the new identity signed in.
        """
        with performance_timer(LINK_ACCOUNT_TRACE, COMPONENT):
            await self.auth.sign_in_anonymously()
            self._require_session("link_account")
            await self.auth.link_with_password(email, password)
            await self.create_user_from_mail(email)

        self.audit.log_user_action(self.current_user_id, "link_account")

    # ===== PROFILE CREATION =====

    async def create_user_from_credentials(self, credential: AuthCredential) -> None:
        """Store a google profile for the current session; the credential's claims are not read"""
        logger.debug("Creating profile from credential", provider=credential.provider)
        new_user = User(
            user_id=self.current_user_id,
            auth_method=AuthMethod.GOOGLE,
            is_anonymous=False,
        )
        await self.save_current_user_data(new_user)

    async def create_user_from_mail(self, email: str) -> None:
        new_user = User(
            user_id=self.current_user_id,
            auth_method=AuthMethod.MAIL,
            is_anonymous=False,
            login=email,
        )
        await self.save_current_user_data(new_user)

    async def create_user_from_id(self, user_id: str) -> None:
        """
        Copy an existing profile to the current session

        Args:
            user_id: ``userId`` of the stored profile to copy

        Raises:
            NotFoundError: If no profile has that ``userId``
        """
        documents = await self.store.query_by_field(self.users_collection, USER_ID_FIELD, user_id)
        if not documents:
            raise NotFoundError(self.users_collection, USER_ID_FIELD, user_id)

        user = documents[0].to_object(User)
        await self.save_current_user_data(user)

    # ===== ACCOUNT REMOVAL =====

    async def delete_account(self) -> None:
        """
        Delete the profile document, then the identity.

        The profile is not restored if deleting the identity fails.
        """
        session = self._require_session("delete_account")
        await self.delete_current_user_data(session.uid)
        try:
            await self.auth.delete_user(session.uid)
        except Exception as e:
            logger.error("Identity deletion failed after profile removal", user_id=session.uid, error=str(e))
            raise
        self.audit.log_user_action(session.uid, "delete_account")

    async def sign_out(self) -> None:
        """
        Sign out; anonymous identities are deleted first

        The session ends even when deleting the anonymous identity fails;
        that failure is raised after signing out.
        """
        session = self._require_session("sign_out")
        try:
            if session.is_anonymous:
                if self.await_anonymous_delete:
                    await self.auth.delete_user(session.uid)
                else:
                    self._run_in_background(self.auth.delete_user(session.uid), session.uid)
        finally:
            await self.auth.sign_out()
        self.audit.log_user_action(session.uid, "sign_out", {"anonymous": session.is_anonymous})

    def _run_in_background(self, coro, user_id: str) -> None:
        task = asyncio.ensure_future(coro)
        self._background_tasks.add(task)

        def done(t: asyncio.Task):
            self._background_tasks.discard(t)
            if not t.cancelled() and t.exception() is not None:
                logger.error("Anonymous identity deletion failed", user_id=user_id, error=str(t.exception()))

        task.add_done_callback(done)

    async def wait_for_background_tasks(self) -> None:
        """Wait for fire-and-forget deletions started by sign_out"""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    # ===== PROFILE STORAGE =====

    async def get_current_user_data(self) -> User:
        """Same as ``current_user_data``; the store is not queried"""
        return self.current_user_data

    async def save_current_user_data(self, user: User) -> Optional[str]:
        """
        Store ``user`` as the current session's profile if it has none yet

        An existing profile is left as it is, changes in ``user`` are not
        written. Concurrent calls for the same user can both insert.

        Args:
            user: Profile to store; its user_id is replaced by the session uid

        Returns:
            str: Key of the new document, or None if a profile already existed

        Raises:
            PreconditionFailedError: If no user is signed in
        """
        session = self._require_session("save_current_user_data")

        with performance_timer(SAVE_USER_DATA_TRACE, COMPONENT):
            user_with_id = user.model_copy(update={"user_id": session.uid})
            existing = await self.store.query_by_field(self.users_collection, USER_ID_FIELD, session.uid)
            if existing:
                logger.debug("Profile already exists, not updated", user_id=session.uid)
                return None

            key = await self.store.add(self.users_collection, user_with_id.to_document())

        logger.info("Profile created", user_id=session.uid, auth_method=user_with_id.auth_method.value)
        self.audit.log_user_action(session.uid, "create_profile", {"document_id": key})
        return key

    async def delete_current_user_data(self, user_id: str) -> None:
        """
        Delete the profile whose ``userId`` is ``user_id``

        Raises:
            NotFoundError: If no such profile exists
        """
        documents = await self.store.query_by_field(self.users_collection, USER_ID_FIELD, user_id)
        if not documents:
            raise NotFoundError(self.users_collection, USER_ID_FIELD, user_id)

        await self.store.delete_by_key(self.users_collection, documents[0].id)
        logger.info("Profile deleted", user_id=user_id, document_id=documents[0].id)
