"""
Service Factory
Builds an AccountService from settings
"""

from typing import Optional, Tuple

from account_service.adapters.base import AuthProvider, DocumentStore
from account_service.adapters.memory import InMemoryAuthProvider, InMemoryDocumentStore
from account_service.services.account_service import AccountService
from account_service.utils.config import AccountSettings, get_settings
from account_service.utils.logger import get_logger, init_logging
from account_service.utils.supabase_client import SupabaseClient

logger = get_logger(__name__)


async def build_backends(settings: AccountSettings) -> Tuple[AuthProvider, DocumentStore]:
    """
    Create the auth provider and document store selected in settings

    Raises:
        ConfigurationError: If the selected backends are not configured
    """
    settings.validate_backends()

    supabase = None
    if settings.uses_supabase():
        supabase = await SupabaseClient.from_settings(settings).connect()

    if settings.auth_backend == "supabase":
        from account_service.adapters.supabase_auth import SupabaseAuthProvider
        auth = SupabaseAuthProvider(supabase.get_client(), supabase.get_admin_client())
    else:
        auth = InMemoryAuthProvider()

    if settings.store_backend == "supabase":
        from account_service.adapters.supabase_store import SupabaseDocumentStore
        store = SupabaseDocumentStore(supabase.get_client())
    elif settings.store_backend == "firestore":
        from google.cloud.firestore import AsyncClient
        from account_service.adapters.firestore_store import FirestoreDocumentStore
        store = FirestoreDocumentStore(AsyncClient(project=settings.firestore_project))
    else:
        store = InMemoryDocumentStore()

    return auth, store


async def create_account_service(
    settings: Optional[AccountSettings] = None,
    configure_logging: bool = True,
) -> AccountService:
    """
    Create an AccountService wired to the configured backends

    Args:
        settings: Settings to use, defaults to the environment
        configure_logging: Apply logging settings before building

    Returns:
        AccountService
    """
    settings = settings or get_settings()
    if configure_logging:
        init_logging(settings.log_level, settings.log_format, settings.logging_config_path)
    settings.log_config()

    try:
        auth, store = await build_backends(settings)
    except Exception as e:
        logger.error("Failed to build account service backends", error=str(e))
        raise

    logger.info("Account service ready", auth=type(auth).__name__, store=type(store).__name__)
    return AccountService(
        auth,
        store,
        users_collection=settings.users_collection,
        await_anonymous_delete=settings.await_anonymous_delete,
    )
