"""
Supabase Client Configuration
Async Supabase clients for authentication and profile storage
"""

from typing import Optional

from supabase import AsyncClient, acreate_client

from account_service.exceptions import ConfigurationError
from account_service.utils.config import AccountSettings
from account_service.utils.logger import get_logger

logger = get_logger(__name__)


class SupabaseClient:
    """Holds the anon-key client and, when a service key is set, an admin client"""

    def __init__(self, url: str, key: str, service_key: str = ""):
        self.url = url
        self.key = key
        self.service_key = service_key
        self.client: Optional[AsyncClient] = None
        self.admin_client: Optional[AsyncClient] = None

    @classmethod
    def from_settings(cls, settings: AccountSettings) -> "SupabaseClient":
        return cls(settings.supabase_url, settings.supabase_anon_key, settings.supabase_service_key)

    async def connect(self) -> "SupabaseClient":
        """
        Create the async clients

        Raises:
            ConfigurationError: If URL or anon key is missing
        """
        if not (self.url and self.key):
            raise ConfigurationError("Supabase credentials not configured")

        try:
            self.client = await acreate_client(self.url, self.key)
            if self.service_key:
                self.admin_client = await acreate_client(self.url, self.service_key)
            logger.info("Supabase client initialized", url=self.url, admin=self.admin_client is not None)
        except Exception as e:
            logger.error("Failed to initialize Supabase client", error=str(e))
            raise
        return self

    def get_client(self) -> AsyncClient:
        if self.client is None:
            raise ConfigurationError("Supabase client not connected")
        return self.client

    def get_admin_client(self) -> Optional[AsyncClient]:
        return self.admin_client
