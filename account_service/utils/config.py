"""
Configuration Management
Environment-based configuration for auth/store backends and logging
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from account_service.exceptions import ConfigurationError
from account_service.utils.logger import LOG_FORMATS, get_logger

logger = get_logger(__name__)

AUTH_BACKENDS = ("supabase", "memory")
STORE_BACKENDS = ("supabase", "firestore", "memory")


class AccountSettings(BaseSettings):
    """Account service configuration"""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")

    # Backends
    auth_backend: str = "supabase"
    store_backend: str = "supabase"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_key: str = ""

    # Firestore (None uses the project from application default credentials)
    firestore_project: Optional[str] = None

    # Profiles
    users_collection: str = "users"
    await_anonymous_delete: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"
    logging_config_path: Optional[str] = None

    @field_validator('auth_backend')
    @classmethod
    def validate_auth_backend(cls, v):
        v = v.lower()
        if v not in AUTH_BACKENDS:
            raise ValueError(f"auth_backend must be one of {', '.join(AUTH_BACKENDS)}")
        return v

    @field_validator('store_backend')
    @classmethod
    def validate_store_backend(cls, v):
        v = v.lower()
        if v not in STORE_BACKENDS:
            raise ValueError(f"store_backend must be one of {', '.join(STORE_BACKENDS)}")
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        v = v.lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return v

    @field_validator('users_collection')
    @classmethod
    def validate_users_collection(cls, v):
        if not v.strip():
            raise ValueError('users_collection must not be empty')
        return v.strip()

    def uses_supabase(self) -> bool:
        return "supabase" in (self.auth_backend, self.store_backend)

    def validate_backends(self) -> None:
        """
        Check that the selected backends have what they need

        Raises:
            ConfigurationError: If Supabase is selected without URL and anon key
        """
        if self.uses_supabase() and not (self.supabase_url and self.supabase_anon_key):
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_ANON_KEY are required for the supabase backend"
            )

    def log_config(self):
        """Log configuration (without sensitive data)"""
        logger.info(
            "Account service configuration",
            auth_backend=self.auth_backend,
            store_backend=self.store_backend,
            supabase_url=self.supabase_url or None,
            service_key_configured=bool(self.supabase_service_key),
            users_collection=self.users_collection,
            await_anonymous_delete=self.await_anonymous_delete,
        )


_settings: Optional[AccountSettings] = None


def get_settings() -> AccountSettings:
    """Get the process-wide settings instance"""
    global _settings
    if _settings is None:
        _settings = AccountSettings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment"""
    global _settings
    _settings = None
