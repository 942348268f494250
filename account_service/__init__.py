"""
Account Service

Bridges an application's user model to a managed authentication provider
and a managed document store.
"""

from .exceptions import AccountServiceError, ConfigurationError, NotFoundError, PreconditionFailedError
from .factory import create_account_service
from .models import AuthCredential, AuthMethod, AuthSession, User
from .services import AccountService, UserSubscription

__all__ = [
    "AccountService",
    "UserSubscription",
    "create_account_service",
    "AuthCredential",
    "AuthMethod",
    "AuthSession",
    "User",
    "AccountServiceError",
    "ConfigurationError",
    "NotFoundError",
    "PreconditionFailedError",
]

__version__ = "1.0.0"
