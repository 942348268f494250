"""
Account data models
"""

from .session import AuthCredential, AuthSession
from .user import AuthMethod, User

__all__ = [
    "AuthCredential",
    "AuthMethod",
    "AuthSession",
    "User",
]
