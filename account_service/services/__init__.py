"""
Account services
"""

from .account_service import AccountService
from .subscription import UserSubscription, snapshot_user

__all__ = [
    "AccountService",
    "UserSubscription",
    "snapshot_user",
]
