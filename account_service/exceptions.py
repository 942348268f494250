"""Exceptions raised by the account service"""

from typing import Any, Optional


class AccountServiceError(Exception):
    """Base exception for the account service"""
    pass


class NotFoundError(AccountServiceError):
    """An expected document is missing from the store"""

    def __init__(self, collection: str, field: str, value: Any, message: Optional[str] = None):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(message or f"No document in '{collection}' with {field} == {value!r}")


class PreconditionFailedError(AccountServiceError):
    """Operation requires state that is not present, usually a signed-in session"""
    pass


class ConfigurationError(AccountServiceError):
    """Settings are incomplete for the selected backend"""
    pass
