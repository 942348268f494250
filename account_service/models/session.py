"""
Session Models
Provider-neutral view of the authenticated identity
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class AuthSession:
    """Current authenticated identity as reported by the auth provider"""
    uid: str
    is_anonymous: bool = False
    email: Optional[str] = None


class AuthCredential(BaseModel):
    """Third-party sign-in credential handed over by the client"""
    provider: str = Field(default="google", description="Identity provider name")
    id_token: Optional[str] = None
    access_token: Optional[str] = None
