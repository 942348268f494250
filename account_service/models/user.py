"""
User Models
Profile model stored in the users collection
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthMethod(str, Enum):
    """How the user signed in"""
    MAIL = "mail"
    GOOGLE = "google"
    UNSET = "unset"


class User(BaseModel):
    """Account profile as seen by the application.

    Field aliases are the names used in stored documents, so a profile
    written by one client can be read back by another.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(default="", alias="userId", description="Identity uid from the auth provider")
    is_anonymous: bool = Field(default=True, alias="isAnonymous")
    auth_method: AuthMethod = Field(default=AuthMethod.UNSET, alias="authMethod")
    login: Optional[str] = Field(default=None, description="Login name, usually the e-mail address")

    def to_document(self) -> Dict[str, Any]:
        """Serialize to a store document"""
        return self.model_dump(by_alias=True, mode="json")
