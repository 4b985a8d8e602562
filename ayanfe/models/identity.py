"""
Identity Models
The signed-in user and the payloads that create or resume a session.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


@dataclass
class Identity:
    """Authenticated user as returned by the session endpoints"""
    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.username

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "isAdmin": self.is_admin,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Identity":
        return cls(
            id=int(data["id"]),
            username=data.get("username", ""),
            name=data.get("name") or data.get("displayName"),
            email=data.get("email"),
            is_admin=bool(data.get("isAdmin", data.get("role") == "admin")),
        )


# =============================================================================
# Request Payloads
# =============================================================================

class LoginData(BaseModel):
    """Credentials for POST /login. Sent as username/password."""
    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(
        validation_alias=AliasChoices("identifier", "username"),
        serialization_alias="username",
    )
    secret: str = Field(
        validation_alias=AliasChoices("secret", "password"),
        serialization_alias="password",
        repr=False,
    )

    @field_validator("identifier")
    @classmethod
    def identifier_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("secret")
    @classmethod
    def secret_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class NewUser(BaseModel):
    """Registration payload for POST /register"""
    username: str
    password: str = Field(repr=False)
    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
