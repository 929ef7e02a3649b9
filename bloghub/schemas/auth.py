"""Request/response schemas for auth and user endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from bloghub.core.roles import Role


class RegisterRequest(BaseModel):
    """Registration payload. Fields are checked by the user service so missing ones map to 400."""

    username: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email address (unique)")
    password: str | None = Field(default=None, description="Password (8-128 chars)")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, description="Email address")
    password: str | None = Field(default=None, description="Password")


class UserSummary(BaseModel):
    """Public view of a user (no password hash)."""

    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str
    role: Role | None

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v: Any) -> Role | None:
        return Role.parse(v)


class AuthResponse(BaseModel):
    """Identity summary plus a JWT access token, returned on register and login."""

    user: UserSummary
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime = Field(..., description="Token expiry (UTC)")


class CurrentUser(BaseModel):
    """Authenticated identity (id, username, email, role) for dependency injection."""

    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str
    role: Role | None

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v: Any) -> Role | None:
        """Unrecognized roles resolve to None, which is never admin."""
        return Role.parse(v)


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserSummary]
