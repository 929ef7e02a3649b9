"""Pydantic request/response schemas."""

from bloghub.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserSummary,
    UsersListResponse,
)
from bloghub.schemas.category import (
    CategoriesListResponse,
    CategoryCreate,
    CategoryOut,
)
from bloghub.schemas.health import HealthResponse
from bloghub.schemas.post import (
    CommentCreate,
    DeleteResponse,
    Pagination,
    PostCreate,
    PostListResponse,
    PostOut,
    PostUpdate,
)

__all__ = [
    "AuthResponse",
    "CategoriesListResponse",
    "CategoryCreate",
    "CategoryOut",
    "CommentCreate",
    "CurrentUser",
    "DeleteResponse",
    "HealthResponse",
    "LoginRequest",
    "Pagination",
    "PostCreate",
    "PostListResponse",
    "PostOut",
    "PostUpdate",
    "RegisterRequest",
    "UserSummary",
    "UsersListResponse",
]
