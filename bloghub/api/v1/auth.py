"""Register/login routes and auth dependencies (get_current_user, require_admin)."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bloghub.api.v1.errors import http_error
from bloghub.core.database import get_db
from bloghub.core.roles import is_admin
from bloghub.core.security import (
    TokenVerificationError,
    create_access_token,
    token_expiry,
    verify_access_token,
)
from bloghub.models import User
from bloghub.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserSummary,
)
from bloghub.services.errors import BlogServiceError
from bloghub.services.users import authenticate_user, get_user, register_user

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _auth_response(user: User) -> AuthResponse:
    issued_at = datetime.now(UTC)
    return AuthResponse(
        user=UserSummary.model_validate(user),
        token=create_access_token(sub=user.id, now=issued_at),
        token_type="bearer",
        expires_at=token_expiry(issued_at),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create an account (role 'user') and return it with a JWT access token.
    Returns 400 when a field is missing or the email is already registered.
    """
    try:
        user = register_user(db, body.username, body.email, body.password)
    except BlogServiceError as e:
        raise http_error(e) from e
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = authenticate_user(db, body.email, body.password)
    except BlogServiceError as e:
        raise http_error(e) from e
    return _auth_response(user)


def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser | None:
    """
    Dependency: resolve the acting user from a Bearer JWT.

    Returns None when no credentials are sent (anonymous). A token that is
    present but invalid, expired, or names a deleted user is rejected with 401.
    """
    if credentials is None:
        return None
    try:
        user_id = verify_access_token(credentials.credentials)
    except TokenVerificationError as e:
        raise _unauthorized(e.message) from e
    user = get_user(db, user_id)
    if user is None:
        logger.info("Token subject not found", extra={"user_id": user_id})
        raise _unauthorized("User not found")
    return CurrentUser.model_validate(user)


def get_current_user(
    current_user: Annotated[CurrentUser | None, Depends(get_current_user_optional)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if current_user is None:
        raise _unauthorized("Not authenticated")
    return current_user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
