"""User endpoints: own profile and the admin user list."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bloghub.api.v1.auth import get_current_user, require_admin
from bloghub.core.database import get_db
from bloghub.schemas.auth import CurrentUser, UserSummary, UsersListResponse
from bloghub.services.users import list_users

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(
        users=[UserSummary.model_validate(u) for u in list_users(db)]
    )


@router.get("/profile", response_model=UserSummary)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserSummary:
    """Return the authenticated user's own summary."""
    return UserSummary.model_validate(current_user.model_dump())
