"""Category endpoints: public list, authenticated create."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bloghub.api.v1.auth import get_current_user
from bloghub.api.v1.errors import http_error
from bloghub.core.database import get_db
from bloghub.schemas.auth import CurrentUser
from bloghub.schemas.category import (
    CategoriesListResponse,
    CategoryCreate,
    CategoryOut,
)
from bloghub.services.categories import create_category, list_categories
from bloghub.services.errors import BlogServiceError

router = APIRouter()


@router.get("", response_model=CategoriesListResponse)
def get_categories(
    db: Annotated[Session, Depends(get_db)],
) -> CategoriesListResponse:
    """All categories sorted by name."""
    return CategoriesListResponse(
        categories=[CategoryOut.model_validate(c) for c in list_categories(db)]
    )


@router.post("", response_model=CategoryOut, status_code=201)
def post_category(
    body: CategoryCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CategoryOut:
    """Create a category. 400 if the name is blank or already used."""
    try:
        category = create_category(db, body.name)
    except BlogServiceError as e:
        raise http_error(e) from e
    return CategoryOut.model_validate(category)
