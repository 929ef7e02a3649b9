"""Post endpoints: public reads, authenticated create/comment, owner-only update/delete."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session

from bloghub.api.v1.auth import get_current_user
from bloghub.api.v1.errors import http_error
from bloghub.core.config import Settings, get_settings, settings as app_settings
from bloghub.core.database import get_db
from bloghub.schemas.auth import CurrentUser
from bloghub.schemas.post import (
    CommentCreate,
    DeleteResponse,
    Pagination,
    PostCreate,
    PostListResponse,
    PostOut,
    PostUpdate,
)
from bloghub.services import posts as post_service
from bloghub.services.errors import BlogServiceError

router = APIRouter()


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


def _parse_post_create(data: Any) -> PostCreate:
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Post body must be an object.")
    try:
        return PostCreate.model_validate(data)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=[
                {"loc": err["loc"], "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ],
        ) from e


async def _get_post_fields_from_request(request: Request) -> PostCreate:
    """Read a JSON body or multipart form into PostCreate. File parts are ignored."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type == "application/json":
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid JSON: {e!s}") from e
        return _parse_post_create(body)
    if content_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
        form = await request.form()
        data: dict[str, Any] = {}
        for key in set(form.keys()):
            values = [
                v for v in form.getlist(key)
                if not _is_upload_file(v) and str(v).strip() != ""
            ]
            if not values:
                continue
            # Repeated tags fields arrive as a list; everything else is single-valued.
            data[key] = values if key == "tags" and len(values) > 1 else values[0]
        return _parse_post_create(data)
    raise HTTPException(
        status_code=415,
        detail="Content-Type must be application/json or multipart/form-data.",
    )


@router.get("", response_model=PostListResponse)
def get_posts(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=app_settings.POSTS_PAGE_SIZE_MAX)] = 10,
    category: Annotated[int | None, Query(description="Category id filter")] = None,
) -> PostListResponse:
    """List posts newest first with page-based pagination and an optional category filter."""
    try:
        posts, total = post_service.list_posts(db, page=page, limit=limit, category_id=category)
    except BlogServiceError as e:
        raise http_error(e) from e
    return PostListResponse(
        posts=[PostOut.model_validate(p) for p in posts],
        pagination=Pagination(
            total=total,
            page=page,
            pages=post_service.page_count(total, limit),
        ),
    )


@router.get("/{post_id}", response_model=PostOut)
def get_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> PostOut:
    """Return one post. Each call increments its view count."""
    try:
        post = post_service.get_post(db, post_id)
    except BlogServiceError as e:
        raise http_error(e) from e
    return PostOut.model_validate(post)


@router.post("", response_model=PostOut, status_code=201)
async def create_post(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostOut:
    """
    Create a post authored by the current user.

    - **JSON body**: `Content-Type: application/json` with title, content and
      optional excerpt, category (id), tags, is_published.
    - **Form**: `multipart/form-data` with the same field names; tags may be
      repeated or comma-separated. Uploaded files are not stored.
    """
    data = await _get_post_fields_from_request(request)
    try:
        post = post_service.create_post(db, current_user, data)
    except BlogServiceError as e:
        raise http_error(e) from e
    return PostOut.model_validate(post)


@router.put("/{post_id}", response_model=PostOut)
def update_post(
    post_id: int,
    body: PostUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PostOut:
    """Partially update a post (author only). Omitted fields keep their value."""
    try:
        post = post_service.update_post(
            db,
            current_user,
            post_id,
            body,
            allow_admin_override=settings.ADMIN_CAN_MODERATE_POSTS,
        )
    except BlogServiceError as e:
        raise http_error(e) from e
    return PostOut.model_validate(post)


@router.delete("/{post_id}", response_model=DeleteResponse)
def delete_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DeleteResponse:
    """Delete a post and its comments (author only)."""
    try:
        post_service.delete_post(
            db,
            current_user,
            post_id,
            allow_admin_override=settings.ADMIN_CAN_MODERATE_POSTS,
        )
    except BlogServiceError as e:
        raise http_error(e) from e
    return DeleteResponse(message="Post deleted")


@router.post("/{post_id}/comments", response_model=PostOut, status_code=201)
def post_comment(
    post_id: int,
    body: CommentCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostOut:
    """Append a comment to a post; returns the post with its comments."""
    try:
        post = post_service.add_comment(db, current_user, post_id, body.content)
    except BlogServiceError as e:
        raise http_error(e) from e
    return PostOut.model_validate(post)
