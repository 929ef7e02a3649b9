"""Request/response schemas for posts and comments."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator


def _normalize_tags(value: object) -> list[str] | None:
    """Accept a list or a comma-separated string; strip, drop blanks, dedupe in order."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        raise ValueError("tags must be a list of strings or a comma-separated string")
    seen: dict[str, None] = {}
    for item in items:
        if not isinstance(item, str):
            raise ValueError("tags must contain only strings")
        tag = item.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class PostCreate(BaseModel):
    """Fields accepted when creating a post; title and content are enforced by the service."""

    model_config = {"extra": "ignore"}

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    category: int | None = Field(default=None, description="Category id")
    tags: list[str] | None = None
    is_published: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_published", "isPublished"),
    )

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: object) -> list[str] | None:
        return _normalize_tags(v)


class PostUpdate(BaseModel):
    """Partial update; omitted or null fields keep their stored value."""

    model_config = {"extra": "ignore"}

    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    category: int | None = Field(default=None, description="Category id")
    tags: list[str] | None = None
    is_published: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("is_published", "isPublished"),
    )

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: object) -> list[str] | None:
        return _normalize_tags(v)


class CommentCreate(BaseModel):
    """Comment body; content is enforced by the service so a blank one maps to 400."""

    content: str | None = None


class AuthorRef(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    username: str


class CategoryRef(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str


class CommentOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    author: AuthorRef
    content: str
    created_at: datetime


class PostOut(BaseModel):
    """Full post as returned by the API."""

    model_config = {"from_attributes": True}

    id: int
    title: str
    content: str
    excerpt: str | None = None
    author: AuthorRef
    category: CategoryRef | None = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool
    view_count: int
    comments: list[CommentOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    total: int = Field(..., ge=0, description="Total posts matching the filter")
    page: int = Field(..., ge=1)
    pages: int = Field(..., ge=0, description="Number of pages at the requested limit")


class PostListResponse(BaseModel):
    """Response for GET /posts."""

    posts: list[PostOut]
    pagination: Pagination


class DeleteResponse(BaseModel):
    message: str
