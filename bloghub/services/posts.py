"""
Post lifecycle and ownership policy.

Anyone may read; any authenticated user may create a post or comment on any
post; only the author may update or delete a post. Admins get the same rights
over posts they do not own only when moderation is enabled in settings
(ADMIN_CAN_MODERATE_POSTS).
"""

import logging
import math
import re
from typing import Any

from sqlalchemy.orm import Session, selectinload

from bloghub.core.roles import is_admin
from bloghub.models import Comment, Post
from bloghub.schemas.post import PostCreate, PostUpdate
from bloghub.services.categories import get_category
from bloghub.services.errors import (
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

EXCERPT_MAX_LEN = 200
TITLE_MAX_LEN = 255

_WHITESPACE = re.compile(r"\s+")


def derive_excerpt(content: str, max_len: int = EXCERPT_MAX_LEN) -> str:
    """Summary from content: whitespace collapsed, cut at max_len with '...' when truncated."""
    text = _WHITESPACE.sub(" ", content).strip()
    if len(text) <= max_len:
        return text
    return text[:max_len].rstrip() + "..."


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def can_modify_post(post: Post, identity: Any, allow_admin_override: bool = False) -> bool:
    """Ownership rule for update/delete: the author, or an admin when override is enabled."""
    if identity is None:
        return False
    if getattr(identity, "id", None) == post.author_id:
        return True
    return allow_admin_override and is_admin(identity)


def _with_relations(query):
    return query.options(
        selectinload(Post.author),
        selectinload(Post.category),
        selectinload(Post.comments).selectinload(Comment.author),
    )


def _get_post_or_404(db: Session, post_id: int) -> Post:
    post = _with_relations(db.query(Post)).filter(Post.id == post_id).first()
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationFailedError(f"{field} is required")
    return value


def _check_category(db: Session, category_id: int | None) -> None:
    if category_id is not None and get_category(db, category_id) is None:
        raise ValidationFailedError(f"Category {category_id} not found")


def _check_title(title: str) -> None:
    if len(title) > TITLE_MAX_LEN:
        raise ValidationFailedError(f"Title must be at most {TITLE_MAX_LEN} characters")


def list_posts(
    db: Session,
    page: int = 1,
    limit: int = 10,
    category_id: int | None = None,
) -> tuple[list[Post], int]:
    """Return (posts on the requested page, total matching), newest first."""
    if page < 1 or limit < 1:
        raise ValidationFailedError("page and limit must be positive")
    query = db.query(Post)
    if category_id is not None:
        query = query.filter(Post.category_id == category_id)
    total = query.count()
    posts = (
        _with_relations(query)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return posts, total


def get_post(db: Session, post_id: int) -> Post:
    """
    Fetch a post and count the view.

    Every call increments view_count by one, whoever the caller is. The
    increment is a single UPDATE so concurrent readers do not overwrite each other.
    """
    updated = (
        db.query(Post)
        .filter(Post.id == post_id)
        .update({Post.view_count: Post.view_count + 1}, synchronize_session=False)
    )
    if not updated:
        raise NotFoundError("Post not found")
    db.commit()
    return _get_post_or_404(db, post_id)


def create_post(db: Session, identity: Any, data: PostCreate) -> Post:
    """Create a post authored by identity. Title and content are required."""
    title = _require_text(data.title, "Title").strip()
    content = _require_text(data.content, "Content")
    _check_title(title)
    _check_category(db, data.category)

    excerpt = data.excerpt.strip() if data.excerpt and data.excerpt.strip() else None
    post = Post(
        title=title,
        content=content,
        excerpt=excerpt or derive_excerpt(content),
        author_id=identity.id,
        category_id=data.category,
        tags=data.tags or [],
        is_published=data.is_published,
        view_count=0,
    )
    db.add(post)
    db.commit()
    logger.info(
        "Post created",
        extra={"post_id": post.id, "author_id": identity.id},
    )
    return _get_post_or_404(db, post.id)


def _authorize_mutation(
    post: Post, identity: Any, allow_admin_override: bool, action: str
) -> None:
    if not can_modify_post(post, identity, allow_admin_override):
        logger.warning(
            "Forbidden post mutation",
            extra={
                "action": action,
                "post_id": post.id,
                "user_id": getattr(identity, "id", None),
            },
        )
        raise ForbiddenError("Not authorized to modify this post")


def update_post(
    db: Session,
    identity: Any,
    post_id: int,
    patch: PostUpdate,
    allow_admin_override: bool = False,
) -> Post:
    """
    Apply a partial update. Fields that are omitted or null keep their value;
    is_published=False is applied like any other value. The author never changes.
    An excerpt that was derived from the content is re-derived when the
    content changes; a supplied excerpt is kept.
    """
    post = _get_post_or_404(db, post_id)
    _authorize_mutation(post, identity, allow_admin_override, "update")

    if patch.title is not None:
        title = _require_text(patch.title, "Title").strip()
        _check_title(title)
        post.title = title
    if patch.content is not None:
        content = _require_text(patch.content, "Content")
        # An excerpt derived from the old content follows the new content.
        if patch.excerpt is None and post.excerpt == derive_excerpt(post.content):
            post.excerpt = derive_excerpt(content)
        post.content = content
    if patch.excerpt is not None:
        post.excerpt = patch.excerpt.strip() or None
    if patch.category is not None:
        _check_category(db, patch.category)
        post.category_id = patch.category
    if patch.tags is not None:
        post.tags = patch.tags
    if patch.is_published is not None:
        post.is_published = patch.is_published

    db.commit()
    logger.info("Post updated", extra={"post_id": post.id, "user_id": identity.id})
    return _get_post_or_404(db, post_id)


def delete_post(
    db: Session,
    identity: Any,
    post_id: int,
    allow_admin_override: bool = False,
) -> None:
    """Delete a post and its comments; same ownership rule as update."""
    post = _get_post_or_404(db, post_id)
    _authorize_mutation(post, identity, allow_admin_override, "delete")
    db.delete(post)
    db.commit()
    logger.info("Post deleted", extra={"post_id": post_id, "user_id": identity.id})


def add_comment(db: Session, identity: Any, post_id: int, content: str | None) -> Post:
    """Append a comment by identity to any existing post; returns the updated post."""
    post = _get_post_or_404(db, post_id)
    text = _require_text(content, "Comment content")
    post.comments.append(Comment(author_id=identity.id, content=text))
    db.commit()
    logger.info(
        "Comment added",
        extra={"post_id": post_id, "user_id": identity.id},
    )
    return _get_post_or_404(db, post_id)
