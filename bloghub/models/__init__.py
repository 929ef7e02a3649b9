"""SQLAlchemy ORM models."""

from bloghub.models.base import Base
from bloghub.models.category import Category
from bloghub.models.post import Comment, Post
from bloghub.models.user import User

__all__ = ["Base", "Category", "Comment", "Post", "User"]
