"""Category listing and creation."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bloghub.models import Category
from bloghub.services.errors import ConflictError, ValidationFailedError

logger = logging.getLogger(__name__)

CATEGORY_NAME_MAX_LEN = 255


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


def get_category(db: Session, category_id: int) -> Category | None:
    return db.get(Category, category_id)


def create_category(db: Session, name: str | None) -> Category:
    """Create a category; blank names are rejected and names must be unique."""
    name = (name or "").strip()
    if not name:
        raise ValidationFailedError("Category name is required")
    if len(name) > CATEGORY_NAME_MAX_LEN:
        raise ValidationFailedError("Category name is too long")
    if db.query(Category).filter(Category.name == name).first() is not None:
        raise ConflictError("Category already exists")

    category = Category(name=name)
    db.add(category)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Category already exists") from e
    db.refresh(category)
    logger.info("Category created", extra={"category_id": category.id})
    return category
