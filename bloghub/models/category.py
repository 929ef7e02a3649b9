"""ORM model for post categories."""

from sqlalchemy import Column, DateTime, Integer, String, func

from bloghub.models.base import Base


class Category(Base):
    """Named category a post may reference; names are unique."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
