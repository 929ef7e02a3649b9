"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from bloghub.core.roles import Role
from bloghub.models.base import Base


class RoleType(TypeDecorator):
    """
    Role stored as a lower-case string.

    Values are read through Role.parse, so a row written as 'ADMIN' loads as
    Role.ADMIN and an unrecognized value loads as None instead of raising.
    """

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        role = Role.parse(value)
        if role is None:
            raise ValueError(f"Unknown role: {value!r}")
        return role.value

    def process_result_value(self, value, dialect):
        return Role.parse(value)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: Role.USER or Role.ADMIN (stored as 'user' / 'admin')
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(RoleType(), nullable=False, default=Role.USER)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    posts = relationship("Post", back_populates="author")
