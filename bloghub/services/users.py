"""Registration, login and user lookup."""

import logging

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bloghub.core.roles import Role
from bloghub.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    verify_password,
)
from bloghub.models import User
from bloghub.services.errors import (
    ConflictError,
    InvalidCredentialsError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Validate email syntax and return it lower-cased; raise ValidationFailedError if invalid."""
    try:
        info = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationFailedError(f"Invalid email address: {e}") from e
    return info.normalized.lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> User:
    """
    Validate and persist a new user with a hashed password.

    Raises ValidationFailedError for bad lengths or email, ConflictError if the
    email is already registered (no row is written in that case).
    """
    username = username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise ValidationFailedError("Invalid username length.")
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValidationFailedError(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )
    email = normalize_email(email)

    if get_user_by_email(db, email) is not None:
        raise ConflictError("User already exists with this email")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same email.
        db.rollback()
        raise ConflictError("User already exists with this email") from e
    db.refresh(user)
    return user


def register_user(
    db: Session,
    username: str | None,
    email: str | None,
    password: str | None,
) -> User:
    """Public registration: all fields required; the account always gets Role.USER."""
    if not username or not email or not password:
        raise ValidationFailedError("Please provide all required fields")
    user = create_user(db, username, email, password, role=Role.USER)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate_user(db: Session, email: str | None, password: str | None) -> User:
    """Return the user matching email/password or raise InvalidCredentialsError."""
    if not email or not password:
        raise ValidationFailedError("Please provide email and password")
    user = get_user_by_email(db, email.strip().lower())
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"reason": "invalid_credentials"})
        raise InvalidCredentialsError("Invalid credentials")
    return user
