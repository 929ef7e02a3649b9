"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from bloghub.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


class TokenVerificationError(Exception):
    """Raised when a token is malformed, tampered with, expired, or lacks a usable subject."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def token_expiry(issued_at: datetime) -> datetime:
    """Expiry for a token issued at issued_at."""
    return issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(sub: str | int, now: datetime | None = None) -> str:
    """Create a signed JWT binding sub (the user id) with iat and a fixed exp."""
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "iat": issued_at,
        "exp": token_expiry(issued_at),
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def verify_access_token(token: str) -> int:
    """Return the user id asserted by token, or raise TokenVerificationError."""
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError as e:
        raise TokenVerificationError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise TokenVerificationError("Invalid token") from e
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise TokenVerificationError("Invalid token payload") from e
