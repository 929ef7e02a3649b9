"""Typed failures raised by the service layer; routers map them to HTTP status codes."""


class BlogServiceError(Exception):
    """Base class for service failures. message is safe to show to API clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailedError(BlogServiceError):
    """Required input missing or malformed."""


class UnauthorizedError(BlogServiceError):
    """Missing, invalid or expired credentials, or a token for a user that no longer exists."""


class InvalidCredentialsError(UnauthorizedError):
    """Email/password pair did not match a user."""


class ForbiddenError(BlogServiceError):
    """Authenticated, but not permitted (ownership or role)."""


class NotFoundError(BlogServiceError):
    """Referenced entity does not exist."""


class ConflictError(BlogServiceError):
    """Unique value already taken (email, category name)."""


class UpstreamUnavailableError(BlogServiceError):
    """The database could not be reached."""
