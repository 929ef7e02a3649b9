"""Map service-layer failures to HTTP errors."""

from fastapi import HTTPException, status

from bloghub.services.errors import (
    BlogServiceError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationFailedError,
)

# Checked in order; subclasses must come before their bases.
_STATUS_BY_ERROR: tuple[tuple[type[BlogServiceError], int], ...] = (
    (ValidationFailedError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    # Duplicates are reported as 400, matching the public API contract.
    (ConflictError, status.HTTP_400_BAD_REQUEST),
    (UpstreamUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(error: BlogServiceError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(error: BlogServiceError) -> HTTPException:
    """Build the HTTPException for a service error (raise it with `from error`)."""
    status_code = status_for(error)
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )
    return HTTPException(status_code=status_code, detail=error.message, headers=headers)
