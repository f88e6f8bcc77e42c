"""Maps domain exceptions onto HTTP errors for the API layer."""

from fastapi import HTTPException, status

from service_portal.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    IdentityUnavailableError,
    NotFoundError,
    PermissionDeniedError,
    ServicePortalError,
    StoreUnavailableError,
    ValidationError,
)

_STATUS_CODES: dict[type[ServicePortalError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_CONTENT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    IdentityUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(exc: ServicePortalError) -> HTTPException:
    code = next(
        (c for exc_type, c in _STATUS_CODES.items() if isinstance(exc, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    detail: str | dict = str(exc)
    if isinstance(exc, ValidationError):
        detail = {"field": exc.field, "message": exc.message}
    return HTTPException(status_code=code, detail=detail)
