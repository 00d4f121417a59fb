from fastapi import HTTPException, status
from services.errors import (
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
}


def to_http_exception(exc: DomainError, persistence_message: str = "Terjadi kesalahan. Silakan coba lagi.") -> HTTPException:
    """Map a service failure onto the response the client sees."""
    if isinstance(exc, PersistenceError):
        # Storage details stay in the logs
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=persistence_message)
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
