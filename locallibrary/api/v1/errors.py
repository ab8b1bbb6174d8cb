"""
Translation of domain exceptions into HTTP errors.
"""

from fastapi import HTTPException, status

from locallibrary.domain.exceptions import (
    CatalogStoreError,
    EntityNotFoundError,
    GatewayError,
    InternalError,
    LibraryError,
    ValidationError,
)
from locallibrary.api.v1.converters import issues_to_api


def to_http_error(error: Exception) -> HTTPException:
    """Map a domain exception (or ValueError) to the HTTPException routes raise."""
    if isinstance(error, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=422,
            detail=issues_to_api(error.issues),
        )
    if isinstance(error, GatewayError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, CatalogStoreError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error))
    if isinstance(error, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (InternalError, LibraryError)):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
    )
