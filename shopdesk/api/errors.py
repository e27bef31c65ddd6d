"""Translation of domain exceptions into HTTP errors"""

import logging
from fastapi import HTTPException
from shopdesk.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainException,
    NotFoundError,
    PaymentGatewayError,
    PersistenceError,
    ValidationError,
)

STATUS_CODES = {
    ValidationError: 422,
    ConflictError: 409,
    AuthorizationError: 403,
    NotFoundError: 404,
    PaymentGatewayError: 502,
    PersistenceError: 503,
}


def to_http_exception(exc: DomainException, request_id: str = "unknown") -> HTTPException:
    """Map a domain error to a status code, keeping its human-readable message"""
    for exc_type, status_code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            if status_code >= 500:
                logging.error(f"{exc_type.__name__}: {exc}", extra={"request_id": request_id})
            else:
                logging.warning(f"{exc_type.__name__}: {exc}", extra={"request_id": request_id})
            return HTTPException(status_code=status_code, detail=str(exc))

    logging.error(f"Unexpected domain error: {exc}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
