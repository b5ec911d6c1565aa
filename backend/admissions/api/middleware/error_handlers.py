"""
Error Handlers

Every failure leaves the API as the same envelope:

    {"error": {"code": ..., "message": ..., "details": {...}}}

DomainError subclasses carry their own code and HTTP status, so an
INVALID_TRANSITION is a 409 and a PERSISTENCE_FAILURE a 503 without any
mapping table here.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from ...domain.errors import DomainError
from ...utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


def _error_response(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers={"X-Correlation-Id": get_correlation_id() or ""}
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Expected workflow failures: unknown subject, illegal edge, lost race, storage."""
    # Storage trouble is an operational problem; the rest are caller errors
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{request.method} {request.url.path} failed: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "subject_id": exc.details.get("subject_id"),
            "from_status": exc.details.get("from"),
            "to_status": exc.details.get("to"),
        }
    )
    return _error_response(exc.http_status, exc.to_dict())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies, unknown status/event/action names in the path or body."""
    logger.warning(
        f"{request.method} {request.url.path} rejected: request validation failed",
        extra={"error_code": "VALIDATION_ERROR"}
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": {"errors": exc.errors()}
        }
    })


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "details": {}
        }
    })


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
