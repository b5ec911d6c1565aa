"""
Correlation ID Middleware

Binds one correlation ID per request. The same ID is written to log lines,
the status event of any transition the request commits, and the queued
notification, and is echoed back in the X-Correlation-Id response header.
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from ...utils.logger import correlation_scope, get_logger

CORRELATION_HEADER = "X-Correlation-Id"

logger = get_logger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Correlation-Id or mint one, for the life of the request"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={"area": request.url.path}
            )
        return response
