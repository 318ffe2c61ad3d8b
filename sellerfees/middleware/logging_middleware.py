"""
Request/response logging middleware.

Logs every API request with its duration and status code, and binds a
unique ``request_id`` to structlog's contextvars so that all loggers
invoked while serving the request include it.
"""

import logging
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("sellerfees.api")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs every HTTP request and response.

    The request id is also returned in the ``X-Request-ID`` header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = uuid.uuid4().hex[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start_time) * 1000, 1)

        # /health is polled; keep it out of the logs
        if request.url.path != "/health":
            logger.info(
                f"{request.method} {request.url.path} "
                f"-> {response.status_code} ({duration_ms}ms)"
            )

        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        response.headers["X-Request-ID"] = request_id

        structlog.contextvars.clear_contextvars()

        return response
