"""
Global exception handlers for the FastAPI application.

Catches:
1. SellerFeesError subclasses, mapped to HTTP status codes.
2. Unhandled Exception: 500 Internal Server Error with a unique
   ``error_id`` for log correlation.

Unreachable pricing targets never reach these handlers: solvers report
them as a status on a 200 response.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sellerfees.core.exceptions import (
    PlanInputError,
    RuleConfigurationError,
    SellerFeesError,
    UnsupportedPolicyError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the FastAPI app.

    Called from ``create_app()`` after all routers are registered.
    """

    @app.exception_handler(SellerFeesError)
    async def handle_sellerfees_error(request: Request, exc: SellerFeesError) -> JSONResponse:
        """Map SellerFeesError subclasses to HTTP status codes."""
        status_code = _get_status_code(exc)
        logger.error(
            f"{type(exc).__name__}: {exc.message}",
            exc_info=exc,
            extra={"error_type": type(exc).__name__, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error_type": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: log, return 500 with error_id."""
        error_id = uuid.uuid4().hex[:8]
        logger.exception(
            f"Unhandled exception (error_id={error_id})",
            extra={"error_id": error_id, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )


def _get_status_code(exc: SellerFeesError) -> int:
    """Map exception type to HTTP status code."""
    if isinstance(exc, PlanInputError):
        return 400
    if isinstance(exc, UnsupportedPolicyError):
        return 400
    if isinstance(exc, RuleConfigurationError):
        return 500
    # Base SellerFeesError fallback
    return 500
