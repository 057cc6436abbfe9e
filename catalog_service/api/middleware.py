"""API middleware for the catalog service.

Provides:
- Request ID correlation and access logging
- Last-resort error handling
- The error envelope shared with the exception handlers
"""

import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: dict[str, Any] | list[Any] | None = None,
) -> JSONResponse:
    """Build the error envelope every failed request answers with.

    Args:
        request: Request that failed.
        status_code: HTTP status.
        error_code: Machine-readable error code.
        message: Human-readable message.
        details: Additional context.

    Returns:
        JSON response ``{error_code, message, details, request_id}``.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details if details is not None else {},
            "request_id": getattr(request.state, "request_id", None),
        },
    )


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlates logs and responses with a request ID.

    The ID is taken from the ``X-Request-ID`` header or generated, kept
    on ``request.state``, bound to the structlog context for the
    duration of the request and echoed in the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with correlation ID."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            started = time.perf_counter()
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                logger.info(
                    "Request completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions that escape every handler into a 500 envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Handle errors uniformly."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                str(e) or "An internal error occurred",
            )


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed),
    so the request ID is bound before errors are handled and logged.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
