"""Catalog service main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers, and the startup/shutdown
lifecycle of the image storage and broker producer.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from catalog_service.api.categories import router as categories_router
from catalog_service.api.health import router as health_router
from catalog_service.api.middleware import error_response, setup_middleware
from catalog_service.api.products import router as products_router
from catalog_service.api.toppings import router as toppings_router
from catalog_service.domain.exceptions import DomainError
from catalog_service.infrastructure.broker import RedisMessageProducer
from catalog_service.infrastructure.config import settings
from catalog_service.infrastructure.logging import configure_logging
from catalog_service.infrastructure.storage import S3Storage

configure_logging(settings.log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting catalog service",
        version=settings.api_version,
        debug=settings.debug,
    )

    app.state.storage = S3Storage()
    producer = RedisMessageProducer(settings.redis_url, settings.broker_stream_max_length)
    await producer.connect()
    app.state.producer = producer

    yield

    logger.info("Shutting down catalog service")
    await producer.disconnect()


app = FastAPI(
    title="Catalog Service",
    description="Multi-tenant catalog of categories, products and toppings",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(toppings_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to their HTTP status."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        path=request.url.path,
        method=request.method,
        error_code=exc.error_code,
        error=exc.message,
    )
    return error_response(request, exc.status_code, exc.error_code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
    details = [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg")}
        for error in errors
    ]
    return error_response(request, 400, "VALIDATION_ERROR", message, details)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", {})
    else:
        error_code = "ERROR"
        message = str(detail)
        details = {}
    return error_response(request, exc.status_code, error_code, message, details)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(
        request,
        500,
        "INTERNAL_ERROR",
        str(exc) or "An internal error occurred",
        {},
    )
