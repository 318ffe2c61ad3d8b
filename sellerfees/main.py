"""
SellerFees FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sellerfees import __version__
from sellerfees.config import get_settings
from sellerfees.core.logging_config import setup_logging
from sellerfees.middleware.logging_middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle management."""
    settings = get_settings()
    logger.info(
        f"Starting {settings.app_name} v{__version__} "
        f"({settings.app_env.value}, rules {settings.rule_policy.value})"
    )
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """Application factory: creates and configures the FastAPI instance."""
    settings = get_settings()

    # 1. Configure structured logging (before anything else)
    setup_logging(
        app_env=settings.app_env,
        log_level=settings.log_level,
        log_format=settings.log_format,
        static_context={"rule_policy": settings.rule_policy.value},
    )

    openapi_tags = [
        {
            "name": "Commission",
            "description": "Forward and inverse commission calculation for a single sale.",
        },
        {
            "name": "Pricing",
            "description": "Batch pricing of product variations: discounts, full prices, "
                           "net amounts, cost-plus-profit and charm-priced plans. "
                           "Every endpoint also answers in CSV with `?format=csv`.",
        },
        {
            "name": "System",
            "description": "Health checks and operational endpoints.",
        },
    ]

    app = FastAPI(
        title=settings.app_name,
        description=(
            "SellerFees computes marketplace commissions for CNPJ and CPF sellers "
            "and solves the prices, discounts and full prices that reach a target "
            "net amount."
        ),
        version=__version__,
        lifespan=lifespan,
        openapi_tags=openapi_tags,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        redirect_slashes=False,
    )

    # Middleware order is LIFO: CORS outermost
    app.add_middleware(LoggingMiddleware)
    if settings.is_development:
        cors_origins = ["http://localhost:5173"]
    elif settings.cors_allowed_origins:
        cors_origins = [o.strip() for o in settings.cors_allowed_origins.split(",") if o.strip()]
    else:
        cors_origins = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from sellerfees.api.v1 import commission, pricing

    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": __version__,
            "environment": settings.app_env.value,
            "rule_policy": settings.rule_policy.value,
        }

    app.include_router(commission.router, prefix="/api/v1")
    app.include_router(pricing.router, prefix="/api/v1")

    # Register global exception handlers (after routers)
    from sellerfees.middleware.exception_handler import register_exception_handlers

    register_exception_handlers(app)

    return app


app = create_app()
