"""
FastAPI application entry point for the invoice dashboard backend.

This module creates the FastAPI app instance and registers all routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from dashboard.config import settings
from dashboard.db.client import close_pool
from dashboard.routes.auth import router as auth_router
from dashboard.routes.customers import router as customers_router
from dashboard.routes.health import router as health_router
from dashboard.routes.invoices import router as invoices_router
from dashboard.services.invoice_actions import RedirectSignal
from dashboard.utils.logging import LOG_FORMAT

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=LOG_FORMAT
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: only the explicitly configured CORS_ORIGINS
    - anything else: allow all origins for local development

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = [origin.strip() for origin in settings.CORS_ORIGINS if origin.strip()]
        if not origins:
            logger.warning(
                "CORS_ORIGINS not set in production. "
                "No web origins allowed."
            )
        else:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_pool()


# Create FastAPI app
app = FastAPI(
    title="Invoice Dashboard API",
    description="Backend service for the invoices / customers admin dashboard",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log malformed request payloads (wrong JSON shape, bad query params).

    Invalid form *values* never get here: the form actions accept loose
    input and report field errors in a FormState.
    """
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": jsonable_encoder(exc.errors()),
        }
    )


@app.exception_handler(RedirectSignal)
async def redirect_signal_handler(request: Request, exc: RedirectSignal):
    """Finish a successful form action with 303 See Other."""
    logger.debug(f"{request.method} {request.url.path} -> redirect {exc.location}")
    return RedirectResponse(url=exc.location, status_code=status.HTTP_303_SEE_OTHER)


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(invoices_router)
app.include_router(customers_router)

logger.info("FastAPI app initialized successfully")
