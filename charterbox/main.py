"""FastAPI application entry point for CharterBox."""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from charterbox import __version__
from charterbox.config import settings
from charterbox.database import close_db, init_db

logger = logging.getLogger(__name__)


# Rate limiter configuration
limiter = Limiter(key_func=get_remote_address)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        # HTTPS enforcement header (browsers will upgrade to HTTPS)
        if settings.enforce_https:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains; preload"
            )

        return response


def _is_production() -> bool:
    """Check if we're running in production mode (not debug and not testing)."""
    return not settings.debug and not os.getenv("PYTEST_CURRENT_TEST")


def _validate_security_configuration() -> None:
    """Log configuration that is unsafe for a production deployment."""
    warnings = []

    if _is_production():
        if not settings.woocommerce_webhook_secret and settings.woocommerce_enabled:
            warnings.append(
                "WooCommerce webhook is enabled without a secret; anyone can post orders. "
                "Set CHARTERBOX_WOOCOMMERCE_SECRET."
            )

        mongodb_url = settings.mongodb_url
        if "localhost" in mongodb_url or "127.0.0.1" in mongodb_url:
            warnings.append(
                "MongoDB URL points to localhost in production. "
                "This may indicate an insecure configuration."
            )

        if not settings.enforce_https:
            warnings.append(
                "HTTPS enforcement is disabled. "
                "Consider enabling enforce_https=true for production."
            )

    for warning in warnings:
        logger.warning("SECURITY WARNING: %s", warning)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    _validate_security_configuration()

    await init_db()
    logger.info("%s %s started", settings.app_name, __version__)

    yield

    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Yacht charter booking import and webhook service",
    version=__version__,
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Only allow origins from the whitelist; empty list means same-origin only
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-WC-Webhook-Signature"],
        max_age=600,  # Cache preflight for 10 minutes
    )

app.add_middleware(SecurityHeadersMiddleware)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": __version__,
            "app_name": settings.app_name,
        }
    )


# Import and include routers
from charterbox.routers import import_router, webhooks

app.include_router(import_router.router, prefix="/api/import", tags=["Import"])
app.include_router(webhooks.router, prefix="/api/webhooks", tags=["Webhooks"])
