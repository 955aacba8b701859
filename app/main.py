# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the TruView CMS.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 8080
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from app import __version__
from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    TruViewException,
    truview_exception_handler,
    unhandled_exception_handler,
)
from app.routers import admin, billing, contact, health, pages
from core.services.content_service import ContentService
from lib.database import get_database

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: ensure the database schema, seed default global content
    - Shutdown: log only
    """
    # Startup
    logger.info(f"Starting TruView CMS in {settings.ENVIRONMENT} mode ({settings.DATABASE_BACKEND} database)")

    db = get_database()
    db.ensure_schema()
    seeded = ContentService.ensure_default_content(db)
    if seeded:
        logger.info(f"Seeded {seeded} default global content row(s)")

    if not settings.captcha_enabled:
        logger.warning("CAPTCHA secret not configured; contact form tokens are not verified")

    yield

    # Shutdown
    logger.info("Shutting down TruView CMS")


# Create FastAPI application
app = FastAPI(
    title="TruView CMS",
    description="Marketing site, contact form, admin area and Stripe billing for TruView Glass.",
    version=__version__,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url=None,
    lifespan=lifespan,
)


# =============================================================================
# Middleware
# =============================================================================

# Signed cookie session: login state and flash messages
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    session_cookie="truview_session",
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    same_site="lax",
    https_only=settings.is_production,
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(TruViewException)
async def handle_truview_exception(request: Request, exc: TruViewException):
    """Handle custom TruView exceptions."""
    return await truview_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """Render framework errors (unknown routes etc.) as pages for browsers."""
    if "text/html" in request.headers.get("accept", ""):
        from app.templating import render_error
        return render_error(request, exc.status_code, str(exc.detail))
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Static Files & Routers
# =============================================================================

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Health check endpoints
app.include_router(health.router, tags=["Health"])

# Public pages (home, about, landing pages, sitemap)
app.include_router(pages.router, tags=["Pages"])

# Contact form
app.include_router(contact.router, tags=["Contact"])

# Login / logout
app.include_router(auth_routes.router, prefix="/admin", tags=["Auth"])

# Admin area
app.include_router(admin.router, prefix="/admin", tags=["Admin"])

# Stripe checkout and webhook
app.include_router(billing.router, tags=["Billing"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
