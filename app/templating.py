# =============================================================================
# app/templating.py - Jinja Templates & Flash Messages
# =============================================================================
# Every HTML page goes through render(), which adds the context shared by all
# templates:
# - site: global content (read from the database on every request)
# - flashes: one-shot messages stored in the session by flash()
# - current_user: the signed-in admin, if any
# - recaptcha_site_key: for the contact form widget
# =============================================================================

import json
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.auth.dependencies import get_session_user
from app.config import settings
from core.services.content_service import DEFAULT_GLOBAL_CONTENT, ContentService
from lib.database import Database
from lib.utils import format_timestamp

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

FLASH_SESSION_KEY = "_flashes"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["timestamp"] = format_timestamp
templates.env.filters["pretty_json"] = lambda value: json.dumps(value, indent=2, sort_keys=True, default=str)


# =============================================================================
# Flash Messages
# =============================================================================

def flash(request: Request, message: str, category: str = "info") -> None:
    """Queue a message for the next rendered page."""
    flashes = list(request.session.get(FLASH_SESSION_KEY, []))
    flashes.append({"message": message, "category": category})
    request.session[FLASH_SESSION_KEY] = flashes


def pop_flashed_messages(request: Request) -> list[dict[str, str]]:
    """Return and clear the queued messages."""
    return request.session.pop(FLASH_SESSION_KEY, [])


# =============================================================================
# Rendering
# =============================================================================

def render(
    request: Request,
    name: str,
    db: Database | None,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
):
    """
    Render a template with the shared page context.

    Args:
        request: Current request (needed for the session and by Jinja2Templates)
        name: Template path under app/templates
        db: Database used to load global content (None renders the defaults)
        context: Page-specific variables, override the shared ones
        status_code: HTTP status of the response

    Raises:
        DatabaseError: If global content cannot be loaded
    """
    page_context = {
        "site": ContentService.get_global_content(db) if db is not None else dict(DEFAULT_GLOBAL_CONTENT),
        "flashes": pop_flashed_messages(request),
        "current_user": get_session_user(request),
        "recaptcha_site_key": settings.RECAPTCHA_SITE_KEY,
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)


def render_error(request: Request, status_code: int, message: str):
    """Render the error page without touching the database."""
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "site": dict(DEFAULT_GLOBAL_CONTENT),
            "flashes": [],
            "current_user": get_session_user(request),
            "recaptcha_site_key": None,
            "status_code": status_code,
            "message": message,
        },
        status_code=status_code,
    )
