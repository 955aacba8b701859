# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Login form and logout for the admin area.
#
# Endpoints:
#   GET  /admin/login   - Login form
#   POST /admin/login   - Check credentials, start a session
#   POST /admin/logout  - End the session
# =============================================================================

import logging
import math
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from app.auth.dependencies import get_session_user, login_user, logout_user
from app.auth.rate_limit import LoginRateLimiter, client_ip, get_login_rate_limiter
from app.dependencies import DatabaseDep
from app.templating import flash, render
from core.services.auth_service import AuthService
from lib.database import DatabaseError

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


@router.get("/login")
async def login_form(request: Request, db: DatabaseDep):
    """
    Show the login form.

    Already signed-in users go straight to the dashboard.
    """
    if get_session_user(request) is not None:
        return RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "admin/login.html", db)


@router.post("/login")
async def login(
    request: Request,
    db: DatabaseDep,
    limiter: Annotated[LoginRateLimiter, Depends(get_login_rate_limiter)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """
    Check credentials and start a session.

    Returns:
        303 to /admin on success, 303 back to the form on failure,
        429 with the form when the client IP is rate limited
    """
    ip = client_ip(request)

    limited, retry_after = limiter.is_limited(ip)
    if limited:
        minutes = max(1, math.ceil(retry_after / 60))
        logger.warning(f"Login rate limit hit for {ip}")
        return render(
            request,
            "admin/login.html",
            None,
            {
                "error": f"Too many login attempts. Please try again in {minutes} minute(s).",
                "username": username,
            },
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    limiter.register_attempt(ip)

    try:
        user = AuthService.authenticate(db, username.strip(), password)
    except DatabaseError as e:
        logger.error(f"Login lookup failed: {e}")
        user = None

    if user is None:
        flash(request, INVALID_CREDENTIALS_MESSAGE, "danger")
        return RedirectResponse("/admin/login", status_code=status.HTTP_303_SEE_OTHER)

    limiter.reset(ip)
    login_user(request, user)
    return RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout")
async def logout(request: Request):
    logout_user(request)
    flash(request, "You have been signed out.", "info")
    return RedirectResponse("/admin/login", status_code=status.HTTP_303_SEE_OTHER)
