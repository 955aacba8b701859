# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides cookie-session authentication for the admin area.
#
# Usage:
#   from app.auth import CurrentUser, AdminUserDep
#
#   @router.get("/admin/contacts")
#   async def contacts(user: CurrentUser):
#       return {"username": user.username}
# =============================================================================

from app.auth.dependencies import (
    AdminUserDep,
    CurrentUser,
    get_session_user,
    require_role,
    require_user,
)
from app.auth.models import SessionUser
from app.auth.rate_limit import LoginRateLimiter, client_ip, get_login_rate_limiter

__all__ = [
    "AdminUserDep",
    "CurrentUser",
    "get_session_user",
    "require_role",
    "require_user",
    "SessionUser",
    "LoginRateLimiter",
    "client_ip",
    "get_login_rate_limiter",
]
