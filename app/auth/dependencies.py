# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for session-based authentication.
#
# The session cookie (Starlette SessionMiddleware) holds:
#   authenticated: True
#   user: {"id", "username", "role", "stripe_customer_id"}
#
# Usage:
#   from app.auth import CurrentUser, AdminUserDep
#
#   @router.get("/admin")
#   async def dashboard(user: CurrentUser):
#       return {"username": user.username}
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from pydantic import ValidationError

from app.auth.models import SessionUser
from app.exceptions import ForbiddenError, LoginRequiredError
from core.models.admin import AdminRole, AdminUser

logger = logging.getLogger(__name__)

SESSION_FLAG_KEY = "authenticated"
SESSION_USER_KEY = "user"


def login_user(request: Request, user: AdminUser) -> SessionUser:
    """
    Start a fresh session for a user.

    Anything left in the previous session is discarded first.
    """
    session_user = SessionUser.from_admin_user(user)
    request.session.clear()
    request.session[SESSION_FLAG_KEY] = True
    request.session[SESSION_USER_KEY] = session_user.model_dump(mode="json")
    return session_user


def logout_user(request: Request) -> None:
    request.session.clear()


def get_session_user(request: Request) -> Optional[SessionUser]:
    """
    Read the signed-in user from the session.

    Returns None if nobody is signed in or the stored user is unreadable.
    """
    if not request.session.get(SESSION_FLAG_KEY):
        return None

    data = request.session.get(SESSION_USER_KEY)
    if not data:
        return None

    try:
        return SessionUser(**data)
    except (TypeError, ValidationError) as e:
        logger.warning(f"Discarding malformed session user: {e}")
        return None


async def require_user(request: Request) -> SessionUser:
    """
    Dependency for pages that need a signed-in admin.

    Raises:
        LoginRequiredError: Redirects to /admin/login
    """
    user = get_session_user(request)
    if user is None:
        raise LoginRequiredError()
    return user


def require_role(*roles: AdminRole):
    """
    Build a dependency that also checks the user's role.

    Usage:
        @router.get("/admin/billing-events")
        async def events(user: SessionUser = Depends(require_role(AdminRole.ADMIN))):
            ...
    """
    allowed = [role.value for role in roles]

    async def dependency(user: SessionUser = Depends(require_user)) -> SessionUser:
        if user.role.value not in allowed:
            logger.warning(f"User {user.username} ({user.role.value}) denied; requires {allowed}")
            raise ForbiddenError(user.role.value, allowed)
        return user

    return dependency


# Type aliases for dependency injection
CurrentUser = Annotated[SessionUser, Depends(require_user)]
AdminUserDep = Annotated[SessionUser, Depends(require_role(AdminRole.ADMIN))]
