# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict

from core.models.admin import AdminRole, AdminUser


class SessionUser(BaseModel):
    """
    Signed-in admin as stored in the session cookie.

    This is the minimal user info kept between requests, without querying
    the database. The password hash never leaves the server.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    role: AdminRole
    stripe_customer_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == AdminRole.ADMIN

    @classmethod
    def from_admin_user(cls, user: AdminUser) -> "SessionUser":
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            stripe_customer_id=user.stripe_customer_id,
        )
