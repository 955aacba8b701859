# =============================================================================
# core/models/admin.py - Admin User Schemas
# =============================================================================
# Admin users are created by the seed script and read on login.
# The application never updates them.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class AdminRole(str, Enum):
    """
    Roles an admin user can hold.

    - manager: dashboard and contact submissions
    - admin: everything, including billing pages
    """
    MANAGER = "manager"
    ADMIN = "admin"


class AdminUser(BaseModel):
    """
    A row of the admin_users table.

    Example:
        {
            "id": 1,
            "username": "admin",
            "password_hash": "$2b$10$...",
            "role": "admin",
            "stripe_customer_id": null
        }
    """

    id: int
    username: str = Field(..., min_length=1, max_length=150)
    password_hash: str
    role: AdminRole = AdminRole.MANAGER
    stripe_customer_id: str | None = None
