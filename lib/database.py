# =============================================================================
# lib/database.py - Data Access Interface
# =============================================================================
# Every route talks to storage through the Database interface defined here.
# Two implementations exist:
# - SqliteDatabase (lib/sqlite_client.py): embedded single-file database
# - SupabaseDatabase (lib/supabase_client.py): managed Postgres via PostgREST
#
# Rows are returned as plain dicts so both backends look identical to callers.
# JSON columns (billing details, testimonials, FAQs) are always decoded.
#
# Usage:
#   from lib.database import get_database
#   db = get_database()
#   db.ensure_schema()
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

# Every table the site reads or writes, in creation order
TABLES = (
    "global_content",
    "admin_users",
    "contact_submissions",
    "billing_events",
    "locations",
    "services",
)


class DatabaseError(Exception):
    """
    Error during database operations.

    Errors should tell HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "DATABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class Database(ABC):
    """
    Storage operations used by the site.

    Every write is a single independent insert; nothing is updated or deleted.
    """

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @abstractmethod
    def ensure_schema(self) -> None:
        """Make sure every table exists. Safe to call repeatedly."""

    @abstractmethod
    def ping(self) -> None:
        """Raise DatabaseError if the store cannot be reached."""

    # -------------------------------------------------------------------------
    # Admin users
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_admin_user(self, username: str) -> dict[str, Any] | None:
        """Fetch an admin user by exact username, or None."""

    @abstractmethod
    def insert_admin_user(
        self,
        username: str,
        password_hash: str,
        role: str = "manager",
        stripe_customer_id: str | None = None,
    ) -> bool:
        """
        Insert an admin user unless the username already exists.

        Returns:
            True if a row was created, False if the username was taken
        """

    # -------------------------------------------------------------------------
    # Contact submissions
    # -------------------------------------------------------------------------

    @abstractmethod
    def insert_contact_submission(
        self,
        name: str,
        email: str,
        phone: str | None,
        message: str,
        created_at: int,
    ) -> dict[str, Any]:
        """Insert a contact submission and return the stored row."""

    @abstractmethod
    def list_contact_submissions(self) -> list[dict[str, Any]]:
        """All contact submissions, newest first."""

    # -------------------------------------------------------------------------
    # Billing events
    # -------------------------------------------------------------------------

    @abstractmethod
    def insert_billing_event(
        self,
        customer_id: str | None,
        event_type: str,
        details: dict[str, Any],
        timestamp: int,
    ) -> dict[str, Any]:
        """Append a billing event and return the stored row."""

    @abstractmethod
    def list_billing_events(self) -> list[dict[str, Any]]:
        """All billing events, newest first, with details decoded."""

    # -------------------------------------------------------------------------
    # Global content
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_global_content(self) -> dict[str, str]:
        """All global content as a key -> value mapping."""

    @abstractmethod
    def seed_global_content(self, defaults: dict[str, str]) -> int:
        """
        Insert defaults only when the table is empty.

        Returns:
            Number of rows inserted
        """

    # -------------------------------------------------------------------------
    # Locations & services
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_location(self, name: str) -> dict[str, Any] | None:
        """Fetch a location by exact name, or None."""

    @abstractmethod
    def fetch_service(self, slug: str, location_id: int) -> dict[str, Any] | None:
        """Fetch a service by slug within a location, or None."""

    @abstractmethod
    def list_service_pages(self) -> list[dict[str, Any]]:
        """
        Every service/location pair.

        Returns:
            List of dicts with keys: slug, service_name, location_name
        """

    @abstractmethod
    def ensure_location(self, name: str) -> dict[str, Any]:
        """Insert a location if missing and return it."""

    @abstractmethod
    def insert_service(
        self,
        location_id: int,
        name: str,
        slug: str,
        description: str,
        hero_image: str | None = None,
        cta_text: str | None = None,
        testimonials: list[dict[str, str]] | None = None,
        faqs: list[dict[str, str]] | None = None,
    ) -> bool:
        """Insert a service unless (location_id, slug) exists. Returns True if created."""


# =============================================================================
# Factory
# =============================================================================

_instance: Database | None = None


def create_database(settings) -> Database:
    """
    Build the Database implementation selected by DATABASE_BACKEND.

    Raises:
        DatabaseError: If the supabase backend is selected without credentials
    """
    if settings.DATABASE_BACKEND == "supabase":
        from lib.supabase_client import SupabaseDatabase

        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
            raise DatabaseError(
                message="Supabase backend selected but credentials are missing",
                code="SUPABASE_NOT_CONFIGURED",
                suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY, or use DATABASE_BACKEND=sqlite",
            )
        return SupabaseDatabase(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)

    from lib.sqlite_client import SqliteDatabase

    return SqliteDatabase(settings.SQLITE_PATH)


def get_database() -> Database:
    """Get or create the process-wide Database for the configured backend."""
    global _instance
    if _instance is None:
        from app.config import settings

        _instance = create_database(settings)
        logger.info(f"Using {settings.DATABASE_BACKEND} database backend")
    return _instance
