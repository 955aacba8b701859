# =============================================================================
# lib/supabase_client.py - Supabase (Managed Postgres) Backend
# =============================================================================
# Database implementation that talks to the Supabase Postgres instance through
# the supabase-py client (PostgREST).
#
# PostgREST cannot run DDL, so ensure_schema() only verifies that every table
# is reachable. Apply migrations/001_initial_schema.sql to create them.
#
# Usage:
#   from lib.supabase_client import SupabaseDatabase
#   db = SupabaseDatabase(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from lib.database import TABLES, Database, DatabaseError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseDatabase(Database):
    """
    Managed Postgres store.

    The underlying client is created lazily on first use and reused.
    """

    def __init__(self, url: str, service_key: str):
        self.url = url
        self._service_key = service_key
        self._client: Client | None = None

    def get_client(self) -> Client:
        """
        Get or create the Supabase client.

        Uses the service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            DatabaseError: If client creation fails
        """
        if self._client is None:
            try:
                self._client = create_client(self.url, self._service_key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise DatabaseError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return self._client

    def _first(self, response) -> dict[str, Any] | None:
        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def ensure_schema(self) -> None:
        client = self.get_client()
        missing = []

        for table in TABLES:
            try:
                client.table(table).select("id").limit(1).execute()
            except Exception as e:
                logger.error(f"Table check failed for {table}: {e}")
                missing.append(table)

        if missing:
            raise DatabaseError(
                message=f"Missing or unreachable tables: {', '.join(missing)}",
                code="SCHEMA_MISSING",
                suggestion="Apply migrations/001_initial_schema.sql to the Supabase database",
                details={"tables": missing},
            )

        logger.info("Database tables ensured!")

    def ping(self) -> None:
        try:
            self.get_client().table("global_content").select("id").limit(1).execute()
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(
                message=f"Database ping failed: {e}",
                code="PING_FAILED",
            )

    # -------------------------------------------------------------------------
    # Admin users
    # -------------------------------------------------------------------------

    def fetch_admin_user(self, username: str) -> dict[str, Any] | None:
        client = self.get_client()

        try:
            response = (
                client.table("admin_users")
                .select("*")
                .eq("username", username)
                .limit(1)
                .execute()
            )
            return self._first(response)

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to fetch admin user: {e}",
                code="FETCH_ADMIN_USER_FAILED",
                details={"username": username}
            )

    def insert_admin_user(
        self,
        username: str,
        password_hash: str,
        role: str = "manager",
        stripe_customer_id: str | None = None,
    ) -> bool:
        client = self.get_client()

        data = {
            "username": username,
            "password_hash": password_hash,
            "role": role,
            "stripe_customer_id": stripe_customer_id,
        }

        try:
            # ignore_duplicates turns the upsert into INSERT ... ON CONFLICT DO NOTHING
            response = (
                client.table("admin_users")
                .upsert(data, on_conflict="username", ignore_duplicates=True)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to insert admin user: {e}",
                code="INSERT_ADMIN_USER_FAILED",
                details={"username": username}
            )

    # -------------------------------------------------------------------------
    # Contact submissions
    # -------------------------------------------------------------------------

    def insert_contact_submission(
        self,
        name: str,
        email: str,
        phone: str | None,
        message: str,
        created_at: int,
    ) -> dict[str, Any]:
        client = self.get_client()

        data = {
            "name": name,
            "email": email,
            "phone": phone,
            "message": message,
            "created_at": created_at,
        }

        try:
            response = client.table("contact_submissions").insert(data).execute()
            row = self._first(response)
            if row is None:
                raise DatabaseError(message="Insert returned no data", code="INSERT_NO_DATA")
            return row

        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(
                message=f"Failed to insert contact submission: {e}",
                code="INSERT_CONTACT_FAILED",
                details={"email": email}
            )

    def list_contact_submissions(self) -> list[dict[str, Any]]:
        client = self.get_client()

        try:
            response = (
                client.table("contact_submissions")
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to list contact submissions: {e}",
                code="LIST_CONTACTS_FAILED",
            )

    # -------------------------------------------------------------------------
    # Billing events
    # -------------------------------------------------------------------------

    def insert_billing_event(
        self,
        customer_id: str | None,
        event_type: str,
        details: dict[str, Any],
        timestamp: int,
    ) -> dict[str, Any]:
        client = self.get_client()

        data = {
            "customer_id": customer_id,
            "event_type": event_type,
            "details": details,
            "timestamp": timestamp,
        }

        try:
            response = client.table("billing_events").insert(data).execute()
            row = self._first(response)
            if row is None:
                raise DatabaseError(message="Insert returned no data", code="INSERT_NO_DATA")
            return row

        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(
                message=f"Failed to insert billing event: {e}",
                code="INSERT_BILLING_EVENT_FAILED",
                details={"event_type": event_type}
            )

    def list_billing_events(self) -> list[dict[str, Any]]:
        client = self.get_client()

        try:
            response = (
                client.table("billing_events")
                .select("*")
                .order("timestamp", desc=True)
                .execute()
            )
            events = response.data or []
            for event in events:
                event["details"] = event.get("details") or {}
            return events

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to list billing events: {e}",
                code="LIST_BILLING_EVENTS_FAILED",
            )

    # -------------------------------------------------------------------------
    # Global content
    # -------------------------------------------------------------------------

    def fetch_global_content(self) -> dict[str, str]:
        client = self.get_client()

        try:
            response = client.table("global_content").select("key, value").execute()
            return {row["key"]: row["value"] for row in response.data or []}

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to fetch global content: {e}",
                code="FETCH_GLOBAL_CONTENT_FAILED",
            )

    def seed_global_content(self, defaults: dict[str, str]) -> int:
        client = self.get_client()

        try:
            response = client.table("global_content").select("id", count="exact").limit(1).execute()
            if response.count:
                return 0

            rows = [{"key": key, "value": value} for key, value in defaults.items()]
            client.table("global_content").insert(rows).execute()
            logger.info("Database seeded with default global_content data")
            return len(rows)

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to seed global content: {e}",
                code="SEED_GLOBAL_CONTENT_FAILED",
            )

    # -------------------------------------------------------------------------
    # Locations & services
    # -------------------------------------------------------------------------

    def fetch_location(self, name: str) -> dict[str, Any] | None:
        client = self.get_client()

        try:
            response = (
                client.table("locations")
                .select("*")
                .eq("name", name)
                .limit(1)
                .execute()
            )
            return self._first(response)

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to fetch location: {e}",
                code="FETCH_LOCATION_FAILED",
                details={"name": name}
            )

    def fetch_service(self, slug: str, location_id: int) -> dict[str, Any] | None:
        client = self.get_client()

        try:
            response = (
                client.table("services")
                .select("*")
                .eq("slug", slug)
                .eq("location_id", location_id)
                .limit(1)
                .execute()
            )
            service = self._first(response)
            if service is not None:
                service["testimonials"] = service.get("testimonials") or []
                service["faqs"] = service.get("faqs") or []
            return service

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to fetch service: {e}",
                code="FETCH_SERVICE_FAILED",
                details={"slug": slug, "location_id": location_id}
            )

    def list_service_pages(self) -> list[dict[str, Any]]:
        client = self.get_client()

        try:
            # Embedded resource: PostgREST follows the services.location_id foreign key
            response = (
                client.table("services")
                .select("slug, name, locations(name)")
                .execute()
            )

            pages = [
                {
                    "slug": row["slug"],
                    "service_name": row["name"],
                    "location_name": (row.get("locations") or {}).get("name"),
                }
                for row in response.data or []
            ]
            pages = [page for page in pages if page["location_name"]]
            return sorted(pages, key=lambda p: (p["location_name"], p["service_name"]))

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to list service pages: {e}",
                code="LIST_SERVICE_PAGES_FAILED",
            )

    def ensure_location(self, name: str) -> dict[str, Any]:
        client = self.get_client()

        try:
            client.table("locations").upsert(
                {"name": name}, on_conflict="name", ignore_duplicates=True
            ).execute()
        except Exception as e:
            raise DatabaseError(
                message=f"Failed to insert location: {e}",
                code="INSERT_LOCATION_FAILED",
                details={"name": name}
            )

        location = self.fetch_location(name)
        if location is None:
            raise DatabaseError(message=f"Location vanished after insert: {name}", code="INSERT_NO_DATA")
        return location

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
        client = self.get_client()

        data = {
            "location_id": location_id,
            "name": name,
            "slug": slug,
            "description": description,
            "hero_image": hero_image,
            "cta_text": cta_text,
            "testimonials": testimonials or [],
            "faqs": faqs or [],
        }

        try:
            response = (
                client.table("services")
                .upsert(data, on_conflict="location_id,slug", ignore_duplicates=True)
                .execute()
            )
            return bool(response.data)

        except Exception as e:
            raise DatabaseError(
                message=f"Failed to insert service: {e}",
                code="INSERT_SERVICE_FAILED",
                details={"slug": slug, "location_id": location_id}
            )
