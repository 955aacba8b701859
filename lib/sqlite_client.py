# =============================================================================
# lib/sqlite_client.py - Embedded SQLite Backend
# =============================================================================
# Database implementation backed by a single SQLite file.
#
# A connection is opened per operation, so the object can be shared between
# the event loop and the threadpool that runs background tasks.
#
# Usage:
#   from lib.sqlite_client import SqliteDatabase
#   db = SqliteDatabase("truview-cms.db")
#   db.ensure_schema()
# =============================================================================

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from lib.database import Database, DatabaseError
from lib.schema import SQLITE_SCHEMA

logger = logging.getLogger(__name__)


def _decode_json(value: Any, default: Any) -> Any:
    """Decode a JSON TEXT column, falling back to default for NULL/garbage."""
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.warning(f"Could not decode JSON column value: {value[:50]!r}")
        return default


class SqliteDatabase(Database):
    """Embedded single-file store."""

    def __init__(self, path: str | Path):
        self.path = str(path)

    @contextmanager
    def _connect(self, operation: str) -> Iterator[sqlite3.Connection]:
        """
        Open a connection, commit on success, always close.

        Raises:
            DatabaseError: Wrapping any sqlite3 error
        """
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.Error as e:
            raise DatabaseError(
                message=f"Cannot open database file: {e}",
                code="SQLITE_CANTOPEN",
                suggestion="Check SQLITE_PATH and the file permissions of its directory",
                details={"path": self.path},
            ) from e

        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise DatabaseError(
                message=f"Failed to {operation}: {e}",
                code="SQLITE_ERROR",
                details={"path": self.path, "operation": operation},
            ) from e
        finally:
            conn.close()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def ensure_schema(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect("create tables") as conn:
            for statement in SQLITE_SCHEMA:
                conn.execute(statement)
        logger.info(f"Database tables ensured at {self.path}")

    def ping(self) -> None:
        with self._connect("ping database") as conn:
            conn.execute("SELECT 1").fetchone()

    # -------------------------------------------------------------------------
    # Admin users
    # -------------------------------------------------------------------------

    def fetch_admin_user(self, username: str) -> dict[str, Any] | None:
        with self._connect("fetch admin user") as conn:
            row = conn.execute(
                "SELECT * FROM admin_users WHERE username = ?",
                (username,),
            ).fetchone()
        return dict(row) if row else None

    def insert_admin_user(
        self,
        username: str,
        password_hash: str,
        role: str = "manager",
        stripe_customer_id: str | None = None,
    ) -> bool:
        with self._connect("insert admin user") as conn:
            cursor = conn.execute(
                """
                INSERT OR IGNORE INTO admin_users (username, password_hash, role, stripe_customer_id)
                VALUES (?, ?, ?, ?)
                """,
                (username, password_hash, role, stripe_customer_id),
            )
            return cursor.rowcount == 1

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
        with self._connect("insert contact submission") as conn:
            cursor = conn.execute(
                """
                INSERT INTO contact_submissions (name, email, phone, message, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, email, phone, message, created_at),
            )
            row_id = cursor.lastrowid

        return {
            "id": row_id,
            "name": name,
            "email": email,
            "phone": phone,
            "message": message,
            "created_at": created_at,
        }

    def list_contact_submissions(self) -> list[dict[str, Any]]:
        with self._connect("list contact submissions") as conn:
            rows = conn.execute(
                "SELECT * FROM contact_submissions ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [dict(row) for row in rows]

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
        with self._connect("insert billing event") as conn:
            cursor = conn.execute(
                """
                INSERT INTO billing_events (customer_id, event_type, details, timestamp)
                VALUES (?, ?, ?, ?)
                """,
                (customer_id, event_type, json.dumps(details), timestamp),
            )
            row_id = cursor.lastrowid

        return {
            "id": row_id,
            "customer_id": customer_id,
            "event_type": event_type,
            "details": details,
            "timestamp": timestamp,
        }

    def list_billing_events(self) -> list[dict[str, Any]]:
        with self._connect("list billing events") as conn:
            rows = conn.execute(
                "SELECT * FROM billing_events ORDER BY timestamp DESC, id DESC"
            ).fetchall()

        events = []
        for row in rows:
            event = dict(row)
            event["details"] = _decode_json(event.get("details"), {})
            events.append(event)
        return events

    # -------------------------------------------------------------------------
    # Global content
    # -------------------------------------------------------------------------

    def fetch_global_content(self) -> dict[str, str]:
        with self._connect("fetch global content") as conn:
            rows = conn.execute("SELECT key, value FROM global_content").fetchall()
        return {row["key"]: row["value"] for row in rows}

    def seed_global_content(self, defaults: dict[str, str]) -> int:
        with self._connect("seed global content") as conn:
            count = conn.execute("SELECT COUNT(*) AS count FROM global_content").fetchone()["count"]
            if count:
                return 0
            conn.executemany(
                "INSERT INTO global_content (key, value) VALUES (?, ?)",
                list(defaults.items()),
            )
        logger.info("Database seeded with default global_content data")
        return len(defaults)

    # -------------------------------------------------------------------------
    # Locations & services
    # -------------------------------------------------------------------------

    def fetch_location(self, name: str) -> dict[str, Any] | None:
        with self._connect("fetch location") as conn:
            row = conn.execute(
                "SELECT * FROM locations WHERE name = ?",
                (name,),
            ).fetchone()
        return dict(row) if row else None

    def fetch_service(self, slug: str, location_id: int) -> dict[str, Any] | None:
        with self._connect("fetch service") as conn:
            row = conn.execute(
                "SELECT * FROM services WHERE slug = ? AND location_id = ?",
                (slug, location_id),
            ).fetchone()

        if not row:
            return None

        service = dict(row)
        service["testimonials"] = _decode_json(service.get("testimonials"), [])
        service["faqs"] = _decode_json(service.get("faqs"), [])
        return service

    def list_service_pages(self) -> list[dict[str, Any]]:
        with self._connect("list service pages") as conn:
            rows = conn.execute(
                """
                SELECT services.slug AS slug,
                       services.name AS service_name,
                       locations.name AS location_name
                FROM services
                JOIN locations ON locations.id = services.location_id
                ORDER BY locations.name, services.name
                """
            ).fetchall()
        return [dict(row) for row in rows]

    def ensure_location(self, name: str) -> dict[str, Any]:
        with self._connect("ensure location") as conn:
            conn.execute("INSERT OR IGNORE INTO locations (name) VALUES (?)", (name,))
            row = conn.execute("SELECT * FROM locations WHERE name = ?", (name,)).fetchone()
        return dict(row)

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
        with self._connect("insert service") as conn:
            cursor = conn.execute(
                """
                INSERT OR IGNORE INTO services
                    (location_id, name, slug, description, hero_image, cta_text, testimonials, faqs)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    location_id,
                    name,
                    slug,
                    description,
                    hero_image,
                    cta_text,
                    json.dumps(testimonials or []),
                    json.dumps(faqs or []),
                ),
            )
            return cursor.rowcount == 1
