# =============================================================================
# tests/test_database.py - Database Backend & Seeding Tests
# =============================================================================
# Tests for the SQLite and Supabase Database implementations and seeding:
# - Schema creation is idempotent
# - Insert-or-ignore semantics for admin users, locations, services
# - Newest-first ordering of the admin listings
# - JSON columns round-trip as Python lists/dicts
# - Supabase schema check, upsert-ignore seeding and embedded joins (mock client)
#
# Run with: pytest tests/test_database.py -v
# =============================================================================

import sqlite3
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from core.models.admin import AdminRole
from core.services.content_service import DEFAULT_GLOBAL_CONTENT, ContentService
from core.services.seed_service import DEMO_LOCATIONS, DEMO_SERVICES, SeedService
from lib.database import TABLES, DatabaseError, create_database
from lib.sqlite_client import SqliteDatabase
from lib.supabase_client import SupabaseDatabase


# =============================================================================
# Schema
# =============================================================================

class TestSchema:
    """Tests for ensure_schema."""

    def test_ensure_schema_is_idempotent(self, db):
        db.ensure_schema()
        db.ensure_schema()

        db.ping()

    def test_creates_parent_directory(self, tmp_path):
        database = SqliteDatabase(tmp_path / "nested" / "dir" / "cms.db")

        database.ensure_schema()

        assert (tmp_path / "nested" / "dir" / "cms.db").exists()

    def test_missing_tables_raise_database_error(self, tmp_path):
        """Queries before ensure_schema fail with DatabaseError, not sqlite3 errors."""
        database = SqliteDatabase(tmp_path / "empty.db")

        with pytest.raises(DatabaseError) as exc_info:
            database.list_contact_submissions()

        assert not isinstance(exc_info.value, sqlite3.Error)


class TestCreateDatabase:
    def test_sqlite_backend(self, tmp_path):
        settings = SimpleNamespace(DATABASE_BACKEND="sqlite", SQLITE_PATH=str(tmp_path / "x.db"))

        assert isinstance(create_database(settings), SqliteDatabase)

    def test_supabase_without_credentials(self):
        settings = SimpleNamespace(DATABASE_BACKEND="supabase", SUPABASE_URL=None, SUPABASE_SERVICE_KEY=None)

        with pytest.raises(DatabaseError) as exc_info:
            create_database(settings)

        assert exc_info.value.code == "SUPABASE_NOT_CONFIGURED"


# =============================================================================
# Admin users
# =============================================================================

class TestAdminUsers:
    def test_insert_and_fetch(self, db):
        created = db.insert_admin_user("owner", "$2b$10$hash", role="admin", stripe_customer_id="cus_1")

        row = db.fetch_admin_user("owner")

        assert created is True
        assert row["username"] == "owner"
        assert row["role"] == "admin"
        assert row["stripe_customer_id"] == "cus_1"

    def test_duplicate_username_ignored(self, db):
        """Second insert with the same username keeps the first row."""
        db.insert_admin_user("owner", "$2b$10$first")

        created = db.insert_admin_user("owner", "$2b$10$second")

        assert created is False
        assert db.fetch_admin_user("owner")["password_hash"] == "$2b$10$first"

    def test_unknown_user(self, db):
        assert db.fetch_admin_user("nobody") is None

    def test_username_lookup_is_exact(self, db):
        db.insert_admin_user("owner", "$2b$10$hash")

        assert db.fetch_admin_user("Owner") is None

    def test_invalid_role_not_stored(self, db):
        created = db.insert_admin_user("owner", "$2b$10$hash", role="superuser")

        assert created is False
        assert db.fetch_admin_user("owner") is None


# =============================================================================
# Contact submissions & billing events
# =============================================================================

class TestContactSubmissions:
    def test_listing_is_newest_first(self, db):
        db.insert_contact_submission("First", "a@truviewglass.com", None, "one", created_at=1000)
        db.insert_contact_submission("Third", "c@truviewglass.com", None, "three", created_at=3000)
        db.insert_contact_submission("Second", "b@truviewglass.com", "555", "two", created_at=2000)

        names = [row["name"] for row in db.list_contact_submissions()]

        assert names == ["Third", "Second", "First"]

    def test_insert_returns_row_with_id(self, db):
        row = db.insert_contact_submission("Dana", "dana@truviewglass.com", None, "hello", created_at=1000)

        assert row["id"] >= 1
        assert row["phone"] is None


class TestBillingEvents:
    def test_details_round_trip(self, db):
        details = {"id": "evt_1", "type": "invoice.paid", "data": {"object": {"amount_paid": 4900}}}

        db.insert_billing_event("cus_1", "invoice.paid", details, timestamp=1700000000)
        rows = db.list_billing_events()

        assert rows[0]["details"] == details
        assert rows[0]["customer_id"] == "cus_1"

    def test_listing_is_newest_first(self, db):
        db.insert_billing_event(None, "a", {}, timestamp=10)
        db.insert_billing_event(None, "b", {}, timestamp=30)
        db.insert_billing_event(None, "c", {}, timestamp=20)

        assert [row["event_type"] for row in db.list_billing_events()] == ["b", "c", "a"]


# =============================================================================
# Content
# =============================================================================

class TestContent:
    def test_global_content_seeded_once(self, db):
        """The db fixture already seeded; seeding again inserts nothing."""
        assert db.seed_global_content({"site_name": "Other"}) == 0
        assert db.fetch_global_content() == DEFAULT_GLOBAL_CONTENT

    def test_global_content_merges_defaults(self, tmp_path):
        database = SqliteDatabase(tmp_path / "cms.db")
        database.ensure_schema()
        database.seed_global_content({"phone": "512-555-0100"})

        content = ContentService.get_global_content(database)

        assert content["site_name"] == DEFAULT_GLOBAL_CONTENT["site_name"]
        assert content["phone"] == "512-555-0100"

    def test_ensure_location_is_idempotent(self, db):
        first = db.ensure_location("Austin")
        second = db.ensure_location("Austin")

        assert first["id"] == second["id"]

    def test_service_slug_unique_per_location(self, db):
        austin = db.ensure_location("Austin")
        round_rock = db.ensure_location("Round Rock")

        assert db.insert_service(austin["id"], "Windshield Repair", "windshield-repair", "d") is True
        assert db.insert_service(austin["id"], "Windshield Repair", "windshield-repair", "d") is False
        assert db.insert_service(round_rock["id"], "Windshield Repair", "windshield-repair", "d") is True

    def test_service_requires_existing_location(self, db):
        with pytest.raises(DatabaseError):
            db.insert_service(999, "Windshield Repair", "windshield-repair", "d")

    def test_fetch_service_decodes_json(self, db):
        austin = db.ensure_location("Austin")
        db.insert_service(
            austin["id"],
            "Windshield Repair",
            "windshield-repair",
            "d",
            testimonials=[{"author": "Sam", "quote": "Great"}],
            faqs=[{"question": "Q?", "answer": "A."}],
        )

        service = db.fetch_service("windshield-repair", austin["id"])

        assert service["testimonials"] == [{"author": "Sam", "quote": "Great"}]
        assert service["faqs"] == [{"question": "Q?", "answer": "A."}]

    def test_list_service_pages(self, db):
        austin = db.ensure_location("Austin")
        db.insert_service(austin["id"], "Windshield Repair", "windshield-repair", "d")

        assert db.list_service_pages() == [
            {"slug": "windshield-repair", "service_name": "Windshield Repair", "location_name": "Austin"}
        ]


# =============================================================================
# Seeding
# =============================================================================

class TestSeedService:
    def test_seed_all_creates_everything(self, tmp_path):
        database = SqliteDatabase(tmp_path / "seed.db")

        report = SeedService.seed_all(database)

        assert report.global_content_rows == len(DEFAULT_GLOBAL_CONTENT)
        assert report.admin_created is True
        assert report.locations == DEMO_LOCATIONS
        assert report.services_created == len(DEMO_LOCATIONS) * len(DEMO_SERVICES)
        assert database.fetch_admin_user("admin")["role"] == AdminRole.ADMIN.value

    def test_seed_all_twice_creates_nothing_new(self, tmp_path):
        """Duplicate seeding never creates a second admin row."""
        database = SqliteDatabase(tmp_path / "seed.db")
        SeedService.seed_all(database)

        report = SeedService.seed_all(database)

        assert report.global_content_rows == 0
        assert report.admin_created is False
        assert report.services_created == 0
        assert len(database.list_service_pages()) == len(DEMO_LOCATIONS) * len(DEMO_SERVICES)

    def test_seed_without_demo_content(self, tmp_path):
        database = SqliteDatabase(tmp_path / "seed.db")

        report = SeedService.seed_all(database, admin_username="owner", include_demo_content=False)

        assert report.locations == []
        assert database.list_service_pages() == []
        assert database.fetch_admin_user("owner") is not None


# =============================================================================
# Supabase backend
# =============================================================================

def supabase_db(client):
    """SupabaseDatabase wired to a mock client instead of a live project."""
    database = SupabaseDatabase("https://example.supabase.co", "service-key")
    database._client = client
    return database


class TestSupabaseDatabase:
    """Tests for the PostgREST backend with the supabase client mocked out."""

    def test_ensure_schema_reports_missing_tables(self):
        client = MagicMock()
        client.table.return_value.select.return_value.limit.return_value.execute.side_effect = (
            Exception('relation "admin_users" does not exist')
        )
        database = supabase_db(client)

        with pytest.raises(DatabaseError) as exc_info:
            database.ensure_schema()

        assert exc_info.value.code == "SCHEMA_MISSING"
        assert "migrations/" in exc_info.value.suggestion
        assert set(exc_info.value.details["tables"]) == set(TABLES)

    def test_ensure_schema_passes_when_tables_reachable(self):
        client = MagicMock()
        database = supabase_db(client)

        database.ensure_schema()

        checked = {call.args[0] for call in client.table.call_args_list}
        assert checked == set(TABLES)

    def test_insert_admin_user_ignores_duplicates(self):
        client = MagicMock()
        upsert = client.table.return_value.upsert
        upsert.return_value.execute.return_value = SimpleNamespace(data=[])
        database = supabase_db(client)

        created = database.insert_admin_user("owner", "hash", role="admin")

        assert created is False
        client.table.assert_called_with("admin_users")
        assert upsert.call_args.kwargs == {"on_conflict": "username", "ignore_duplicates": True}

    def test_insert_admin_user_created(self):
        client = MagicMock()
        client.table.return_value.upsert.return_value.execute.return_value = SimpleNamespace(
            data=[{"id": 1, "username": "owner"}]
        )

        assert supabase_db(client).insert_admin_user("owner", "hash") is True

    def test_list_service_pages_flattens_embedded_location(self):
        client = MagicMock()
        select = client.table.return_value.select
        select.return_value.execute.return_value = SimpleNamespace(data=[
            {"slug": "windshield-repair", "name": "Windshield Repair", "locations": {"name": "Dallas"}},
            {"slug": "auto-glass", "name": "Auto Glass", "locations": {"name": "Austin"}},
            {"slug": "chip-repair", "name": "Chip Repair", "locations": {"name": "Austin"}},
            {"slug": "orphan", "name": "Orphan", "locations": None},
        ])
        database = supabase_db(client)

        pages = database.list_service_pages()

        select.assert_called_once_with("slug, name, locations(name)")
        assert pages == [
            {"slug": "auto-glass", "service_name": "Auto Glass", "location_name": "Austin"},
            {"slug": "chip-repair", "service_name": "Chip Repair", "location_name": "Austin"},
            {"slug": "windshield-repair", "service_name": "Windshield Repair", "location_name": "Dallas"},
        ]

    def test_driver_errors_wrapped(self):
        client = MagicMock()
        client.table.return_value.select.return_value.order.return_value.execute.side_effect = (
            ConnectionError("connection reset")
        )
        database = supabase_db(client)

        with pytest.raises(DatabaseError) as exc_info:
            database.list_contact_submissions()

        assert exc_info.value.code == "LIST_CONTACTS_FAILED"
        assert "connection reset" in exc_info.value.message

    def test_ping_wraps_errors(self):
        client = MagicMock()
        client.table.return_value.select.return_value.limit.return_value.execute.side_effect = (
            TimeoutError("timed out")
        )

        with pytest.raises(DatabaseError) as exc_info:
            supabase_db(client).ping()

        assert exc_info.value.code == "PING_FAILED"
