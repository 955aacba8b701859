# =============================================================================
# lib/schema.py - SQLite Schema
# =============================================================================
# DDL for the embedded database. Every statement is idempotent so the schema
# can be ensured on each startup. The Postgres equivalent lives in
# migrations/001_initial_schema.sql.
#
# Timestamps are Unix epoch seconds.
# =============================================================================

SQLITE_SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS global_content (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        key TEXT NOT NULL UNIQUE,
        value TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS admin_users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'manager' CHECK (role IN ('manager', 'admin')),
        stripe_customer_id TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS contact_submissions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT,
        email TEXT,
        phone TEXT,
        message TEXT,
        created_at INTEGER DEFAULT (strftime('%s', 'now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS billing_events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        customer_id TEXT,
        event_type TEXT,
        details TEXT,
        timestamp INTEGER DEFAULT (strftime('%s', 'now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS locations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS services (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        location_id INTEGER NOT NULL REFERENCES locations(id),
        name TEXT NOT NULL,
        slug TEXT NOT NULL,
        description TEXT,
        hero_image TEXT,
        cta_text TEXT,
        testimonials TEXT DEFAULT '[]',
        faqs TEXT DEFAULT '[]',
        UNIQUE (location_id, slug)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_contact_submissions_created_at ON contact_submissions (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_billing_events_timestamp ON billing_events (timestamp)",
)
