# =============================================================================
# lib/ - Infrastructure Adapters
# =============================================================================
# This package contains the adapters for everything outside the process:
# - database.py: Database interface, DatabaseError, backend factory
# - sqlite_client.py / supabase_client.py: the two storage backends
# - schema.py: SQLite DDL
# - captcha.py: CAPTCHA token verification
# - notifications.py: email (SMTP) and SMS (Twilio) delivery
# - payments.py: Stripe webhooks, checkout and billing portal
# - utils.py: timestamp helpers
# =============================================================================

from lib.database import Database, DatabaseError, create_database, get_database
from lib.utils import epoch_to_datetime, format_timestamp, utc_now_epoch

__all__ = [
    # Database
    "Database",
    "DatabaseError",
    "create_database",
    "get_database",
    # Utils
    "epoch_to_datetime",
    "format_timestamp",
    "utc_now_epoch",
]
