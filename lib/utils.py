# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import time
from datetime import datetime, timezone

# Epoch values above this are milliseconds (1e11 seconds is year 5138)
MILLISECONDS_THRESHOLD = 1e11

# =============================================================================
# Timestamp Utilities
# =============================================================================
# Rows store Unix epoch seconds (the same in SQLite and Postgres).

def utc_now_epoch() -> int:
    """Current time as whole Unix seconds."""
    return int(time.time())


def epoch_to_datetime(value: int | float | None) -> datetime | None:
    """
    Convert stored epoch seconds to an aware UTC datetime.

    Millisecond values (from rows written by older JavaScript tooling) are
    detected by magnitude and scaled down.

    Example:
        epoch_to_datetime(1700000000)      # 2023-11-14 22:13:20+00:00
        epoch_to_datetime(1700000000000)   # same instant
    """
    if value is None:
        return None
    seconds = float(value)
    if seconds > MILLISECONDS_THRESHOLD:
        seconds /= 1000
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def format_timestamp(value: int | float | None, fmt: str = "%Y-%m-%d %H:%M UTC") -> str:
    """Human-readable timestamp for admin tables; empty string for NULL."""
    dt = epoch_to_datetime(value)
    return dt.strftime(fmt) if dt else ""
