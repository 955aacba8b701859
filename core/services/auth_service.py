# =============================================================================
# core/services/auth_service.py - Admin Authentication
# =============================================================================
# Password hashing and credential checks for admin users (bcrypt).
# =============================================================================

import logging

import bcrypt

from core.models.admin import AdminUser
from lib.database import Database

logger = logging.getLogger(__name__)

# Cost factor for new hashes; matches the $2b$10$ hashes already in the table
BCRYPT_ROUNDS = 10

# Checked when the username doesn't exist so both paths take the same time
_DUMMY_HASH = bcrypt.hashpw(b"truview-dummy-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))


class AuthService:
    """Credential checks against the admin_users table."""

    @staticmethod
    def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
        """Hash a password for storage in admin_users.password_hash."""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """
        Compare a password with a stored bcrypt hash.

        Malformed hashes count as a mismatch.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    @staticmethod
    def authenticate(db: Database, username: str, password: str) -> AdminUser | None:
        """
        Look up a user and check their password.

        Args:
            db: Database to read admin_users from
            username: Exact username
            password: Plain-text password from the login form

        Returns:
            The AdminUser on success, None on unknown user or wrong password

        Raises:
            DatabaseError: If the lookup fails
        """
        row = db.fetch_admin_user(username) if username else None

        if row is None:
            bcrypt.checkpw(password.encode("utf-8"), _DUMMY_HASH)
            logger.info(f"Login failed for unknown user: {username!r}")
            return None

        if not AuthService.verify_password(password, row["password_hash"]):
            logger.info(f"Login failed for user: {username!r}")
            return None

        logger.info(f"Login succeeded for user: {username!r}")
        return AdminUser(**row)
