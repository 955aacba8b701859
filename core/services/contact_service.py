# =============================================================================
# core/services/contact_service.py - Contact Form Business Logic
# =============================================================================

import logging

from core.models.contact import ContactSubmission, ContactSubmissionCreate
from lib.database import Database
from lib.utils import utc_now_epoch

logger = logging.getLogger(__name__)


class ContactService:
    """Stores and lists contact form submissions."""

    @staticmethod
    def submit(db: Database, data: ContactSubmissionCreate) -> ContactSubmission:
        """
        Insert one contact submission stamped with the current time.

        Raises:
            DatabaseError: If the insert fails
        """
        row = db.insert_contact_submission(
            name=data.name,
            email=str(data.email),
            phone=data.phone,
            message=data.message,
            created_at=utc_now_epoch(),
        )
        submission = ContactSubmission(**row)
        logger.info(f"Contact submission saved (id={submission.id})")
        return submission

    @staticmethod
    def list_submissions(db: Database) -> list[ContactSubmission]:
        """All submissions, newest first."""
        return [ContactSubmission(**row) for row in db.list_contact_submissions()]
