# =============================================================================
# core/models/contact.py - Contact Submission Schemas
# =============================================================================
# - ContactSubmissionCreate: validated input from the public contact form
# - ContactSubmission: a stored row, as listed on the admin pages
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from lib.utils import epoch_to_datetime


class ContactSubmissionCreate(BaseModel):
    """
    Input for a new contact submission.

    Example:
        {
            "name": "Jane Doe",
            "email": "jane@truviewglass.com",
            "phone": "512-555-0100",
            "message": "My windshield has a chip."
        }
    """

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=80)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("name", "email", "message", "phone", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value

    @field_validator("phone")
    @classmethod
    def blank_phone_is_none(cls, value: str | None) -> str | None:
        return value or None


class ContactSubmission(BaseModel):
    """A stored contact submission."""

    id: int
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = None
    # Unix epoch seconds
    created_at: int | None = None

    @property
    def created_at_datetime(self) -> datetime | None:
        return epoch_to_datetime(self.created_at)
