# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - admin.py: AdminUser and roles
# - contact.py: contact form input and stored submissions
# - billing.py: billing events and analytics
# - content.py: locations, services and landing pages
# =============================================================================

from .admin import AdminRole, AdminUser

from .contact import ContactSubmission, ContactSubmissionCreate

from .billing import (
    BillingAnalytics,
    BillingEvent,
    BillingEventType,
    MonthlyCount,
)

from .content import (
    FaqItem,
    LandingPage,
    Location,
    ServiceContent,
    ServicePageLink,
    Testimonial,
)

__all__ = [
    # Admin
    "AdminRole",
    "AdminUser",
    # Contact
    "ContactSubmission",
    "ContactSubmissionCreate",
    # Billing
    "BillingAnalytics",
    "BillingEvent",
    "BillingEventType",
    "MonthlyCount",
    # Content
    "FaqItem",
    "LandingPage",
    "Location",
    "ServiceContent",
    "ServicePageLink",
    "Testimonial",
]
