# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthService
from .contact_service import ContactService
from .content_service import ContentService, render_description
from .billing_service import BillingService, extract_customer_id
from .analytics_service import AnalyticsService, summarize_billing_events
from .seed_service import SeedReport, SeedService

__all__ = [
    "AuthService",
    "ContactService",
    "ContentService",
    "render_description",
    "BillingService",
    "extract_customer_id",
    "AnalyticsService",
    "summarize_billing_events",
    "SeedReport",
    "SeedService",
]
