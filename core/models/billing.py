# =============================================================================
# core/models/billing.py - Billing Event & Analytics Schemas
# =============================================================================
# Billing events are an append-only log of every verified payment webhook.
# BillingAnalytics is the view model for /admin/billing-analytics.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class BillingEventType(str, Enum):
    """Webhook event types that get special handling. Everything else is only logged."""
    CHECKOUT_COMPLETED = "checkout.session.completed"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"


class BillingEvent(BaseModel):
    """
    A row of the billing_events table.

    `details` holds the full webhook event, verbatim.
    """

    id: int
    customer_id: str | None = None
    event_type: str
    details: dict[str, Any] = Field(default_factory=dict)
    # Unix epoch seconds
    timestamp: int | None = None


class MonthlyCount(BaseModel):
    """Number of events in one calendar month."""
    month: str = Field(..., description="YYYY-MM")
    count: int = Field(default=0, ge=0)


class BillingAnalytics(BaseModel):
    """
    Aggregated billing statistics.

    Example:
        {
            "month": "2026-10",
            "completed_checkouts_this_month": 4,
            "failed_payments_this_month": 1,
            "total_events": 23,
            "events_by_type": {"checkout.session.completed": 9, ...},
            "monthly_checkouts": [{"month": "2026-09", "count": 5}, ...]
        }
    """

    month: str = Field(..., description="Current month, YYYY-MM (UTC)")
    completed_checkouts_this_month: int = Field(default=0, ge=0)
    failed_payments_this_month: int = Field(default=0, ge=0)
    total_events: int = Field(default=0, ge=0)
    events_by_type: dict[str, int] = Field(default_factory=dict)
    monthly_checkouts: list[MonthlyCount] = Field(default_factory=list)
