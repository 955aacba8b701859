# =============================================================================
# core/services/analytics_service.py - Billing Analytics
# =============================================================================
# Aggregates the billing_events log with pandas for the analytics page.
# All months are UTC calendar months.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from core.models.billing import BillingAnalytics, BillingEventType, MonthlyCount
from lib.database import Database
from lib.utils import MILLISECONDS_THRESHOLD

logger = logging.getLogger(__name__)


def summarize_billing_events(
    events: list[dict[str, Any]],
    now: datetime | None = None,
) -> BillingAnalytics:
    """
    Build billing analytics from billing_events rows.

    Args:
        events: Rows with at least event_type and timestamp (epoch seconds;
            millisecond values are scaled down)
        now: Reference time for "this month" (default: current UTC time)

    Returns:
        BillingAnalytics for the month containing `now`

    Example:
        analytics = summarize_billing_events(db.list_billing_events())
        analytics.completed_checkouts_this_month  # 4
    """
    now = now or datetime.now(timezone.utc)
    current_month = now.strftime("%Y-%m")

    df = pd.DataFrame(events, columns=["event_type", "timestamp"])
    df = df.dropna(subset=["event_type", "timestamp"]).copy()

    if df.empty:
        return BillingAnalytics(month=current_month)

    seconds = df["timestamp"].astype("int64")
    seconds = seconds.where(seconds <= MILLISECONDS_THRESHOLD, seconds // 1000)
    df["month"] = pd.to_datetime(seconds, unit="s", utc=True).dt.strftime("%Y-%m")

    checkouts = df[df["event_type"] == BillingEventType.CHECKOUT_COMPLETED.value]
    monthly = checkouts.groupby("month").size().sort_index()

    failed_this_month = df[
        (df["event_type"] == BillingEventType.INVOICE_PAYMENT_FAILED.value)
        & (df["month"] == current_month)
    ]

    by_type = df["event_type"].value_counts()

    return BillingAnalytics(
        month=current_month,
        completed_checkouts_this_month=int(monthly.get(current_month, 0)),
        failed_payments_this_month=len(failed_this_month),
        total_events=len(df),
        events_by_type={str(k): int(v) for k, v in by_type.items()},
        monthly_checkouts=[
            MonthlyCount(month=str(month), count=int(count))
            for month, count in monthly.items()
        ],
    )


class AnalyticsService:
    """Analytics over stored data."""

    @staticmethod
    def billing_analytics(db: Database, now: datetime | None = None) -> BillingAnalytics:
        events = db.list_billing_events()
        analytics = summarize_billing_events(events, now=now)
        logger.debug(
            f"Billing analytics for {analytics.month}: "
            f"{analytics.completed_checkouts_this_month} completed checkouts"
        )
        return analytics
