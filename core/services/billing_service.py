# =============================================================================
# core/services/billing_service.py - Payment Webhook Business Logic
# =============================================================================
# Every verified webhook event is appended to billing_events verbatim.
# Two event types get extra handling:
# - checkout.session.completed: logged
# - invoice.payment_failed: dunning email with a billing portal link
# =============================================================================

import logging
from typing import Any

from app.exceptions import PaymentProviderError
from core.models.billing import BillingEvent, BillingEventType
from lib.database import Database
from lib.utils import utc_now_epoch

logger = logging.getLogger(__name__)


def _event_object(event: dict[str, Any]) -> dict[str, Any]:
    """The data.object of a webhook event, or {} when absent."""
    data = event.get("data") or {}
    obj = data.get("object") if isinstance(data, dict) else None
    return obj if isinstance(obj, dict) else {}


def extract_customer_id(event: dict[str, Any]) -> str | None:
    """
    Customer reference of a webhook event.

    Checkout sessions and invoices carry it in data.object.customer; customer
    events are the customer object itself.
    """
    obj = _event_object(event)
    customer = obj.get("customer")
    if isinstance(customer, dict):
        customer = customer.get("id")
    if not customer and obj.get("object") == "customer":
        customer = obj.get("id")
    return customer or None


def _format_amount(amount: Any, currency: Any) -> str | None:
    if not isinstance(amount, int):
        return None
    return f"{amount / 100:.2f} {str(currency or 'usd').upper()}"


class BillingService:
    """Records and reacts to payment webhook events."""

    @staticmethod
    def record_event(db: Database, event: dict[str, Any]) -> BillingEvent:
        """
        Append a webhook event to the billing log.

        Raises:
            DatabaseError: If the insert fails
        """
        row = db.insert_billing_event(
            customer_id=extract_customer_id(event),
            event_type=str(event.get("type")),
            details=event,
            timestamp=utc_now_epoch(),
        )
        billing_event = BillingEvent(**row)
        logger.info(
            f"Billing event logged: {billing_event.event_type} "
            f"(id={billing_event.id}, customer={billing_event.customer_id})"
        )
        return billing_event

    @staticmethod
    def list_events(db: Database) -> list[BillingEvent]:
        """All billing events, newest first."""
        return [BillingEvent(**row) for row in db.list_billing_events()]

    @staticmethod
    def needs_dunning(event: dict[str, Any]) -> bool:
        return event.get("type") == BillingEventType.INVOICE_PAYMENT_FAILED.value

    @staticmethod
    def handle_event(event: dict[str, Any]) -> None:
        """Synchronous side effects of an event (logging only)."""
        event_type = event.get("type")

        if event_type == BillingEventType.CHECKOUT_COMPLETED.value:
            logger.info(f"Checkout completed for customer {extract_customer_id(event)}")
        elif event_type == BillingEventType.INVOICE_PAYMENT_FAILED.value:
            logger.warning(f"Invoice payment failed for customer {extract_customer_id(event)}")
        else:
            logger.debug(f"No handler for billing event type {event_type}")

    @staticmethod
    def send_dunning_notice(event: dict[str, Any], gateway, notifier, return_url: str) -> bool:
        """
        Email the customer of a failed invoice a billing portal link.

        Runs after the webhook response; every failure is logged, never raised.

        Returns:
            True if the email was sent
        """
        invoice = _event_object(event)
        customer_id = extract_customer_id(event)
        email = invoice.get("customer_email")

        if not customer_id or not email:
            logger.warning(
                f"Cannot send dunning email for event {event.get('id')}: "
                f"customer={customer_id}, email={email}"
            )
            return False

        try:
            portal_url = gateway.create_billing_portal_session(customer_id, return_url)
        except PaymentProviderError as e:
            logger.error(f"Dunning skipped for {customer_id}: {e.message}")
            return False

        amount = _format_amount(invoice.get("amount_due"), invoice.get("currency"))
        sent = notifier.send_dunning_email(email, portal_url, amount)
        if sent:
            logger.info(f"Dunning email sent to {email} for customer {customer_id}")
        return sent
