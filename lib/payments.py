# =============================================================================
# lib/payments.py - Stripe Gateway
# =============================================================================
# Thin wrapper around the Stripe SDK for the three things the site does:
# - Verify webhook signatures and decode the event payload
# - Create Checkout sessions
# - Create billing portal sessions (used for dunning emails)
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

import stripe

from app.exceptions import PaymentProviderError, WebhookSignatureError

logger = logging.getLogger(__name__)

# Seconds a signed webhook stays valid
WEBHOOK_TOLERANCE_SECONDS = 300


class StripeGateway:
    """Stripe operations with the API key passed per request."""

    def __init__(
        self,
        api_key: str | None,
        webhook_secret: str | None,
        price_id: str | None = None,
        checkout_mode: str = "subscription",
    ):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.price_id = price_id
        self.checkout_mode = checkout_mode

    @classmethod
    def from_settings(cls, settings) -> "StripeGateway":
        return cls(
            api_key=settings.STRIPE_SECRET_KEY,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
            price_id=settings.STRIPE_PRICE_ID,
            checkout_mode=settings.STRIPE_CHECKOUT_MODE,
        )

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    def construct_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """
        Verify a webhook signature and decode the event.

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the Stripe-Signature header

        Returns:
            The event as a plain dict

        Raises:
            WebhookSignatureError: Missing secret/header, bad signature or bad JSON
        """
        if not self.webhook_secret:
            raise WebhookSignatureError("webhook secret is not configured")
        if not signature:
            raise WebhookSignatureError("missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise WebhookSignatureError("payload is not valid UTF-8")

        try:
            stripe.WebhookSignature.verify_header(
                body, signature, self.webhook_secret, WEBHOOK_TOLERANCE_SECONDS
            )
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(str(e))

        try:
            event = json.loads(body)
        except json.JSONDecodeError as e:
            raise WebhookSignatureError(f"invalid payload: {e}")

        if not isinstance(event, dict) or "type" not in event:
            raise WebhookSignatureError("payload is not an event object")
        return event

    # -------------------------------------------------------------------------
    # Checkout & billing portal
    # -------------------------------------------------------------------------

    def create_checkout_session(
        self,
        success_url: str,
        cancel_url: str,
        customer_id: str | None = None,
    ) -> str:
        """
        Create a Checkout session for the configured price.

        Returns:
            URL of the Stripe-hosted checkout page
        """
        if not self.api_key or not self.price_id:
            raise PaymentProviderError("checkout", "Stripe is not configured")

        params: dict[str, Any] = {
            "mode": self.checkout_mode,
            "line_items": [{"price": self.price_id, "quantity": 1}],
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_id:
            params["customer"] = customer_id

        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session failed: {e}")
            raise PaymentProviderError("checkout", str(e))

        logger.info(f"Created checkout session {session.id}")
        return session.url

    def create_billing_portal_session(self, customer_id: str, return_url: str) -> str:
        """
        Create a billing portal session so a customer can fix their payment method.

        Returns:
            URL of the Stripe-hosted billing portal
        """
        if not self.api_key:
            raise PaymentProviderError("billing portal", "Stripe is not configured")

        try:
            session = stripe.billing_portal.Session.create(
                api_key=self.api_key,
                customer=customer_id,
                return_url=return_url,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe billing portal session failed for {customer_id}: {e}")
            raise PaymentProviderError("billing portal", str(e))

        return session.url
