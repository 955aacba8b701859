# =============================================================================
# app/routers/billing.py - Stripe Checkout & Webhook
# =============================================================================
# Endpoints:
#   POST /create-checkout-session  - Start a hosted checkout (signed-in users)
#   POST /webhook                  - Stripe event receiver (signature checked)
# =============================================================================

import logging

from fastapi import APIRouter, BackgroundTasks, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from app.auth import CurrentUser
from app.config import settings
from app.dependencies import DatabaseDep, NotifierDep, PaymentsDep
from app.exceptions import PaymentProviderError, WebhookSignatureError
from app.templating import flash
from core.services.billing_service import BillingService
from lib.database import DatabaseError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-checkout-session")
async def create_checkout_session(request: Request, user: CurrentUser, gateway: PaymentsDep):
    """
    Redirect the signed-in user to a Stripe-hosted checkout page.

    Stripe sends the user back to /admin with ?checkout=success or
    ?checkout=cancelled.
    """
    try:
        url = gateway.create_checkout_session(
            success_url=f"{settings.site_url}/admin?checkout=success",
            cancel_url=f"{settings.site_url}/admin?checkout=cancelled",
            customer_id=user.stripe_customer_id,
        )
    except PaymentProviderError as e:
        logger.error(f"Checkout session for {user.username} failed: {e.message}")
        flash(request, "Unable to start checkout. Please try again later.", "danger")
        return RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)

    logger.info(f"Checkout session created for {user.username}")
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    db: DatabaseDep,
    gateway: PaymentsDep,
    notifier: NotifierDep,
):
    """
    Receive a Stripe event.

    The raw body is verified against the Stripe-Signature header before
    anything is stored. Verified events are appended to billing_events;
    failed invoices trigger a dunning email after the response is sent.

    Returns:
        {"received": true}, or 400 {"detail": "Webhook Error: ..."} when the
        signature fails or the event cannot be stored
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        event = gateway.construct_event(payload, signature)
    except WebhookSignatureError as e:
        logger.warning(f"Rejected webhook: {e.message}")
        return JSONResponse(status_code=e.status_code, content={"detail": e.message})

    try:
        BillingService.record_event(db, event)
    except DatabaseError as e:
        logger.error(f"Could not store webhook event {event.get('id')}: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": f"Webhook Error: {e.message}"},
        )

    BillingService.handle_event(event)

    if BillingService.needs_dunning(event):
        background_tasks.add_task(
            BillingService.send_dunning_notice,
            event,
            gateway,
            notifier,
            return_url=f"{settings.site_url}/",
        )

    return {"received": True}
