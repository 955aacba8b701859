# =============================================================================
# app/routers/admin.py - Admin Area
# =============================================================================
# Endpoints (signed-in users only; billing pages need the admin role):
#   GET /admin                     - Dashboard with contact submissions
#   GET /admin/contacts            - All contact submissions
#   GET /admin/billing-events      - Payment webhook log (admin)
#   GET /admin/billing-analytics   - Monthly billing numbers (admin)
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.auth import AdminUserDep, CurrentUser
from app.dependencies import DatabaseDep
from app.templating import render
from core.services.analytics_service import AnalyticsService
from core.services.billing_service import BillingService
from core.services.contact_service import ContactService

router = APIRouter()

CHECKOUT_MESSAGES = {
    "success": "Thanks! Your payment was received.",
    "cancelled": "Checkout was cancelled.",
}


@router.get("", response_class=HTMLResponse)
async def dashboard(request: Request, user: CurrentUser, db: DatabaseDep):
    """
    Admin dashboard.

    Shows the signed-in user, the number of contact submissions and the
    submissions themselves.
    """
    submissions = ContactService.list_submissions(db)
    checkout_status = request.query_params.get("checkout")
    return render(
        request,
        "admin/dashboard.html",
        db,
        {
            "user": user,
            "contacts": submissions,
            "contact_count": len(submissions),
            "checkout_message": CHECKOUT_MESSAGES.get(checkout_status),
        },
    )


@router.get("/contacts", response_class=HTMLResponse)
async def contacts(request: Request, user: CurrentUser, db: DatabaseDep):
    submissions = ContactService.list_submissions(db)
    return render(request, "admin/contacts.html", db, {"user": user, "contacts": submissions})


@router.get("/billing-events", response_class=HTMLResponse)
async def billing_events(request: Request, user: AdminUserDep, db: DatabaseDep):
    events = BillingService.list_events(db)
    return render(request, "admin/billing_events.html", db, {"user": user, "events": events})


@router.get("/billing-analytics", response_class=HTMLResponse)
async def billing_analytics(request: Request, user: AdminUserDep, db: DatabaseDep):
    """Completed checkouts and failed payments for the current month."""
    analytics = AnalyticsService.billing_analytics(db)
    return render(request, "admin/billing_analytics.html", db, {"user": user, "analytics": analytics})
