# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the site.
# Browser requests get the rendered error page, everything else gets JSON.
# =============================================================================

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class TruViewException(Exception):
    """
    Base exception for the TruView site.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "TRUVIEW_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Landing Page Exceptions
# =============================================================================

class LocationNotFoundError(TruViewException):
    """Raised when no location matches the requested name."""

    def __init__(self, location: str):
        super().__init__(
            message=f"Location not found: {location}",
            code="LOCATION_NOT_FOUND",
            status_code=404,
            suggestion="Check the spelling of the location in the URL",
            details={"location": location}
        )


class ServiceNotFoundError(TruViewException):
    """Raised when a service slug doesn't exist for a location."""

    def __init__(self, service_slug: str, location: str):
        super().__init__(
            message=f"Service not found: {service_slug} in {location}",
            code="SERVICE_NOT_FOUND",
            status_code=404,
            suggestion="See /sitemap.xml for the list of available service pages",
            details={"service_slug": service_slug, "location": location}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class LoginRequiredError(TruViewException):
    """Raised when an admin page is requested without a session."""

    def __init__(self, location: str = "/admin/login"):
        super().__init__(
            message="Login required",
            code="LOGIN_REQUIRED",
            status_code=status.HTTP_303_SEE_OTHER,
        )
        self.location = location


class ForbiddenError(TruViewException):
    """Raised when the signed-in user's role cannot access a page."""

    def __init__(self, role: str, allowed: list[str]):
        super().__init__(
            message="You do not have access to this page",
            code="FORBIDDEN",
            status_code=403,
            suggestion=f"Sign in with one of these roles: {', '.join(allowed)}",
            details={"role": role, "allowed_roles": allowed}
        )


# =============================================================================
# Billing Exceptions
# =============================================================================

class WebhookSignatureError(TruViewException):
    """Raised when a webhook payload fails signature verification."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Webhook Error: {error}",
            code="WEBHOOK_SIGNATURE_INVALID",
            status_code=400,
            suggestion="Check that STRIPE_WEBHOOK_SECRET matches the endpoint's signing secret",
        )


class PaymentProviderError(TruViewException):
    """Raised when a call to the payment provider fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Payment provider error during {operation}: {error}",
            code="PAYMENT_PROVIDER_ERROR",
            status_code=502,
            suggestion="Check STRIPE_SECRET_KEY and STRIPE_PRICE_ID",
            details={"operation": operation}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


async def truview_exception_handler(
    request: Request,
    exc: TruViewException
) -> Response:
    """
    Convert TruViewException to a response.

    - LoginRequiredError: redirect to the login page
    - Browser requests: rendered error page
    - Everything else: JSON with detail, code, suggestion, details
    """
    if isinstance(exc, LoginRequiredError):
        return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)

    if _wants_html(request):
        from app.templating import render_error
        return render_error(request, exc.status_code, exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Log unexpected errors and return the generic failure message."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)
