# =============================================================================
# app/routers/contact.py - Contact Form
# =============================================================================
# Endpoints:
#   GET  /contact  - Contact form with the CAPTCHA widget
#   POST /contact  - Verify CAPTCHA, validate, store, notify staff
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Form, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from app.auth.rate_limit import client_ip
from app.dependencies import CaptchaDep, DatabaseDep, NotifierDep
from app.exceptions import GENERIC_ERROR_MESSAGE
from app.templating import flash, render
from core.models.contact import ContactSubmissionCreate
from core.services.contact_service import ContactService
from lib.database import DatabaseError

logger = logging.getLogger(__name__)

router = APIRouter()

CAPTCHA_MISSING_MESSAGE = "Please complete the CAPTCHA before sending your message."
CAPTCHA_FAILED_MESSAGE = "CAPTCHA verification failed. Please try again."
INVALID_FORM_MESSAGE = "Please enter your name, a valid email address and a message."


def _back_to_form() -> RedirectResponse:
    return RedirectResponse("/contact", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/contact", response_class=HTMLResponse)
async def contact_form(request: Request, db: DatabaseDep):
    return render(request, "contact.html", db)


@router.post("/contact", response_class=HTMLResponse)
async def submit_contact(
    request: Request,
    background_tasks: BackgroundTasks,
    db: DatabaseDep,
    captcha: CaptchaDep,
    notifier: NotifierDep,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    phone: Annotated[str, Form()] = "",
    message: Annotated[str, Form()] = "",
    captcha_token: Annotated[str, Form(alias="g-recaptcha-response")] = "",
):
    """
    Handle a contact form submission.

    Steps:
    1. Reject a missing CAPTCHA token
    2. Verify the token with the CAPTCHA provider
    3. Validate the fields
    4. Store the submission
    5. Queue staff email + SMS (sent after the response)

    Returns:
        Success page, or a redirect back to the form with a flash message
    """
    if not captcha_token:
        flash(request, CAPTCHA_MISSING_MESSAGE, "danger")
        return _back_to_form()

    if not await captcha.verify(captcha_token, client_ip(request)):
        logger.info("Contact form rejected: CAPTCHA verification failed")
        flash(request, CAPTCHA_FAILED_MESSAGE, "danger")
        return _back_to_form()

    try:
        data = ContactSubmissionCreate(name=name, email=email, phone=phone, message=message)
    except ValidationError as e:
        logger.info(f"Contact form rejected: {e.error_count()} invalid field(s)")
        flash(request, INVALID_FORM_MESSAGE, "danger")
        return _back_to_form()

    try:
        submission = ContactService.submit(db, data)
    except DatabaseError as e:
        logger.error(f"Contact form error: {e}")
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    background_tasks.add_task(notifier.notify_contact_submission, submission)

    return render(request, "success.html", db, {"submission": submission})
