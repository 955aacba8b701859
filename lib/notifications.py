# =============================================================================
# lib/notifications.py - Email & SMS Delivery
# =============================================================================
# Best-effort outbound notifications:
# - Email over SMTP (STARTTLS, implicit TLS or plain; login when credentials are set)
# - SMS through the Twilio REST API
#
# Every send returns True/False. Failures are logged and never raised, so a
# broken mail server can't fail a contact form submission or a webhook.
# =============================================================================

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

import httpx

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


class Notifier:
    """Sends email and SMS using the configured providers."""

    def __init__(self, settings):
        self.settings = settings

    # -------------------------------------------------------------------------
    # Transports
    # -------------------------------------------------------------------------

    def send_email(self, to_email: str, subject: str, body: str) -> bool:
        """
        Send a plain-text email.

        Returns:
            True if the SMTP server accepted the message
        """
        if not self.settings.email_enabled:
            logger.info(f"Email skipped (SMTP not configured): {subject}")
            return False
        if not to_email:
            logger.warning(f"Email skipped (no recipient): {subject}")
            return False

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.EMAIL_FROM
        msg["To"] = to_email
        msg.set_content(body)

        security = self.settings.SMTP_SECURITY
        smtp_class = smtplib.SMTP_SSL if security == "ssl" else smtplib.SMTP

        try:
            with smtp_class(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=15) as server:
                if security == "starttls":
                    server.starttls()
                if self.settings.SMTP_USER:
                    server.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Email to {to_email} failed: {e}")
            return False

        logger.info(f"Email sent to {to_email}: {subject}")
        return True

    def send_sms(self, to_number: str, body: str) -> bool:
        """
        Send an SMS via Twilio.

        Returns:
            True if Twilio accepted the message
        """
        if not self.settings.sms_enabled:
            logger.info("SMS skipped (Twilio not configured)")
            return False
        if not to_number:
            logger.warning("SMS skipped (no recipient)")
            return False

        url = TWILIO_MESSAGES_URL.format(account_sid=self.settings.TWILIO_ACCOUNT_SID)

        try:
            response = httpx.post(
                url,
                data={
                    "From": self.settings.TWILIO_FROM_NUMBER,
                    "To": to_number,
                    "Body": body,
                },
                auth=(self.settings.TWILIO_ACCOUNT_SID, self.settings.TWILIO_AUTH_TOKEN),
                timeout=10,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"SMS to {to_number} failed: {e}")
            return False

        logger.info(f"SMS sent to {to_number}")
        return True

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def notify_contact_submission(self, submission) -> None:
        """Alert staff about a new contact form submission by email and SMS."""
        subject = f"New contact form submission from {submission.name}"
        body = (
            f"Name: {submission.name}\n"
            f"Email: {submission.email}\n"
            f"Phone: {submission.phone or '-'}\n"
            f"\n{submission.message}\n"
        )
        self.send_email(self.settings.CONTACT_NOTIFY_EMAIL, subject, body)
        self.send_sms(
            self.settings.CONTACT_NOTIFY_SMS,
            f"TruView: new contact from {submission.name} ({submission.phone or submission.email})",
        )

    def send_dunning_email(self, to_email: str, portal_url: str, amount_due: str | None = None) -> bool:
        """Tell a customer their payment failed and where to update their card."""
        amount_line = f" of {amount_due}" if amount_due else ""
        body = (
            "Hello,\n\n"
            f"We were unable to process your latest payment{amount_line} for TruView Glass.\n"
            "Please update your payment method using the secure billing portal below:\n\n"
            f"{portal_url}\n\n"
            "Thank you,\nTruView Glass"
        )
        return self.send_email(to_email, "Action needed: your TruView payment failed", body)
