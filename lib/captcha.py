# =============================================================================
# lib/captcha.py - CAPTCHA Verification
# =============================================================================
# Verifies contact form CAPTCHA tokens against a reCAPTCHA-compatible
# siteverify endpoint (form POST of secret/response/remoteip, JSON reply
# with a boolean "success").
# =============================================================================

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class CaptchaVerifier:
    """
    Async client for the verification endpoint.

    Without a secret key every token is accepted, so local development works
    without a CAPTCHA account. Network or parse failures reject the token.
    """

    def __init__(
        self,
        secret_key: str | None,
        verify_url: str = "https://www.google.com/recaptcha/api/siteverify",
        timeout: float = 10.0,
    ):
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "CaptchaVerifier":
        return cls(settings.RECAPTCHA_SECRET_KEY, settings.RECAPTCHA_VERIFY_URL)

    async def verify(self, token: str, remote_ip: str | None = None) -> bool:
        """
        Check a token with the verification endpoint.

        Args:
            token: Value of the g-recaptcha-response form field
            remote_ip: Client IP, forwarded when known

        Returns:
            True if the endpoint reports success
        """
        if not token:
            return False

        if not self.secret_key:
            logger.warning("RECAPTCHA_SECRET_KEY not set; skipping CAPTCHA verification")
            return True

        payload = {"secret": self.secret_key, "response": token}
        if remote_ip and remote_ip != "unknown":
            payload["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.verify_url, data=payload)
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"CAPTCHA verification request failed: {e}")
            return False

        if not result.get("success"):
            logger.info(f"CAPTCHA rejected: {result.get('error-codes', [])}")
            return False
        return True
