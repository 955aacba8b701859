# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends() and replaced with
# app.dependency_overrides in tests.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from lib.captcha import CaptchaVerifier
from lib.database import Database, get_database
from lib.notifications import Notifier
from lib.payments import StripeGateway


def get_db() -> Database:
    """
    Get the database instance.

    Returns the process-wide singleton for the configured backend.
    """
    return get_database()


@lru_cache
def get_captcha_verifier() -> CaptchaVerifier:
    return CaptchaVerifier.from_settings(settings)


@lru_cache
def get_notifier() -> Notifier:
    return Notifier(settings)


@lru_cache
def get_payment_gateway() -> StripeGateway:
    return StripeGateway.from_settings(settings)


# Type aliases for dependency injection
DatabaseDep = Annotated[Database, Depends(get_db)]
CaptchaDep = Annotated[CaptchaVerifier, Depends(get_captcha_verifier)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]
PaymentsDep = Annotated[StripeGateway, Depends(get_payment_gateway)]
