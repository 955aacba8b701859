# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - A fresh SQLite database per test (tmp_path)
# - Fakes for the CAPTCHA verifier, notifier and Stripe calls
# - A TestClient with every dependency overridden
# =============================================================================

import hashlib
import hmac
import os
import tempfile
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("DATABASE_BACKEND", "sqlite")
os.environ.setdefault("SQLITE_PATH", os.path.join(tempfile.gettempdir(), "truview-cms-tests.db"))
os.environ.setdefault("SESSION_SECRET", "test-session-secret-0123456789")
os.environ.setdefault("SITE_URL", "https://www.truviewglass.com")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("STRIPE_PRICE_ID", "price_test_monthly")

import pytest
from fastapi.testclient import TestClient

from app.auth.rate_limit import LoginRateLimiter, get_login_rate_limiter
from app.dependencies import get_captcha_verifier, get_db, get_notifier, get_payment_gateway
from app.exceptions import PaymentProviderError
from app.main import app
from core.models.admin import AdminRole
from core.services.auth_service import AuthService
from core.services.content_service import ContentService
from lib.payments import StripeGateway
from lib.sqlite_client import SqliteDatabase

WEBHOOK_SECRET = "whsec_test_secret"

ADMIN_USERNAME = "owner"
ADMIN_PASSWORD = "correct-horse-battery"
MANAGER_USERNAME = "frontdesk"
MANAGER_PASSWORD = "staple-lamp-window"


# =============================================================================
# Fakes
# =============================================================================

class FakeCaptchaVerifier:
    """Records tokens and returns a fixed verdict."""

    def __init__(self, result: bool = True):
        self.result = result
        self.calls = []

    async def verify(self, token, remote_ip=None):
        self.calls.append((token, remote_ip))
        return self.result


class FakeNotifier:
    """Collects notifications instead of sending them."""

    def __init__(self):
        self.contact_submissions = []
        self.dunning_emails = []

    def notify_contact_submission(self, submission):
        self.contact_submissions.append(submission)

    def send_dunning_email(self, to_email, portal_url, amount_due=None):
        self.dunning_emails.append({"to": to_email, "portal_url": portal_url, "amount_due": amount_due})
        return True


class FakeStripeGateway(StripeGateway):
    """Real webhook verification; checkout and portal calls stay local."""

    def __init__(self, fail: bool = False):
        super().__init__(
            api_key="sk_test_dummy",
            webhook_secret=WEBHOOK_SECRET,
            price_id="price_test_monthly",
        )
        self.fail = fail
        self.checkout_calls = []
        self.portal_calls = []

    def create_checkout_session(self, success_url, cancel_url, customer_id=None):
        if self.fail:
            raise PaymentProviderError("checkout", "card network unavailable")
        self.checkout_calls.append({"success_url": success_url, "cancel_url": cancel_url, "customer_id": customer_id})
        return "https://checkout.stripe.com/c/pay/cs_test_123"

    def create_billing_portal_session(self, customer_id, return_url):
        if self.fail:
            raise PaymentProviderError("billing portal", "card network unavailable")
        self.portal_calls.append({"customer_id": customer_id, "return_url": return_url})
        return f"https://billing.stripe.com/p/session/{customer_id}"


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for a payload."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db(tmp_path):
    """Empty SQLite database with the schema and default global content."""
    database = SqliteDatabase(tmp_path / "truview.db")
    database.ensure_schema()
    ContentService.ensure_default_content(database)
    return database


@pytest.fixture
def admin_user(db):
    db.insert_admin_user(
        username=ADMIN_USERNAME,
        password_hash=AuthService.hash_password(ADMIN_PASSWORD, rounds=4),
        role=AdminRole.ADMIN.value,
        stripe_customer_id="cus_owner123",
    )
    return {"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}


@pytest.fixture
def manager_user(db):
    db.insert_admin_user(
        username=MANAGER_USERNAME,
        password_hash=AuthService.hash_password(MANAGER_PASSWORD, rounds=4),
        role=AdminRole.MANAGER.value,
    )
    return {"username": MANAGER_USERNAME, "password": MANAGER_PASSWORD}


@pytest.fixture
def captcha():
    return FakeCaptchaVerifier()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def gateway():
    return FakeStripeGateway()


@pytest.fixture
def rate_limiter():
    return LoginRateLimiter(max_attempts=5, window_seconds=900)


@pytest.fixture
def client(db, captcha, notifier, gateway, rate_limiter):
    """TestClient wired to the test database and fakes."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_captcha_verifier] = lambda: captcha
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_login_rate_limiter] = lambda: rate_limiter

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Sign a user in through the login form."""

    def _login(credentials):
        return client.post(
            "/admin/login",
            data={"username": credentials["username"], "password": credentials["password"]},
            follow_redirects=False,
        )

    return _login
