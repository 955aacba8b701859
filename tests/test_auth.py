# =============================================================================
# tests/test_auth.py - Login, Logout, Rate Limiting & Role Tests
# =============================================================================
# Run with: pytest tests/test_auth.py -v
# =============================================================================

from unittest.mock import patch

import pytest

from app.auth.rate_limit import LoginRateLimiter
from core.services.auth_service import AuthService
from core.services.seed_service import DEFAULT_ADMIN_PASSWORD_HASH


# =============================================================================
# AuthService
# =============================================================================

class TestAuthService:
    """Tests for password hashing and credential checks."""

    def test_hash_and_verify(self):
        password_hash = AuthService.hash_password("s3cret", rounds=4)

        assert password_hash.startswith("$2b$04$")
        assert AuthService.verify_password("s3cret", password_hash) is True
        assert AuthService.verify_password("wrong", password_hash) is False

    def test_malformed_hash_is_a_mismatch(self):
        assert AuthService.verify_password("s3cret", "not-a-bcrypt-hash") is False

    def test_seed_hash_is_valid_bcrypt(self):
        """The shipped seed hash parses; it just doesn't match a guess."""
        assert AuthService.verify_password("definitely-not-it", DEFAULT_ADMIN_PASSWORD_HASH) is False

    def test_authenticate(self, db, admin_user):
        user = AuthService.authenticate(db, admin_user["username"], admin_user["password"])

        assert user is not None
        assert user.username == admin_user["username"]
        assert user.stripe_customer_id == "cus_owner123"

    def test_authenticate_unknown_user(self, db):
        assert AuthService.authenticate(db, "ghost", "whatever") is None

    def test_authenticate_wrong_password(self, db, admin_user):
        assert AuthService.authenticate(db, admin_user["username"], "wrong") is None


# =============================================================================
# Rate limiter
# =============================================================================

class TestLoginRateLimiter:
    def test_limits_after_max_attempts(self):
        limiter = LoginRateLimiter(max_attempts=3, window_seconds=60)

        for _ in range(3):
            assert limiter.is_limited("1.2.3.4")[0] is False
            limiter.register_attempt("1.2.3.4")

        limited, retry_after = limiter.is_limited("1.2.3.4")

        assert limited is True
        assert 0 < retry_after <= 61

    def test_window_from_settings_values(self):
        limiter = LoginRateLimiter(max_attempts=5, window_seconds=900)

        assert limiter.limit.amount == 5
        assert limiter.limit.get_expiry() == 900

    def test_keys_are_independent(self):
        limiter = LoginRateLimiter(max_attempts=1, window_seconds=60)
        limiter.register_attempt("a")

        assert limiter.is_limited("a")[0] is True
        assert limiter.is_limited("b")[0] is False

    def test_reset(self):
        limiter = LoginRateLimiter(max_attempts=1, window_seconds=60)
        limiter.register_attempt("a")

        limiter.reset("a")

        assert limiter.is_limited("a")[0] is False

    def test_clear_forgets_every_key(self):
        limiter = LoginRateLimiter(max_attempts=1, window_seconds=60)
        limiter.register_attempt("a")
        limiter.register_attempt("b")

        limiter.clear()

        assert limiter.is_limited("a")[0] is False
        assert limiter.is_limited("b")[0] is False


# =============================================================================
# Login / logout routes
# =============================================================================

class TestLogin:
    def test_login_form_renders(self, client):
        response = client.get("/admin/login")

        assert response.status_code == 200
        assert 'name="password"' in response.text

    def test_successful_login(self, client, admin_user, login):
        response = login(admin_user)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"

        dashboard = client.get("/admin")
        assert dashboard.status_code == 200
        assert f"Welcome, {admin_user['username']}" in dashboard.text

    def test_login_form_redirects_when_signed_in(self, client, admin_user, login):
        login(admin_user)

        response = client.get("/admin/login", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"

    @pytest.mark.parametrize("username,password", [("owner", "wrong"), ("ghost", "whatever")])
    def test_failed_login_flashes_and_redirects(self, client, admin_user, username, password):
        response = client.post(
            "/admin/login",
            data={"username": username, "password": password},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"
        assert "Invalid username or password." in client.get("/admin/login").text
        assert client.get("/admin", follow_redirects=False).status_code == 303

    def test_flash_shown_once(self, client, admin_user):
        client.post("/admin/login", data={"username": "owner", "password": "wrong"})

        client.get("/admin/login")

        assert "Invalid username or password." not in client.get("/admin/login").text

    def test_database_error_treated_as_failure(self, client, db, admin_user):
        from lib.database import DatabaseError

        with patch.object(db, "fetch_admin_user", side_effect=DatabaseError("down")):
            response = client.post(
                "/admin/login",
                data={"username": admin_user["username"], "password": admin_user["password"]},
                follow_redirects=False,
            )

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"

    def test_logout(self, client, admin_user, login):
        login(admin_user)

        response = client.post("/admin/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"
        assert "You have been signed out." in client.get("/admin/login").text
        assert client.get("/admin", follow_redirects=False).status_code == 303


class TestLoginRateLimit:
    def test_sixth_attempt_is_rejected(self, client, db, admin_user):
        """Five attempts per window; the sixth never reaches the database."""
        for _ in range(5):
            response = client.post(
                "/admin/login",
                data={"username": admin_user["username"], "password": "wrong"},
                follow_redirects=False,
            )
            assert response.status_code == 303

        with patch.object(db, "fetch_admin_user", side_effect=AssertionError("database touched")) as fetch:
            response = client.post(
                "/admin/login",
                data={"username": admin_user["username"], "password": admin_user["password"]},
                follow_redirects=False,
            )

        assert response.status_code == 429
        assert "Too many login attempts" in response.text
        fetch.assert_not_called()

    def test_success_clears_counter(self, client, admin_user, login):
        for _ in range(4):
            client.post("/admin/login", data={"username": admin_user["username"], "password": "wrong"})

        assert login(admin_user).status_code == 303
        client.post("/admin/logout")

        for _ in range(4):
            response = client.post(
                "/admin/login",
                data={"username": admin_user["username"], "password": "wrong"},
                follow_redirects=False,
            )
            assert response.status_code == 303

    def test_limit_is_per_ip(self, client, admin_user):
        for _ in range(5):
            client.post(
                "/admin/login",
                data={"username": "owner", "password": "wrong"},
                headers={"X-Forwarded-For": "203.0.113.7"},
            )

        blocked = client.post(
            "/admin/login",
            data={"username": "owner", "password": "wrong"},
            headers={"X-Forwarded-For": "203.0.113.7"},
            follow_redirects=False,
        )
        other = client.post(
            "/admin/login",
            data={"username": "owner", "password": "wrong"},
            headers={"X-Forwarded-For": "198.51.100.2"},
            follow_redirects=False,
        )

        assert blocked.status_code == 429
        assert other.status_code == 303


# =============================================================================
# Role gating
# =============================================================================

class TestRoleGating:
    @pytest.mark.parametrize(
        "path",
        ["/admin", "/admin/contacts", "/admin/billing-events", "/admin/billing-analytics"],
    )
    def test_anonymous_redirected_to_login(self, client, path):
        response = client.get(path, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/login"

    @pytest.mark.parametrize("path", ["/admin", "/admin/contacts"])
    def test_manager_sees_contact_pages(self, client, manager_user, login, path):
        login(manager_user)

        assert client.get(path).status_code == 200

    @pytest.mark.parametrize("path", ["/admin/billing-events", "/admin/billing-analytics"])
    def test_manager_cannot_see_billing_pages(self, client, manager_user, login, path):
        login(manager_user)

        response = client.get(path)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_forbidden_page_for_browsers(self, client, manager_user, login):
        login(manager_user)

        response = client.get("/admin/billing-events", headers={"Accept": "text/html"})

        assert response.status_code == 403
        assert "Access denied" in response.text

    @pytest.mark.parametrize("path", ["/admin/billing-events", "/admin/billing-analytics"])
    def test_admin_sees_billing_pages(self, client, admin_user, login, path):
        login(admin_user)

        assert client.get(path).status_code == 200

    def test_manager_nav_hides_billing_links(self, client, manager_user, login):
        login(manager_user)

        assert "/admin/billing-events" not in client.get("/admin").text
