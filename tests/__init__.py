# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the TruView CMS:
# - test_models.py: Pydantic model validation
# - test_database.py: SQLite backend and seeding
# - test_auth.py: login, logout, rate limiting, role gating
# - test_contact.py / test_pages.py: public site
# - test_webhook.py / test_analytics.py: billing
# - test_integrations.py: CAPTCHA, email and SMS adapters
#
# Run tests with: pytest
# =============================================================================
