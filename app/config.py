# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.DATABASE_BACKEND)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Every integration (Stripe, SMTP, Twilio, reCAPTCHA, Supabase) is optional
# so the site can run locally against SQLite with nothing configured.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port for the web server"
    )

    SITE_URL: str = Field(
        default="http://localhost:8080",
        description="Public base URL used for sitemap entries and Stripe redirects"
    )

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    SESSION_SECRET: str = Field(
        default="dev-session-secret-change-me",
        min_length=16,
        description="Secret key used to sign the session cookie"
    )

    SESSION_MAX_AGE_SECONDS: int = Field(
        default=60 * 60 * 8,
        ge=60,
        description="Lifetime of the admin session cookie"
    )

    # -------------------------------------------------------------------------
    # Database Configuration
    # -------------------------------------------------------------------------
    # "sqlite" stores everything in a single local file.
    # "supabase" talks to the managed Postgres instance through PostgREST.

    DATABASE_BACKEND: Literal["sqlite", "supabase"] = Field(
        default="sqlite",
        description="Which relational store to use"
    )

    SQLITE_PATH: str = Field(
        default="truview-cms.db",
        description="Path of the SQLite database file"
    )

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # CAPTCHA (reCAPTCHA-compatible siteverify endpoint)
    # -------------------------------------------------------------------------

    RECAPTCHA_SITE_KEY: str | None = Field(
        default=None,
        description="Public site key rendered into the contact form"
    )

    RECAPTCHA_SECRET_KEY: str | None = Field(
        default=None,
        description="Secret key sent to the verification endpoint"
    )

    RECAPTCHA_VERIFY_URL: str = Field(
        default="https://www.google.com/recaptcha/api/siteverify",
        description="CAPTCHA verification endpoint"
    )

    # -------------------------------------------------------------------------
    # Email (SMTP)
    # -------------------------------------------------------------------------

    SMTP_HOST: str | None = Field(default=None, description="SMTP server host")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535, description="SMTP server port")
    SMTP_USER: str | None = Field(default=None, description="SMTP username")
    SMTP_PASSWORD: str | None = Field(default=None, description="SMTP password")
    SMTP_SECURITY: Literal["starttls", "ssl", "none"] = Field(
        default="starttls",
        description="starttls (port 587), ssl (implicit TLS, port 465) or none (plain relay)"
    )

    EMAIL_FROM: str = Field(
        default="TruView Glass <no-reply@truviewglass.com>",
        description="From header for outgoing email"
    )

    CONTACT_NOTIFY_EMAIL: str | None = Field(
        default=None,
        description="Where contact form notifications are emailed"
    )

    # -------------------------------------------------------------------------
    # SMS (Twilio REST API)
    # -------------------------------------------------------------------------

    TWILIO_ACCOUNT_SID: str | None = Field(default=None, description="Twilio account SID")
    TWILIO_AUTH_TOKEN: str | None = Field(default=None, description="Twilio auth token")
    TWILIO_FROM_NUMBER: str | None = Field(default=None, description="Sending phone number")

    CONTACT_NOTIFY_SMS: str | None = Field(
        default=None,
        description="Phone number that receives contact form SMS alerts"
    )

    # -------------------------------------------------------------------------
    # Payments (Stripe)
    # -------------------------------------------------------------------------

    STRIPE_SECRET_KEY: str | None = Field(default=None, description="Stripe secret API key")

    STRIPE_WEBHOOK_SECRET: str | None = Field(
        default=None,
        description="Signing secret for POST /webhook"
    )

    STRIPE_PRICE_ID: str | None = Field(
        default=None,
        description="Price used by POST /create-checkout-session"
    )

    STRIPE_CHECKOUT_MODE: Literal["payment", "subscription"] = Field(
        default="subscription",
        description="Stripe Checkout mode"
    )

    # -------------------------------------------------------------------------
    # Login Rate Limiting
    # -------------------------------------------------------------------------

    LOGIN_RATE_LIMIT_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        description="Login attempts allowed per IP inside the window"
    )

    LOGIN_RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=15 * 60,
        ge=1,
        description="Sliding window for login attempts"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def site_url(self) -> str:
        """SITE_URL without a trailing slash."""
        return self.SITE_URL.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.RECAPTCHA_SECRET_KEY)

    @property
    def email_enabled(self) -> bool:
        return bool(self.SMTP_HOST)

    @property
    def sms_enabled(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_FROM_NUMBER)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
