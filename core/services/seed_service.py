# =============================================================================
# core/services/seed_service.py - Database Seeding
# =============================================================================
# Idempotent seed data used by scripts/init_db.py:
# - default global content (only when the table is empty)
# - the initial admin user (INSERT OR IGNORE on username)
# - demo locations and services for the landing pages
# =============================================================================

import logging
from dataclasses import dataclass, field

from core.models.admin import AdminRole
from core.services.content_service import ContentService
from lib.database import Database

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"

# bcrypt hash of the initial admin password (cost 10)
DEFAULT_ADMIN_PASSWORD_HASH = "$2b$10$Id0aOxElSAQVb1JWWWIWQu8bwjMcTkOignQqRpUNa8YI9dMPLjBv."

_FAQS = [
    {
        "question": "How long does an appointment take?",
        "answer": "Most jobs are finished in under two hours.",
    },
    {
        "question": "Do you come to me?",
        "answer": "Yes. Our mobile technicians cover the whole metro area.",
    },
]

DEMO_SERVICES = [
    {
        "name": "Windshield Repair",
        "slug": "windshield-repair",
        "description": (
            "Fast, affordable {{service}} in {{location}}. Chips and cracks fixed "
            "on-site by certified {{location}} technicians."
        ),
        "hero_image": "/static/img/hero-glass.svg",
        "cta_text": "Book a repair",
    },
    {
        "name": "Window Glass Replacement",
        "slug": "window-glass-replacement",
        "description": (
            "Broken or fogged panes? TruView handles {{service}} for homes and "
            "businesses across {{location}}."
        ),
        "hero_image": "/static/img/hero-glass.svg",
        "cta_text": "Get a free quote",
    },
]

DEMO_LOCATIONS = ["Austin", "Round Rock", "San Marcos"]


@dataclass
class SeedReport:
    """What a seeding run actually inserted."""
    global_content_rows: int = 0
    admin_created: bool = False
    locations: list[str] = field(default_factory=list)
    services_created: int = 0


class SeedService:
    """Inserts seed rows without ever duplicating them."""

    @staticmethod
    def seed_admin_user(
        db: Database,
        username: str = DEFAULT_ADMIN_USERNAME,
        password_hash: str = DEFAULT_ADMIN_PASSWORD_HASH,
        role: AdminRole = AdminRole.ADMIN,
        stripe_customer_id: str | None = None,
    ) -> bool:
        """
        Insert an admin user unless the username exists.

        Returns:
            True if a new row was created
        """
        created = db.insert_admin_user(
            username=username,
            password_hash=password_hash,
            role=role.value,
            stripe_customer_id=stripe_customer_id,
        )
        if created:
            logger.info(f"Admin user created: {username} ({role.value})")
        else:
            logger.info(f"Admin user already exists: {username}")
        return created

    @staticmethod
    def seed_demo_content(db: Database) -> tuple[list[str], int]:
        """Insert the demo locations and their services."""
        created = 0
        for location_name in DEMO_LOCATIONS:
            location = db.ensure_location(location_name)
            for service in DEMO_SERVICES:
                testimonials = [
                    {
                        "author": f"A happy customer in {location_name}",
                        "quote": f"Best {service['name'].lower()} I've had. Quick and spotless.",
                    }
                ]
                if db.insert_service(
                    location_id=location["id"],
                    testimonials=testimonials,
                    faqs=_FAQS,
                    **service,
                ):
                    created += 1
        return list(DEMO_LOCATIONS), created

    @staticmethod
    def seed_all(
        db: Database,
        admin_username: str = DEFAULT_ADMIN_USERNAME,
        admin_password_hash: str = DEFAULT_ADMIN_PASSWORD_HASH,
        admin_role: AdminRole = AdminRole.ADMIN,
        include_demo_content: bool = True,
    ) -> SeedReport:
        """
        Ensure the schema and insert every kind of seed data.

        Safe to run repeatedly; a second run inserts nothing.
        """
        db.ensure_schema()

        report = SeedReport()
        report.global_content_rows = ContentService.ensure_default_content(db)
        report.admin_created = SeedService.seed_admin_user(
            db,
            username=admin_username,
            password_hash=admin_password_hash,
            role=admin_role,
        )
        if include_demo_content:
            report.locations, report.services_created = SeedService.seed_demo_content(db)

        return report
