# =============================================================================
# core/services/content_service.py - Site Content & Landing Pages
# =============================================================================
# Handles:
# - Global content (site-wide key/value text, read on every page)
# - Service x location landing page lookup and description templating
# - The list of landing pages used by the home page and sitemap
# =============================================================================

import logging

from app.exceptions import LocationNotFoundError, ServiceNotFoundError
from core.models.content import LandingPage, Location, ServiceContent, ServicePageLink
from lib.database import Database

logger = logging.getLogger(__name__)

SERVICE_TOKEN = "{{service}}"
LOCATION_TOKEN = "{{location}}"

DEFAULT_GLOBAL_CONTENT = {
    "site_name": "TruView Glass",
}


def render_description(template: str | None, service_name: str, location_name: str) -> str:
    """
    Substitute the placeholder tokens in a service description.

    Every occurrence of {{service}} and {{location}} is replaced; anything
    else is left untouched.

    Example:
        render_description("{{service}} in {{location}}", "Windshield Repair", "Austin")
        # -> "Windshield Repair in Austin"
    """
    if not template:
        return ""
    return template.replace(SERVICE_TOKEN, service_name).replace(LOCATION_TOKEN, location_name)


class ContentService:
    """Read-only access to site content."""

    @staticmethod
    def get_global_content(db: Database) -> dict[str, str]:
        """Global content merged over the defaults, so templates always have site_name."""
        content = dict(DEFAULT_GLOBAL_CONTENT)
        content.update(db.fetch_global_content())
        return content

    @staticmethod
    def ensure_default_content(db: Database) -> int:
        """Seed default global content if the table is empty."""
        return db.seed_global_content(DEFAULT_GLOBAL_CONTENT)

    @staticmethod
    def get_landing_page(db: Database, service_slug: str, location_name: str) -> LandingPage:
        """
        Resolve a service landing page.

        Args:
            db: Database to read from
            service_slug: Service slug from the URL
            location_name: Location name from the URL (exact match)

        Returns:
            LandingPage with the description rendered

        Raises:
            LocationNotFoundError: No location with that name
            ServiceNotFoundError: No service with that slug in the location
        """
        location_row = db.fetch_location(location_name)
        if location_row is None:
            raise LocationNotFoundError(location_name)
        location = Location(**location_row)

        service_row = db.fetch_service(service_slug, location.id)
        if service_row is None:
            raise ServiceNotFoundError(service_slug, location_name)
        service = ServiceContent(**service_row)

        return LandingPage(
            location=location,
            service=service,
            description=render_description(service.description, service.name, location.name),
        )

    @staticmethod
    def list_service_pages(db: Database) -> list[ServicePageLink]:
        """Every service/location pair, ordered by location then service."""
        return [ServicePageLink(**row) for row in db.list_service_pages()]
