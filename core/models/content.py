# =============================================================================
# core/models/content.py - Site Content Schemas
# =============================================================================
# Read-only lookup data for rendering:
# - Location / ServiceContent: rows of the locations and services tables
# - LandingPage: a service in a location, with the description rendered
# - ServicePageLink: one entry of the home page list and the sitemap
# =============================================================================

from urllib.parse import quote

from pydantic import BaseModel, Field


class Testimonial(BaseModel):
    author: str
    quote: str


class FaqItem(BaseModel):
    question: str
    answer: str


class Location(BaseModel):
    """A city or area the business serves."""
    id: int
    name: str


class ServiceContent(BaseModel):
    """
    A service offered in one location.

    `description` may contain the {{service}} and {{location}} tokens.
    """

    id: int
    location_id: int
    name: str
    slug: str
    description: str | None = None
    hero_image: str | None = None
    cta_text: str | None = None
    testimonials: list[Testimonial] = Field(default_factory=list)
    faqs: list[FaqItem] = Field(default_factory=list)


class LandingPage(BaseModel):
    """Everything the service landing page template needs."""

    location: Location
    service: ServiceContent
    description: str = ""

    @property
    def title(self) -> str:
        return f"{self.service.name} in {self.location.name}"


class ServicePageLink(BaseModel):
    """A service/location pair with a URL."""

    slug: str
    service_name: str
    location_name: str

    @property
    def path(self) -> str:
        return f"/services/{quote(self.slug)}/{quote(self.location_name)}"
