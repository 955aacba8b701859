# =============================================================================
# app/routers/pages.py - Public Pages
# =============================================================================
# Endpoints:
#   GET /                                    - Home page with every landing page link
#   GET /about                               - About page
#   GET /services/{service_slug}/{location}  - Service landing page for one location
#   GET /sitemap.xml                         - XML sitemap
# =============================================================================

import logging
from xml.sax.saxutils import escape as xml_escape

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response

from app.config import settings
from app.dependencies import DatabaseDep
from app.templating import render
from core.services.content_service import ContentService
from lib.database import DatabaseError

logger = logging.getLogger(__name__)

router = APIRouter()

SITEMAP_CACHE_SECONDS = 3600


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, db: DatabaseDep):
    """Home page."""
    pages = ContentService.list_service_pages(db)
    return render(request, "home.html", db, {"service_pages": pages})


@router.get("/about", response_class=HTMLResponse)
async def about(request: Request, db: DatabaseDep):
    return render(request, "about.html", db)


# :path lets location names contain "/" (e.g. "Dallas/Fort Worth")
@router.get("/services/{service_slug}/{location:path}", response_class=HTMLResponse)
async def service_landing_page(
    request: Request,
    service_slug: str,
    location: str,
    db: DatabaseDep,
):
    """
    Landing page for one service in one location.

    Raises:
        LocationNotFoundError: 404 when the location name is unknown
        ServiceNotFoundError: 404 when the location has no such service
    """
    page = ContentService.get_landing_page(db, service_slug, location)
    return render(request, "service_page.html", db, {"page": page})


# =============================================================================
# Sitemap
# =============================================================================

def absolute_url(path: str) -> str:
    return f"{settings.site_url}{path}"


def build_sitemap_entry(path: str, changefreq: str | None = "weekly", priority: str | None = "0.6") -> str:
    """One <url> element with an absolute, escaped location."""
    lines = [
        "  <url>",
        f"    <loc>{xml_escape(absolute_url(path))}</loc>",
    ]
    if changefreq:
        lines.append(f"    <changefreq>{changefreq}</changefreq>")
    if priority:
        lines.append(f"    <priority>{priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


@router.get("/sitemap.xml")
async def sitemap_xml(db: DatabaseDep):
    """
    XML sitemap of the public pages.

    If landing pages cannot be listed, only the fixed pages are served.
    """
    entries = [
        build_sitemap_entry("/", changefreq="weekly", priority="1.0"),
        build_sitemap_entry("/about", changefreq="monthly", priority="0.6"),
        build_sitemap_entry("/contact", changefreq="monthly", priority="0.7"),
    ]

    try:
        for page in ContentService.list_service_pages(db):
            entries.append(build_sitemap_entry(page.path, changefreq="monthly", priority="0.8"))
    except DatabaseError as e:
        logger.error(f"Sitemap generation fell back to core pages: {e}")

    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(entries)
        + "\n</urlset>\n"
    )
    return Response(
        content=body,
        media_type="application/xml",
        headers={"Cache-Control": f"public, max-age={SITEMAP_CACHE_SECONDS}"},
    )
