# =============================================================================
# app/routers/ - Route Handlers
# =============================================================================
# - health.py: Health, readiness and liveness checks
# - pages.py: Home, about, service landing pages, sitemap
# - contact.py: Contact form
# - admin.py: Dashboard, contacts, billing pages
# - billing.py: Stripe checkout and webhook
# =============================================================================
