# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for every table and view
# - services/: auth, contact, content, billing, analytics and seeding
#
# Services receive a lib.database.Database instead of opening connections,
# so they can run against either backend and are easy to test.
# =============================================================================
