#!/usr/bin/env python3
# =============================================================================
# scripts/init_db.py - Schema Bootstrap & Seed Data
# =============================================================================
# Creates the tables (SQLite) or checks them (Supabase), then seeds:
# - default global content
# - an admin user (never duplicated)
# - demo locations and services
#
# Usage:
#   # Default admin user from the seed data
#   python scripts/init_db.py
#
#   # Custom admin user
#   python scripts/init_db.py --username owner --password 'S3cret!' --role admin
#
#   # Schema + admin only
#   python scripts/init_db.py --no-demo
#
# Prerequisites:
#   - Environment variables must be set (.env file)
#   - Supabase: apply migrations/001_initial_schema.sql first
# =============================================================================

import argparse
import getpass
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import get_settings
from core.models.admin import AdminRole
from core.services.auth_service import AuthService
from core.services.seed_service import (
    DEFAULT_ADMIN_PASSWORD_HASH,
    DEFAULT_ADMIN_USERNAME,
    SeedService,
)
from lib.database import DatabaseError, create_database


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create the TruView CMS schema and seed data.")
    parser.add_argument("--username", default=DEFAULT_ADMIN_USERNAME, help="Admin username")
    parser.add_argument(
        "--password",
        help="Admin password (hashed with bcrypt). Omit to use the seed hash.",
    )
    parser.add_argument(
        "--prompt-password",
        action="store_true",
        help="Read the admin password from the terminal",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in AdminRole],
        default=AdminRole.ADMIN.value,
        help="Admin role",
    )
    parser.add_argument("--no-demo", action="store_true", help="Skip demo locations and services")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the seeding and print what was created."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    password = args.password
    if args.prompt_password:
        password = getpass.getpass("Admin password: ")
    password_hash = AuthService.hash_password(password) if password else DEFAULT_ADMIN_PASSWORD_HASH

    settings = get_settings()
    print("=" * 60)
    print(f"TruView CMS database init ({settings.DATABASE_BACKEND})")
    print("=" * 60)

    try:
        db = create_database(settings)
        report = SeedService.seed_all(
            db,
            admin_username=args.username,
            admin_password_hash=password_hash,
            admin_role=AdminRole(args.role),
            include_demo_content=not args.no_demo,
        )
    except DatabaseError as e:
        print(f"Error: {e}")
        if e.suggestion:
            print(f"Hint: {e.suggestion}")
        return 1

    print(f"Global content rows inserted: {report.global_content_rows}")
    print(f"Admin user '{args.username}': {'created' if report.admin_created else 'already exists'}")
    if not args.no_demo:
        print(f"Locations: {', '.join(report.locations)}")
        print(f"Services inserted: {report.services_created}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
