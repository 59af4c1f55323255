#!/usr/bin/env python
"""
Create the default super admin from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME.
Safe to run repeatedly: an existing admin with that email is left untouched.
"""
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import get_settings
from app.database import SessionLocal, init_db
from app.errors import AppError
from app.services.auth import get_auth_service


def seed_admin() -> int:
    """Create the configured super admin. Returns a process exit code."""
    settings = get_settings()
    if not settings.ADMIN_PASSWORD:
        print("ADMIN_PASSWORD must be set to seed an admin account.", file=sys.stderr)
        return 1

    init_db()
    db = SessionLocal()
    try:
        admin, created = get_auth_service().ensure_default_admin(
            db,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            name=settings.ADMIN_NAME,
        )
    except AppError as e:
        print(f"Could not seed admin: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()

    if created:
        print(f"Admin account created: {admin.email} (role: {admin.role.value})")
    else:
        print(f"Admin account already exists: {admin.email}")
    return 0


if __name__ == "__main__":
    sys.exit(seed_admin())
