#!/usr/bin/env python3
"""
Database initialization script.

Creates all tables and, with --seed, a demo account for local development.
Run this script to initialize a fresh database.
"""

import argparse
import os
import sys

# Add the parent directory to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select  # noqa: E402

from auth.passwords import hash_password  # noqa: E402
from db.base import Base  # noqa: E402
from db.session import engine, SessionLocal  # noqa: E402
from db.models import User  # noqa: E402


DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@streamhub.dev"
DEMO_PASSWORD = "demo-password"


def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_demo_user():
    """Insert the demo user if not exists."""
    db = SessionLocal()
    try:
        existing_user = db.execute(
            select(User).where(User.username == DEMO_USERNAME)
        ).scalar_one_or_none()

        if existing_user:
            print(f"✓ Demo user already exists: {existing_user.email}")
            return

        demo_user = User(
            username=DEMO_USERNAME,
            email=DEMO_EMAIL,
            full_name="Demo Channel",
            password_hash=hash_password(DEMO_PASSWORD),
        )
        db.add(demo_user)
        db.commit()
        print(f"✓ Demo user created: {demo_user.username} / {DEMO_PASSWORD}")

    except Exception as e:
        db.rollback()
        print(f"✗ Failed to seed demo user: {e}")
        raise
    finally:
        db.close()


def main():
    """Initialize the database with all tables and optional seed data."""
    parser = argparse.ArgumentParser(description="Initialize the StreamHub database")
    parser.add_argument("--seed", action="store_true", help="create the demo account")
    args = parser.parse_args()

    print("=" * 50)
    print("Database Initialization")
    print("=" * 50)

    try:
        create_tables()
        if args.seed:
            seed_demo_user()
        print("=" * 50)
        print("✓ Database initialized successfully!")
        print("=" * 50)
    except Exception as e:
        print(f"✗ Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
