"""
Database package for the StreamHub API.

Provides SQLAlchemy models, session management, and database utilities.
"""

from db.base import Base
from db.session import get_db, engine, SessionLocal

__all__ = ["Base", "get_db", "engine", "SessionLocal"]
