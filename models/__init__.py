"""Database models."""

from db import Base

# Import all models so Alembic can detect them
from models.application import Application
from models.waitlist_entry import WaitlistEntry

__all__ = [
    "Base",
    "Application",
    "WaitlistEntry",
]
