"""
Database models for the session store.

Import all models here so Alembic can detect them for migrations.
"""

from session_adapter.database import Base
from session_adapter.models.user import User
from session_adapter.models.session import Session
from session_adapter.models.types import UTCDateTime

__all__ = [
    "Base",
    "User",
    "Session",
    "UTCDateTime",
]
