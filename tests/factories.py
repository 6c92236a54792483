"""
Factory functions for creating test data.

These factories create rows with sensible defaults. They commit, so the
rows survive the rollback the adapter performs after a store error.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import secrets

from sqlalchemy.orm import Session

from session_adapter.adapters import DatabaseSession
from session_adapter.models import User, Session as UserSession


# Fixed reference time for tests driven by a frozen clock
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# User Factory
# =============================================================================


def create_user(
    db: Session,
    user_id: Optional[str] = None,
    username: Optional[str] = None,
    **overrides,
) -> User:
    """
    Create a test user.

    Args:
        db: Database session
        user_id: Primary key (auto-generated if not provided)
        username: Username (derived from the id if not provided)
        **overrides: Additional fields to override

    Returns:
        Created User object
    """
    if user_id is None:
        user_id = f"user_{secrets.token_hex(4)}"

    defaults = {
        "id": user_id,
        "username": username or f"name_{user_id}",
    }
    defaults.update(overrides)

    user = User(**defaults)
    db.add(user)
    db.commit()
    return user


# =============================================================================
# Session Factories
# =============================================================================


def create_session(
    db: Session,
    user: User,
    expires_in: timedelta = timedelta(days=7),
    now: Optional[datetime] = None,
    **overrides,
) -> UserSession:
    """
    Insert a session row directly through the ORM.

    Args:
        db: Database session
        user: User to create session for
        expires_in: Session expiration time from now
        now: Reference time (defaults to the wall clock)
        **overrides: Additional fields to override

    Returns:
        Created Session object
    """
    now = now or datetime.now(timezone.utc)
    defaults = {
        "id": secrets.token_urlsafe(16),
        "user_id": user.id,
        "expires_at": now + expires_in,
        "user_agent": "pytest-test-client",
        "ip_address": "127.0.0.1",
    }
    defaults.update(overrides)

    session = UserSession(**defaults)
    db.add(session)
    db.commit()
    return session


def make_session(
    user_id: str,
    session_id: Optional[str] = None,
    expires_at: Optional[datetime] = None,
    **attributes,
) -> DatabaseSession:
    """Build an unsaved DatabaseSession for passing to set_session."""
    return DatabaseSession(
        id=session_id or secrets.token_urlsafe(16),
        user_id=user_id,
        expires_at=expires_at or datetime.now(timezone.utc) + timedelta(hours=1),
        attributes=attributes,
    )
