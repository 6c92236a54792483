"""
Test configuration and fixtures for the session store.

- Function-scoped in-memory SQLite engine with the schema created
- Database session bound to that engine
- Adapters (SQLAlchemy and in-memory) driven by a frozen clock
- Seeded user fixture
"""

from datetime import datetime, timedelta
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from session_adapter.adapters import MemoryAdapter, SQLAlchemyAdapter
from session_adapter.database import Base
from session_adapter.models import User, Session as UserSession
from tests.factories import T0, create_user


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def test_engine():
    """
    In-memory SQLite engine shared by every connection in the test.

    StaticPool keeps the single in-memory database alive across sessions.
    Foreign keys are switched on by the listener in session_adapter.database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """Provide a database session on the test engine."""
    TestingSessionLocal = sessionmaker(bind=test_engine, autoflush=False)
    session = TestingSessionLocal()

    yield session

    session.close()


# =============================================================================
# Adapter Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def adapter(db: Session, clock: FrozenClock) -> SQLAlchemyAdapter:
    """SQLAlchemy adapter over the users/sessions models."""
    return SQLAlchemyAdapter(db, UserSession, User, clock=clock)


@pytest.fixture
def memory_users() -> dict:
    return {}


@pytest.fixture
def memory_adapter(memory_users: dict, clock: FrozenClock) -> MemoryAdapter:
    return MemoryAdapter(memory_users, clock=clock)


@pytest.fixture
def test_user(db: Session) -> User:
    """Create the user u1."""
    return create_user(db, user_id="u1", username="alice")
