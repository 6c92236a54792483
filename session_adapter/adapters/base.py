"""Abstract base class and row types for session store adapters."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, Mapping, Optional, Protocol, TypeVar

A = TypeVar("A")
SessionAttributes = TypeVar("SessionAttributes")
UserAttributes = TypeVar("UserAttributes")


class AttributeCodec(Protocol[A]):
    """
    Converts between the opaque extra columns of a row and a typed bag.

    ``decode`` receives every column except the required ones; ``encode``
    returns the column values to write alongside them.
    """

    def decode(self, values: Mapping[str, Any]) -> A:
        ...

    def encode(self, attributes: A) -> dict[str, Any]:
        ...


class DictAttributes:
    """Default codec: attributes are a plain dict keyed by column name."""

    def decode(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return dict(values)

    def encode(self, attributes: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        return dict(attributes or {})


@dataclass
class DatabaseUser(Generic[UserAttributes]):
    id: str
    attributes: UserAttributes


@dataclass
class DatabaseSession(Generic[SessionAttributes]):
    id: str
    user_id: str
    expires_at: datetime
    attributes: SessionAttributes


class Adapter(ABC, Generic[SessionAttributes, UserAttributes]):
    """
    Storage interface the authentication library talks to.

    Implementations translate session lifecycle events into queries against
    a user table and a session table. They hold no state besides handles to
    the external store and add no locking or retries of their own.
    """

    @abstractmethod
    async def get_session_and_user(
        self, session_id: str
    ) -> tuple[
        Optional[DatabaseSession[SessionAttributes]],
        Optional[DatabaseUser[UserAttributes]],
    ]:
        """
        Look up a session together with the user that owns it.

        Returns (None, None) if the session does not exist or its user row
        is missing.
        """
        pass

    @abstractmethod
    async def get_user_sessions(
        self, user_id: str
    ) -> list[DatabaseSession[SessionAttributes]]:
        """Return every session of the user, in no particular order."""
        pass

    @abstractmethod
    async def set_session(self, session: DatabaseSession[SessionAttributes]) -> None:
        """
        Insert a new session row exactly as given.

        Raises ConstraintViolation if the id is taken or user_id does not
        reference an existing user.
        """
        pass

    @abstractmethod
    async def update_session_expiration(
        self, session_id: str, expires_at: datetime
    ) -> None:
        """Rewrite expires_at of a session. No-op if it does not exist."""
        pass

    @abstractmethod
    async def delete_session(self, session_id: str) -> None:
        """Delete a session. No-op if it does not exist."""
        pass

    @abstractmethod
    async def delete_user_sessions(self, user_id: str) -> None:
        """Delete all sessions of a user."""
        pass

    @abstractmethod
    async def delete_expired_sessions(self) -> int:
        """
        Delete every session whose expires_at is at or before now.

        Returns count of sessions deleted.
        """
        pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def require_aware(value: datetime) -> datetime:
    """
    Reject naive datetimes and return the same instant in UTC.

    Plain DateTime columns on SQLite drop the offset, so values must be UTC
    before they reach the store.
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("expires_at must be a timezone-aware datetime")
    return value.astimezone(timezone.utc)
