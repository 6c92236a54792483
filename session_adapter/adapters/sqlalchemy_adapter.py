"""Session store adapter over SQLAlchemy tables."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Optional, Sequence

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from session_adapter.adapters.base import (
    Adapter,
    AttributeCodec,
    DatabaseSession,
    DatabaseUser,
    DictAttributes,
    SessionAttributes,
    UserAttributes,
    require_aware,
    utc_now,
)
from session_adapter.errors import ConstraintViolation, StorageFailure

logger = logging.getLogger(__name__)

SESSION_COLUMNS = ("id", "user_id", "expires_at")
USER_COLUMNS = ("id",)


def _as_table(table_or_model: Any) -> Table:
    """Accept a Table or a declarative model class."""
    table = getattr(table_or_model, "__table__", table_or_model)
    if not isinstance(table, Table):
        raise TypeError(f"Expected a Table or mapped class, got {table_or_model!r}")
    return table


def _require_columns(table: Table, names: Sequence[str]) -> None:
    missing = [name for name in names if name not in table.c]
    if missing:
        raise ValueError(
            f"Table '{table.name}' is missing required columns: {', '.join(missing)}"
        )


class SQLAlchemyAdapter(Adapter[SessionAttributes, UserAttributes]):
    """
    Adapter backed by a user table and a session table in a relational DB.

    The database session, both tables and the clock are supplied by the
    caller and kept for the adapter's lifetime. Writes are committed on the
    given session; a failed statement is rolled back and re-raised as
    StorageFailure (or ConstraintViolation for integrity errors).

    Usage:
        adapter = SQLAlchemyAdapter(db, Session, User)
        session, user = await adapter.get_session_and_user(session_id)
    """

    def __init__(
        self,
        db: DBSession,
        session_table: Any,
        user_table: Any,
        *,
        session_attributes: Optional[AttributeCodec[SessionAttributes]] = None,
        user_attributes: Optional[AttributeCodec[UserAttributes]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._db = db
        self._session_table = _as_table(session_table)
        self._user_table = _as_table(user_table)
        _require_columns(self._session_table, SESSION_COLUMNS)
        _require_columns(self._user_table, USER_COLUMNS)
        self._session_attributes = session_attributes or DictAttributes()
        self._user_attributes = user_attributes or DictAttributes()
        self._clock = clock

    async def get_session_and_user(
        self, session_id: str
    ) -> tuple[
        Optional[DatabaseSession[SessionAttributes]],
        Optional[DatabaseUser[UserAttributes]],
    ]:
        sessions, users = self._session_table, self._user_table
        # Inner join: an orphaned session yields no row at all
        statement = (
            select(*sessions.columns, *users.columns)
            .select_from(sessions.join(users, sessions.c.user_id == users.c.id))
            .where(sessions.c.id == session_id)
        )
        with self._store_errors("get_session_and_user"):
            row = self._db.execute(statement).first()

        if row is None:
            logger.debug("No session/user pair for session %s", session_id)
            return None, None

        split = len(sessions.columns)
        return self._to_session(row[:split]), self._to_user(row[split:])

    async def get_user_sessions(
        self, user_id: str
    ) -> list[DatabaseSession[SessionAttributes]]:
        sessions = self._session_table
        statement = select(*sessions.columns).where(sessions.c.user_id == user_id)
        with self._store_errors("get_user_sessions"):
            rows = self._db.execute(statement).all()
        return [self._to_session(row) for row in rows]

    async def set_session(self, session: DatabaseSession[SessionAttributes]) -> None:
        expires_at = require_aware(session.expires_at)
        values = self._session_attributes.encode(session.attributes)
        values.update(
            id=session.id,
            user_id=session.user_id,
            expires_at=expires_at,
        )
        with self._store_errors("set_session"):
            self._db.execute(insert(self._session_table).values(**values))
            self._db.commit()
        logger.debug("Stored session %s for user %s", session.id, session.user_id)

    async def update_session_expiration(
        self, session_id: str, expires_at: datetime
    ) -> None:
        expires_at = require_aware(expires_at)
        sessions = self._session_table
        statement = (
            update(sessions)
            .where(sessions.c.id == session_id)
            .values(expires_at=expires_at)
        )
        with self._store_errors("update_session_expiration"):
            self._db.execute(statement)
            self._db.commit()

    async def delete_session(self, session_id: str) -> None:
        sessions = self._session_table
        with self._store_errors("delete_session"):
            self._db.execute(delete(sessions).where(sessions.c.id == session_id))
            self._db.commit()

    async def delete_user_sessions(self, user_id: str) -> None:
        sessions = self._session_table
        with self._store_errors("delete_user_sessions"):
            self._db.execute(delete(sessions).where(sessions.c.user_id == user_id))
            self._db.commit()

    async def delete_expired_sessions(self) -> int:
        sessions = self._session_table
        now = self._clock().astimezone(timezone.utc)
        with self._store_errors("delete_expired_sessions"):
            result = self._db.execute(delete(sessions).where(sessions.c.expires_at <= now))
            count = result.rowcount
            self._db.commit()
        logger.info("Deleted %d expired sessions (cutoff %s)", count, now.isoformat())
        return count

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """Roll back and re-raise store errors as StorageFailure."""
        try:
            yield
        except IntegrityError as exc:
            self._db.rollback()
            logger.warning("Session store rejected %s: %s", operation, exc.orig)
            raise ConstraintViolation(
                f"{operation} violated a store constraint", cause=exc
            ) from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Session store failure during %s", operation, exc_info=True)
            raise StorageFailure(f"{operation} failed", cause=exc) from exc

    def _to_session(self, values: Sequence[Any]) -> DatabaseSession[SessionAttributes]:
        data = dict(zip(self._session_table.columns.keys(), values))
        session_id = data.pop("id")
        user_id = data.pop("user_id")
        expires_at = _as_utc(data.pop("expires_at"))
        return DatabaseSession(
            id=session_id,
            user_id=user_id,
            expires_at=expires_at,
            attributes=self._session_attributes.decode(data),
        )

    def _to_user(self, values: Sequence[Any]) -> DatabaseUser[UserAttributes]:
        data = dict(zip(self._user_table.columns.keys(), values))
        user_id = data.pop("id")
        return DatabaseUser(id=user_id, attributes=self._user_attributes.decode(data))


def _as_utc(value: datetime) -> datetime:
    # Plain DateTime columns on SQLite come back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
