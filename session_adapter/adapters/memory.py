"""In-memory session store adapter, for tests and single-process setups."""
import copy
import logging
from datetime import datetime, timezone
from typing import Callable, MutableMapping, Optional

from session_adapter.adapters.base import (
    Adapter,
    DatabaseSession,
    DatabaseUser,
    SessionAttributes,
    UserAttributes,
    require_aware,
    utc_now,
)
from session_adapter.errors import ConstraintViolation

logger = logging.getLogger(__name__)


class MemoryAdapter(Adapter[SessionAttributes, UserAttributes]):
    """
    Adapter over plain dictionaries.

    ``users`` maps user id to its attribute bag and is owned by the caller;
    ``sessions`` maps session id to DatabaseSession. Rows are copied in and
    out so callers never share state with the store.
    """

    def __init__(
        self,
        users: MutableMapping[str, UserAttributes],
        *,
        sessions: Optional[MutableMapping[str, DatabaseSession[SessionAttributes]]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._users = users
        self._sessions = sessions if sessions is not None else {}
        self._clock = clock

    async def get_session_and_user(
        self, session_id: str
    ) -> tuple[
        Optional[DatabaseSession[SessionAttributes]],
        Optional[DatabaseUser[UserAttributes]],
    ]:
        session = self._sessions.get(session_id)
        if session is None or session.user_id not in self._users:
            return None, None
        user = DatabaseUser(
            id=session.user_id,
            attributes=copy.deepcopy(self._users[session.user_id]),
        )
        return copy.deepcopy(session), user

    async def get_user_sessions(self, user_id: str) -> list[DatabaseSession[SessionAttributes]]:
        return [
            copy.deepcopy(session)
            for session in self._sessions.values()
            if session.user_id == user_id
        ]

    async def set_session(self, session: DatabaseSession[SessionAttributes]) -> None:
        expires_at = require_aware(session.expires_at)
        if session.id in self._sessions:
            raise ConstraintViolation(f"Session '{session.id}' already exists")
        if session.user_id not in self._users:
            raise ConstraintViolation(
                f"Session '{session.id}' references unknown user '{session.user_id}'"
            )
        stored = copy.deepcopy(session)
        stored.expires_at = expires_at
        self._sessions[session.id] = stored

    async def update_session_expiration(self, session_id: str, expires_at: datetime) -> None:
        expires_at = require_aware(expires_at)
        session = self._sessions.get(session_id)
        if session is not None:
            session.expires_at = expires_at

    async def delete_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def delete_user_sessions(self, user_id: str) -> None:
        for session_id in [s.id for s in self._sessions.values() if s.user_id == user_id]:
            del self._sessions[session_id]

    async def delete_expired_sessions(self) -> int:
        now = self._clock().astimezone(timezone.utc)
        expired = [s.id for s in self._sessions.values() if s.expires_at <= now]
        for session_id in expired:
            del self._sessions[session_id]
        logger.info("Deleted %d expired sessions (cutoff %s)", len(expired), now.isoformat())
        return len(expired)
