"""
Session store adapter.

Lets a session-based authentication library keep users and sessions in a
relational database without depending on a particular driver. The library
calls one adapter operation per lifecycle event:

    from session_adapter import SQLAlchemyAdapter
    from session_adapter.models import Session, User

    adapter = SQLAlchemyAdapter(db, Session, User)
    await adapter.set_session(session)
    session, user = await adapter.get_session_and_user(session.id)
    await adapter.delete_expired_sessions()

Not found is signalled by (None, None) or an empty list. Store failures
raise StorageFailure, or ConstraintViolation for integrity errors.
"""
from session_adapter.adapters import (
    Adapter,
    AttributeCodec,
    DatabaseSession,
    DatabaseUser,
    DictAttributes,
    MemoryAdapter,
    SQLAlchemyAdapter,
)
from session_adapter.errors import ConstraintViolation, StorageFailure

__all__ = [
    "Adapter",
    "AttributeCodec",
    "ConstraintViolation",
    "DatabaseSession",
    "DatabaseUser",
    "DictAttributes",
    "MemoryAdapter",
    "SQLAlchemyAdapter",
    "StorageFailure",
]
