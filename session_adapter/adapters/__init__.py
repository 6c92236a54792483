from session_adapter.adapters.base import (
    Adapter,
    AttributeCodec,
    DatabaseSession,
    DatabaseUser,
    DictAttributes,
)
from session_adapter.adapters.memory import MemoryAdapter
from session_adapter.adapters.sqlalchemy_adapter import SQLAlchemyAdapter

__all__ = [
    "Adapter",
    "AttributeCodec",
    "DatabaseSession",
    "DatabaseUser",
    "DictAttributes",
    "MemoryAdapter",
    "SQLAlchemyAdapter",
]
