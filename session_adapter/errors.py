"""Errors raised by session store adapters.

"Not found" is never an error: lookups return ``(None, None)`` or an empty
list, and writes against missing rows are no-ops. Only failures reported by
the underlying store surface as exceptions.
"""
from typing import Optional


class StorageFailure(Exception):
    """The underlying store failed (connectivity, timeout, malformed query)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ConstraintViolation(StorageFailure):
    """The store rejected a write on a uniqueness or foreign-key rule."""


__all__ = ["StorageFailure", "ConstraintViolation"]
