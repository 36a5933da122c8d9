from __future__ import annotations  # Session persistence package exports

from .batch import WriteBatch
from .errors import (
    MissingRowError,
    SessionAccessDeniedError,
    SessionNotFoundError,
    SessionUnavailableError,
    StorageError,
    StoreNotInitializedError,
)
from .models import SessionDetail, SessionSummary
from .sessions import SessionStore

__all__ = [
    "MissingRowError",
    "SessionAccessDeniedError",
    "SessionDetail",
    "SessionNotFoundError",
    "SessionStore",
    "SessionSummary",
    "SessionUnavailableError",
    "StorageError",
    "StoreNotInitializedError",
    "WriteBatch",
]
