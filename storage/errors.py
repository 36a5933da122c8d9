"""Error types raised by the session store."""
from __future__ import annotations


class StorageError(RuntimeError):  # A write or delete batch failed and was rolled back
    pass


class StoreNotInitializedError(StorageError):  # Store used before initialize()
    pass


class MissingRowError(StorageError):  # A required batch delete matched nothing; batch rolled back
    pass


class SessionUnavailableError(KeyError):  # Session cannot be served to the requester
    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return "Session not found"


class SessionNotFoundError(SessionUnavailableError):
    pass


class SessionAccessDeniedError(SessionUnavailableError):
    pass


__all__ = [
    "MissingRowError",
    "SessionAccessDeniedError",
    "SessionNotFoundError",
    "SessionUnavailableError",
    "StorageError",
    "StoreNotInitializedError",
]
