"""All-or-nothing write batches over a SQLite connection."""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Sequence, Tuple

from .errors import MissingRowError, StorageError

Operation = Tuple[str, Sequence[Any], bool]


class WriteBatch:  # Collects writes and applies them in one transaction
    def __init__(self) -> None:
        self._ops: List[Operation] = []

    def __len__(self) -> int:
        return len(self._ops)

    def set(self, table: str, values: Dict[str, Any]) -> "WriteBatch":
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        self._ops.append((f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", tuple(values.values()), False))
        return self

    def delete(self, table: str, *, required: bool = False, **where: Any) -> "WriteBatch":
        """Queue a delete; a ``required`` delete that matches no row aborts the batch."""

        clause = " AND ".join(f"{column} = ?" for column in where)
        self._ops.append((f"DELETE FROM {table} WHERE {clause}", tuple(where.values()), required))
        return self

    def commit(self, conn: sqlite3.Connection) -> List[int]:
        """Apply every queued operation or none of them; returns per-operation row counts."""

        if not self._ops:
            return []
        counts: List[int] = []
        try:
            with conn:
                for sql, params, required in self._ops:
                    count = self._execute(conn, sql, params)
                    if required and count == 0:
                        raise MissingRowError(sql)
                    counts.append(count)
        except sqlite3.Error as exc:
            raise StorageError(f"Batch of {len(self._ops)} operations failed") from exc
        return counts

    def _execute(self, conn: sqlite3.Connection, sql: str, params: Sequence[Any]) -> int:
        return conn.execute(sql, params).rowcount


__all__ = ["WriteBatch"]
