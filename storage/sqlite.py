"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def connect(path: Path) -> sqlite3.Connection:
    """Open a connection with row access by name and foreign keys enforced."""

    path.parent.mkdir(parents=True, exist_ok=True)
    # Writers take the write lock at BEGIN so concurrent batches queue on the busy timeout.
    conn = sqlite3.connect(path, isolation_level="IMMEDIATE")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_conn(path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a connection for ``path`` and close it afterwards."""

    conn = connect(path)
    try:
        yield conn
    finally:
        conn.close()
