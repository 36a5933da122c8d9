"""SQLite schema migrations."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .sqlite import get_conn

SESSIONS_TABLE = "transcriptions"
DOCUMENTS_TABLE = "session_documents"

SCHEMA: Iterable[str] = [
    f"""
CREATE TABLE IF NOT EXISTS {SESSIONS_TABLE} (
  seq INTEGER PRIMARY KEY AUTOINCREMENT,
  session_id TEXT NOT NULL UNIQUE,
  user_id TEXT NOT NULL,
  language TEXT NOT NULL,
  created_at TEXT NOT NULL,
  transcript TEXT NOT NULL,
  wpm REAL NOT NULL,
  duration_seconds REAL NOT NULL,
  summary_score REAL NOT NULL,
  summary_verdict INTEGER NOT NULL
);
""",
    f"""
CREATE INDEX IF NOT EXISTS idx_{SESSIONS_TABLE}_owner_created
  ON {SESSIONS_TABLE} (user_id, created_at DESC, seq DESC);
""",
    f"""
CREATE TABLE IF NOT EXISTS {DOCUMENTS_TABLE} (
  session_id TEXT NOT NULL,
  name TEXT NOT NULL,
  body_json TEXT NOT NULL,
  PRIMARY KEY (session_id, name),
  FOREIGN KEY (session_id) REFERENCES {SESSIONS_TABLE}(session_id) ON DELETE CASCADE
);
""",
]


def migrate(db_path: str | Path = "data/sessions.db") -> None:
    """Apply schema migrations to the SQLite database."""

    with get_conn(Path(db_path)) as conn:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
