from __future__ import annotations  # Session record persistence with owner-scoped access

import asyncio
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from analysis.types import SessionRecord

from .batch import WriteBatch
from .errors import (
    MissingRowError,
    SessionAccessDeniedError,
    SessionNotFoundError,
    StorageError,
    StoreNotInitializedError,
)
from .migrate import DOCUMENTS_TABLE, SESSIONS_TABLE, migrate
from .models import SessionDetail, SessionSummary
from .sqlite import get_conn


logger = logging.getLogger(__name__)

FEEDBACK_DOC = "feedback"
TECHNICAL_DOC = "technical"

_ROOT_COLUMNS = (
    "session_id",
    "user_id",
    "language",
    "created_at",
    "transcript",
    "wpm",
    "duration_seconds",
    "summary_score",
    "summary_verdict",
)


def summary_fields(feedback: Dict[str, Any]) -> Dict[str, Any]:
    """Denormalized score and verdict copied onto the root document at write time."""

    oratory = feedback.get("oratory_expert")
    verdict = feedback.get("recruiter_verdict")
    score = oratory.get("score") if isinstance(oratory, dict) else None
    passed = verdict.get("passed") if isinstance(verdict, dict) else None
    return {
        "summary_score": float(score) if isinstance(score, (int, float)) and not isinstance(score, bool) else 0.0,
        "summary_verdict": passed is True,
    }


class SessionStore:  # SQLite-backed store for composed session records
    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._ready = False

    @property
    def path(self) -> Path:
        return self._path

    def initialize(self) -> None:
        """Create tables and indexes; required before any other call."""

        migrate(self._path)
        self._ready = True
        logger.info("Session store ready path=%s", self._path)

    async def create(self, record: SessionRecord) -> str:
        """Write the root document and both sub-documents in one batch."""

        self._require_ready()
        feedback = record.feedback.document()
        technical = {
            "metrics": record.metrics.model_dump(),
            "words": [word.model_dump() for word in record.words],
            "context_used": list(record.context_used),
        }
        summary = summary_fields(feedback)
        batch = WriteBatch()
        batch.set(
            SESSIONS_TABLE,
            {
                "session_id": record.session_id,
                "user_id": record.user_id,
                "language": record.language,
                "created_at": record.created_at,
                "transcript": record.transcript,
                "wpm": record.metrics.wpm,
                "duration_seconds": record.metrics.duration_seconds,
                "summary_score": summary["summary_score"],
                "summary_verdict": int(summary["summary_verdict"]),
            },
        )
        batch.set(
            DOCUMENTS_TABLE,
            {"session_id": record.session_id, "name": FEEDBACK_DOC, "body_json": json.dumps(feedback, ensure_ascii=False)},
        )
        batch.set(
            DOCUMENTS_TABLE,
            {"session_id": record.session_id, "name": TECHNICAL_DOC, "body_json": json.dumps(technical, ensure_ascii=False)},
        )
        await asyncio.to_thread(self._commit, batch)
        return record.session_id

    async def get(self, session_id: str, user_id: str) -> SessionDetail:
        """Return the composite view of a session owned by ``user_id``."""

        root = await self._owned_root(session_id, user_id)
        feedback, technical = await asyncio.gather(
            asyncio.to_thread(self._fetch_document, session_id, FEEDBACK_DOC),
            asyncio.to_thread(self._fetch_document, session_id, TECHNICAL_DOC),
        )
        return SessionDetail(**root, feedback=feedback, technical=technical)

    async def list(self, user_id: str, limit: int = 10) -> List[SessionSummary]:
        """Newest-first summaries of the sessions owned by ``user_id``."""

        self._require_ready()
        rows = await asyncio.to_thread(self._select_summaries, user_id, limit)
        return [
            SessionSummary(
                session_id=row["session_id"],
                language=row["language"],
                transcript=row["transcript"],
                created_at=row["created_at"],
                summary_score=row["summary_score"],
                summary_verdict=bool(row["summary_verdict"]),
            )
            for row in rows
        ]

    async def delete(self, session_id: str, user_id: str) -> None:
        """Remove the session and all of its sub-documents after the ownership check."""

        await self._owned_root(session_id, user_id)
        try:
            await asyncio.to_thread(self._delete_all, session_id)
        except MissingRowError as exc:
            # Removed by an overlapping delete after the ownership check.
            raise SessionNotFoundError(session_id) from exc

    async def _owned_root(self, session_id: str, user_id: str) -> Dict[str, Any]:
        self._require_ready()
        root = await asyncio.to_thread(self._fetch_root, session_id)
        if root is None:
            raise SessionNotFoundError(session_id)
        if root["user_id"] != user_id:
            logger.warning("Session access denied session=%s requester=%s", session_id, user_id)
            raise SessionAccessDeniedError(session_id)
        return root

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotInitializedError("Session store not initialized")

    def _commit(self, batch: WriteBatch) -> None:
        with get_conn(self._path) as conn:
            batch.commit(conn)

    def _fetch_root(self, session_id: str) -> Optional[Dict[str, Any]]:
        columns = ", ".join(_ROOT_COLUMNS)
        with get_conn(self._path) as conn:
            row = self._read(
                conn,
                f"SELECT {columns} FROM {SESSIONS_TABLE} WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        if row is None:
            return None
        data = {key: row[key] for key in _ROOT_COLUMNS}
        data["summary_verdict"] = bool(data["summary_verdict"])
        return data

    def _fetch_document(self, session_id: str, name: str) -> Optional[Dict[str, Any]]:
        with get_conn(self._path) as conn:
            row = self._read(
                conn,
                f"SELECT body_json FROM {DOCUMENTS_TABLE} WHERE session_id = ? AND name = ?",
                (session_id, name),
            ).fetchone()
        if row is None:
            return None
        return json.loads(row["body_json"])

    def _select_summaries(self, user_id: str, limit: int) -> List[sqlite3.Row]:
        with get_conn(self._path) as conn:
            return self._read(
                conn,
                f"""
                SELECT session_id, language, transcript, created_at, summary_score, summary_verdict
                FROM {SESSIONS_TABLE}
                WHERE user_id = ?
                ORDER BY created_at DESC, seq DESC
                LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()

    def _delete_all(self, session_id: str) -> None:
        with get_conn(self._path) as conn:
            names = [
                row["name"]
                for row in self._read(
                    conn,
                    f"SELECT name FROM {DOCUMENTS_TABLE} WHERE session_id = ?",
                    (session_id,),
                ).fetchall()
            ]
            batch = WriteBatch()
            for name in names:
                batch.delete(DOCUMENTS_TABLE, session_id=session_id, name=name)
            batch.delete(SESSIONS_TABLE, required=True, session_id=session_id)
            batch.commit(conn)

    def _read(self, conn: sqlite3.Connection, sql: str, params: tuple) -> sqlite3.Cursor:
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageError("Session store read failed") from exc


__all__ = ["FEEDBACK_DOC", "SessionStore", "TECHNICAL_DOC", "summary_fields"]
