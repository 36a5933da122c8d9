"""Per-request session pipeline and owner-scoped session access."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from analysis.errors import ValidationFailure
from analysis.feedback import FeedbackRequester
from analysis.types import SUPPORTED_LANGUAGES, ChatTurn, SessionRecord
from config import AppConfig, Settings
from observability import log_event, span
from speech import Transcriber
from storage import SessionDetail, SessionStore, SessionSummary

from .composer import SessionComposer


logger = logging.getLogger(__name__)

_HISTORY = TypeAdapter(List[ChatTurn])


@dataclass
class CreatedSession:
    record: SessionRecord
    timings_ms: Dict[str, int]

    @property
    def session_id(self) -> str:
        return self.record.session_id


def parse_history(raw: Optional[str]) -> List[ChatTurn]:
    """Decode a serialized conversation history; malformed input yields an empty history."""

    if not raw:
        return []
    try:
        return _HISTORY.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Ignoring malformed conversation history: %s", exc)
        return []


class SessionService:
    """Runs transcription, composition and persistence for one uploaded answer.

    Constructed once at process start and handed to request handlers; every
    call fails until :meth:`initialize` has wired its collaborators.
    """

    def __init__(self) -> None:
        self._store: Optional[SessionStore] = None
        self._composer: Optional[SessionComposer] = None
        self._transcriber: Optional[Transcriber] = None
        self._default_language = "en"
        self._limit_default = 10
        self._limit_max = 100

    def initialize(
        self,
        *,
        store: SessionStore,
        composer: SessionComposer,
        transcriber: Transcriber,
        default_language: str = "en",
        limit_default: int = 10,
        limit_max: int = 100,
    ) -> None:
        store.initialize()
        self._store = store
        self._composer = composer
        self._transcriber = transcriber
        self._default_language = default_language
        self._limit_default = limit_default
        self._limit_max = limit_max

    @property
    def initialized(self) -> bool:
        return self._store is not None

    @property
    def store(self) -> SessionStore:
        if self._store is None:
            raise RuntimeError("Session service not initialized")
        return self._store

    async def create(
        self,
        *,
        user_id: str,
        audio: bytes,
        language: Optional[str] = None,
        history: Optional[List[ChatTurn]] = None,
        content_type: Optional[str] = None,
    ) -> CreatedSession:
        store = self.store
        composer, transcriber = self._composer, self._transcriber
        if composer is None or transcriber is None:
            raise RuntimeError("Session service not initialized")
        language = language or self._default_language
        if not audio:
            raise ValidationFailure("No audio file provided")
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationFailure(f"Unsupported language '{language}'")

        timings: Dict[str, int] = {}
        with span(timings, "transcribe"):
            transcription = await transcriber.transcribe(audio, language, content_type=content_type)
        with span(timings, "compose"):
            record = await composer.compose(transcription, history or [], language, user_id=user_id)
        log_event(
            "session.composed",
            record.session_id,
            user_id=user_id,
            language=language,
            words=record.metrics.word_count,
            feedback=record.feedback.kind,
            ms=timings["compose"],
        )
        if record.feedback.kind == "degraded":
            log_event("session.feedback_degraded", record.session_id, outcome=record.feedback.details)
        with span(timings, "persist"):
            await store.create(record)
        log_event("session.persisted", record.session_id, user_id=user_id, ms=timings["persist"])
        return CreatedSession(record=record, timings_ms=timings)

    async def list(self, user_id: str, limit: Optional[int] = None) -> List[SessionSummary]:
        if limit is None:
            limit = self._limit_default
        if limit < 1 or limit > self._limit_max:
            raise ValidationFailure(f"limit must be between 1 and {self._limit_max}")
        return await self.store.list(user_id, limit)

    async def get(self, session_id: str, user_id: str) -> SessionDetail:
        return await self.store.get(session_id, user_id)

    async def delete(self, session_id: str, user_id: str) -> None:
        await self.store.delete(session_id, user_id)
        log_event("session.deleted", session_id, user_id=user_id)


def build_services(settings: Settings, app_config: AppConfig, *, http_client: Any = None) -> SessionService:
    """Construct and initialize the service graph for one process."""

    feedback = FeedbackRequester(app_config.llm, client=http_client)
    composer = SessionComposer(feedback, pause_threshold=settings.PAUSE_THRESHOLD_SECONDS)
    service = SessionService()
    service.initialize(
        store=SessionStore(Path(settings.DB_PATH)),
        composer=composer,
        transcriber=Transcriber(app_config.speech, client=http_client),
        default_language=settings.DEFAULT_LANGUAGE,
        limit_default=settings.LIST_LIMIT_DEFAULT,
        limit_max=settings.LIST_LIMIT_MAX,
    )
    return service


__all__ = ["CreatedSession", "SessionService", "build_services", "parse_history"]
