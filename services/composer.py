"""Assemble a complete session record from one transcription."""
from __future__ import annotations

import datetime as dt
import uuid
from typing import Any, Callable, Dict, List, Sequence

from analysis.errors import ValidationFailure
from analysis.feedback import FeedbackRequester
from analysis.metrics import derive_metrics
from analysis.types import SUPPORTED_LANGUAGES, ChatTurn, SessionRecord, Transcription

ANSWER_ROLE = "student"


def _utc_now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


class SessionComposer:
    """Derives metrics, requests feedback and builds the record to persist.

    The composer never writes anything; persisting the returned record is the
    caller's job.
    """

    def __init__(
        self,
        feedback: FeedbackRequester,
        *,
        pause_threshold: float,
        clock: Callable[[], str] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._feedback = feedback
        self._pause_threshold = pause_threshold
        self._clock = clock
        self._id_factory = id_factory

    async def compose(
        self,
        transcription: Transcription,
        history: Sequence[ChatTurn],
        language: str,
        *,
        user_id: str,
    ) -> SessionRecord:
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationFailure(f"Unsupported language '{language}'")
        if not user_id:
            raise ValidationFailure("user_id is required")

        metrics = derive_metrics(
            transcription.words,
            transcription.duration_seconds,
            transcription.confidence,
            threshold=self._pause_threshold,
        )
        conversation: List[ChatTurn] = list(history)
        conversation.append(ChatTurn(role=ANSWER_ROLE, text=transcription.transcript))
        feedback = await self._feedback.request(conversation, metrics, language)

        return SessionRecord(
            session_id=self._id_factory(),
            user_id=user_id,
            language=language,
            created_at=self._clock(),
            transcript=transcription.transcript,
            words=list(transcription.words),
            metrics=metrics,
            feedback=feedback,
            context_used=context_annotation(history),
        )


def context_annotation(history: Sequence[ChatTurn]) -> List[Dict[str, Any]]:
    """Name the prior turns that accompanied the new answer."""

    return [{"index": index, "role": turn.role} for index, turn in enumerate(history)]


__all__ = ["ANSWER_ROLE", "SessionComposer", "context_annotation"]
