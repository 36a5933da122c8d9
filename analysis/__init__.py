"""Speech metrics and generated feedback for recorded interview answers."""
from .errors import MetricsError, ValidationFailure
from .feedback import DEGRADED_ERROR, FeedbackRequester, build_prompt
from .metrics import calculate_pauses, derive_metrics, pause_statistics
from .types import (
    SUPPORTED_LANGUAGES,
    ChatTurn,
    FeedbackDegraded,
    FeedbackOutcome,
    FeedbackPayload,
    FeedbackSuccess,
    SessionRecord,
    TechnicalMetrics,
    TimedWord,
    Transcription,
)

__all__ = [
    "DEGRADED_ERROR",
    "SUPPORTED_LANGUAGES",
    "ChatTurn",
    "FeedbackDegraded",
    "FeedbackOutcome",
    "FeedbackPayload",
    "FeedbackRequester",
    "FeedbackSuccess",
    "MetricsError",
    "SessionRecord",
    "TechnicalMetrics",
    "TimedWord",
    "Transcription",
    "ValidationFailure",
    "build_prompt",
    "calculate_pauses",
    "derive_metrics",
    "pause_statistics",
]
