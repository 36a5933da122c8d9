"""Shared type definitions for answer analysis."""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

Language = Literal["en", "es"]
SUPPORTED_LANGUAGES = ("en", "es")


class TimedWord(BaseModel):
    word: str
    start: float
    end: float
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    punctuated_word: Optional[str] = None


class Pause(BaseModel):
    start: float
    end: float
    duration: float


class PauseStatistics(BaseModel):
    total_pause_time: float = 0.0
    pause_count: int = 0
    longest_pause: float = 0.0


class TechnicalMetrics(BaseModel):
    duration_seconds: float
    word_count: int
    wpm: float
    pause_percentage: float
    average_confidence: float


class Transcription(BaseModel):
    """Provider output for one uploaded answer."""

    transcript: str
    words: List[TimedWord] = Field(default_factory=list)
    confidence: float = 0.0
    duration_seconds: float = 0.0
    request_id: Optional[str] = None


class ChatTurn(BaseModel):
    role: str
    text: str


class OratoryAssessment(BaseModel):
    score: float = Field(ge=0, le=100)
    summary: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    pacing_feedback: str


class RecruiterVerdict(BaseModel):
    passed: bool
    decision_rationale: str
    star_method_check: str
    soft_skills: List[str] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)


class ImprovementPlan(BaseModel):
    immediate_action: str
    long_term_advice: str


class FeedbackPayload(BaseModel):
    oratory_expert: OratoryAssessment
    recruiter_verdict: RecruiterVerdict
    improvement_plan: ImprovementPlan


class FeedbackSuccess(BaseModel):
    kind: Literal["success"] = "success"
    payload: FeedbackPayload

    def document(self) -> Dict[str, Any]:
        return self.payload.model_dump()


class FeedbackDegraded(BaseModel):
    kind: Literal["degraded"] = "degraded"
    error: str
    details: str
    fallback_metrics: TechnicalMetrics

    def document(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "details": self.details,
            "fallback_metrics": self.fallback_metrics.model_dump(),
        }


FeedbackOutcome = Union[FeedbackSuccess, FeedbackDegraded]


class SessionRecord(BaseModel):
    """Complete in-memory result of one analyzed answer, ready to persist."""

    session_id: str
    user_id: str
    language: Language
    created_at: str
    transcript: str
    words: List[TimedWord] = Field(default_factory=list)
    metrics: TechnicalMetrics
    feedback: FeedbackOutcome = Field(discriminator="kind")
    context_used: List[Dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "ChatTurn",
    "FeedbackDegraded",
    "FeedbackOutcome",
    "FeedbackPayload",
    "FeedbackSuccess",
    "ImprovementPlan",
    "Language",
    "OratoryAssessment",
    "Pause",
    "PauseStatistics",
    "RecruiterVerdict",
    "SUPPORTED_LANGUAGES",
    "SessionRecord",
    "TechnicalMetrics",
    "TimedWord",
    "Transcription",
]
