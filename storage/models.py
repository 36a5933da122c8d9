from __future__ import annotations  # Stored session views returned to callers

from typing import Any, Dict, Optional

from pydantic import BaseModel


class SessionSummary(BaseModel):  # Lightweight listing entry without word-level detail
    session_id: str
    language: str
    transcript: str
    created_at: str
    summary_score: float
    summary_verdict: bool


class SessionDetail(BaseModel):  # Root document joined with its sub-documents
    session_id: str
    user_id: str
    language: str
    created_at: str
    transcript: str
    wpm: float
    duration_seconds: float
    summary_score: float
    summary_verdict: bool
    feedback: Optional[Dict[str, Any]] = None
    technical: Optional[Dict[str, Any]] = None


__all__ = ["SessionDetail", "SessionSummary"]
