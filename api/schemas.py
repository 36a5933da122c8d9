"""Pydantic schemas for the session API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from storage import SessionDetail, SessionSummary


class CreatedData(BaseModel):
    transcript: str
    feedback: Dict[str, Any]


class CreateResp(BaseModel):
    success: bool = True
    session_id: str
    data: CreatedData


class ListResp(BaseModel):
    success: bool = True
    data: List[SessionSummary]


class DetailResp(BaseModel):
    success: bool = True
    data: SessionDetail


class MessageResp(BaseModel):
    success: bool = True
    message: str


class ErrorResp(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
