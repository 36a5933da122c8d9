"""FastAPI routes for recorded answer sessions."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from analysis.errors import ValidationFailure
from api.deps import current_user, session_service
from api.schemas import CreatedData, CreateResp, DetailResp, ListResp, MessageResp
from services.sessions import SessionService, parse_history
from speech import SpeechGatewayError
from storage import SessionUnavailableError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions")

SESSION_NOT_FOUND = "Session not found"
AUDIO_DISABLED = "Audio storage functionality is currently disabled."


def _unavailable() -> HTTPException:
    # Not-found and access-denied share one response.
    return HTTPException(status_code=404, detail=SESSION_NOT_FOUND)


@router.post("", response_model=CreateResp, status_code=201)
async def create(
    audio: Optional[UploadFile] = File(default=None),
    conversation_history: Optional[str] = Form(default=None),
    language: Optional[str] = Form(default=None),
    user_id: str = Depends(current_user),
    service: SessionService = Depends(session_service),
) -> CreateResp:
    if audio is None:
        raise HTTPException(status_code=400, detail="No audio file provided")
    try:
        payload = await audio.read()
    finally:
        await audio.close()
    history = parse_history(conversation_history)
    try:
        created = await service.create(
            user_id=user_id,
            audio=payload,
            language=language,
            history=history,
            content_type=audio.content_type,
        )
    except ValidationFailure as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SpeechGatewayError as exc:
        logger.exception("Transcription failed")
        raise HTTPException(status_code=502, detail="Transcription failed") from exc

    record = created.record
    return CreateResp(
        session_id=record.session_id,
        data=CreatedData(transcript=record.transcript, feedback=record.feedback.document()),
    )


@router.get("", response_model=ListResp)
async def list_sessions(
    limit: Optional[int] = Query(default=None),
    user_id: str = Depends(current_user),
    service: SessionService = Depends(session_service),
) -> ListResp:
    try:
        sessions = await service.list(user_id, limit)
    except ValidationFailure as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ListResp(data=sessions)


@router.get("/{session_id}", response_model=DetailResp)
async def get_session(
    session_id: str,
    user_id: str = Depends(current_user),
    service: SessionService = Depends(session_service),
) -> DetailResp:
    try:
        detail = await service.get(session_id, user_id)
    except SessionUnavailableError as exc:
        raise _unavailable() from exc
    return DetailResp(data=detail)


@router.delete("/{session_id}", response_model=MessageResp)
async def delete_session(
    session_id: str,
    user_id: str = Depends(current_user),
    service: SessionService = Depends(session_service),
) -> MessageResp:
    try:
        await service.delete(session_id, user_id)
    except SessionUnavailableError as exc:
        raise _unavailable() from exc
    return MessageResp(message="Session deleted successfully")


@router.get("/{session_id}/audio", status_code=501)
async def get_session_audio(session_id: str, user_id: str = Depends(current_user)) -> None:
    raise HTTPException(status_code=501, detail=AUDIO_DISABLED)
