"""Request dependencies shared by the session routes."""
from __future__ import annotations

from fastapi import Header, HTTPException, Request

from services.sessions import SessionService

USER_HEADER = "X-User-Id"


def current_user(x_user_id: str | None = Header(default=None, alias=USER_HEADER)) -> str:
    """Authenticated user id forwarded by the upstream identity layer."""

    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()


def session_service(request: Request) -> SessionService:
    service = getattr(request.app.state, "sessions", None)
    if service is None:
        raise RuntimeError("Session service not initialized")
    return service
