from __future__ import annotations  # FastAPI server exposing recorded answer analysis

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import router as sessions_router
from config import AppConfig, Settings, default_config, settings as default_settings
from services.sessions import SessionService, build_services
from storage import StorageError


logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:  # Uniform error envelope
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Invalid request")


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "Internal server error")


def create_app(
    settings: Optional[Settings] = None,
    app_config: Optional[AppConfig] = None,
    services: Optional[SessionService] = None,
) -> FastAPI:  # Build the application; services are wired once at startup
    cfg = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            app.state.sessions = services
        else:
            routes = app_config or default_config(cfg.APP_CONFIG_PATH)
            app.state.sessions = build_services(cfg, routes)
        logger.info("Session service initialized db=%s", cfg.DB_PATH)
        yield

    app = FastAPI(title="Interview Answer Analysis API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StorageError, _storage_error)
    app.add_exception_handler(Exception, _unhandled_error)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(sessions_router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
