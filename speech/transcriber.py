from __future__ import annotations  # Speech-to-text gateway for recorded answers

import logging
import os
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from analysis.types import TimedWord, Transcription
from config import SpeechRoute
from llm_gateway import HttpResponse


logger = logging.getLogger(__name__)


class SpeechHttpClient(Protocol):  # Async client able to upload raw audio
    async def post(
        self,
        url: str,
        *,
        content: bytes,
        params: Dict[str, str],
        headers: Dict[str, str],
        timeout: float,
    ) -> HttpResponse: ...


class SpeechGatewayError(RuntimeError):  # Transcription could not be obtained
    pass


class Transcriber:  # Deepgram pre-recorded transcription client
    def __init__(self, route: SpeechRoute, client: Optional[SpeechHttpClient] = None) -> None:
        self._route = route
        self._client = client

    async def transcribe(self, audio: bytes, language: str, *, content_type: str | None = None) -> Transcription:
        """Upload ``audio`` and return the transcript with word timings."""

        route = self._route
        params = {
            "model": route.model,
            "language": language,
            "smart_format": _flag(route.smart_format),
            "punctuate": _flag(route.punctuate),
        }
        headers = {"Content-Type": content_type or route.content_type}
        if route.api_key_env:
            api_key = os.getenv(route.api_key_env)
            if api_key:
                headers["Authorization"] = f"Token {api_key}"
        headers.update(route.extra_headers)
        logger.info(
            "Transcription request route=%s model=%s language=%s bytes=%d",
            route.name,
            route.model,
            language,
            len(audio),
        )
        try:
            response = await self._post(route.url, audio, params, headers, route.timeout_s)
        except Exception as exc:  # noqa: BLE001
            logger.error("Transcription transport failure: %s", exc)
            raise SpeechGatewayError("Transcription transport failed") from exc
        if response.status_code >= 400:
            logger.error("Transcription error status: %s", response.status_code)
            raise SpeechGatewayError(f"Transcription returned status {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise SpeechGatewayError("Transcription payload was not JSON") from exc
        return parse_response(data)

    async def _post(
        self,
        url: str,
        audio: bytes,
        params: Dict[str, str],
        headers: Dict[str, str],
        timeout: float,
    ) -> HttpResponse:
        if self._client is not None:
            return await self._client.post(url, content=audio, params=params, headers=headers, timeout=timeout)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.post(url, content=audio, params=params, headers=headers)


def parse_response(data: Any) -> Transcription:
    """Map a provider response onto :class:`Transcription`."""

    try:
        alternative = data["results"]["channels"][0]["alternatives"][0]
        metadata = data.get("metadata") or {}
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise SpeechGatewayError("Transcription response missing alternatives") from exc
    try:
        return Transcription(
            transcript=alternative.get("transcript", ""),
            words=extract_words(alternative),
            confidence=float(alternative.get("confidence") or 0.0),
            duration_seconds=float(metadata.get("duration") or 0.0),
            request_id=metadata.get("request_id"),
        )
    except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SpeechGatewayError("Transcription response was malformed") from exc


def extract_words(alternative: Dict[str, Any]) -> List[TimedWord]:
    return [
        TimedWord(
            word=item["word"],
            start=float(item["start"]),
            end=float(item["end"]),
            confidence=float(item.get("confidence", 0.0)),
            punctuated_word=item.get("punctuated_word"),
        )
        for item in alternative.get("words") or []
    ]


def _flag(value: bool) -> str:
    return "true" if value else "false"


__all__ = ["SpeechGatewayError", "SpeechHttpClient", "Transcriber", "extract_words", "parse_response"]
