from __future__ import annotations  # LLM request gateway module

import json
import logging
import os
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup


class AsyncHttpClient(Protocol):  # Minimal async HTTP client protocol
    async def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


T = TypeVar("T", bound=BaseModel)


async def generate(
    prompt: str,
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[AsyncHttpClient] = None,
) -> T:  # Send one prompt to the configured route and validate the JSON reply
    payload = _build_payload(prompt, cfg)
    headers = {"Content-Type": "application/json"}
    if cfg.api_key_env:
        api_key = os.getenv(cfg.api_key_env)
        if api_key:
            headers["x-goog-api-key"] = api_key
    headers.update(cfg.extra_headers)
    preview = _preview(prompt)
    logger.info("LLM request send route=%s model=%s preview=%s", cfg.name, cfg.model, preview)
    try:
        response, close_cb = await _post(cfg.url, payload, headers, cfg.timeout_s, client)
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM transport failure: %s", exc)
        raise LlmGatewayError("LLM transport failed") from exc
    try:
        if response.status_code >= 400:
            logger.error("LLM error status: %s", response.status_code)
            raise LlmGatewayError(f"LLM returned status {response.status_code}")
        try:
            data = response.json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Invalid JSON payload from LLM: %s", exc)
            raise LlmGatewayError("LLM payload was not JSON") from exc
        content = _extract_content(data)
        try:
            parsed = _validate(schema, content)
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("LLM output validation failed: %s", exc)
            raise LlmGatewayError("LLM output validation failed") from exc
    finally:
        await _close_safely(close_cb)
    logger.info("LLM request done route=%s model=%s", cfg.name, cfg.model)
    return parsed


def _build_payload(prompt: str, cfg: LlmRoute) -> Dict[str, Any]:  # generateContent request body
    generation_config: Dict[str, Any] = {}
    if cfg.response_mime_type:
        generation_config["responseMimeType"] = cfg.response_mime_type
    if cfg.temperature is not None:
        generation_config["temperature"] = cfg.temperature
    payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    if generation_config:
        payload["generationConfig"] = generation_config
    return payload


async def _post(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
    client: Optional[AsyncHttpClient],
) -> Tuple[HttpResponse, Optional[Callable[[], Any]]]:  # Dispatch HTTP request
    if client is not None:
        response = await client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.AsyncClient(timeout=timeout)
    try:
        response = await http_client.post(url, json=payload, headers=headers)
    except Exception:
        await http_client.aclose()
        raise
    return response, http_client.aclose


async def _close_safely(close_cb: Optional[Callable[[], Any]]) -> None:  # Close owned HTTP client
    if close_cb is not None:
        await close_cb()


def _preview(prompt: str) -> str:  # Build preview string for logging
    for line in prompt.splitlines():
        text = line.strip()
        if text:
            return text if len(text) <= 120 else text[:117] + "..."
    return ""


def _extract_content(data: Any) -> str:  # Extract candidate text from generateContent response
    if isinstance(data, dict):
        candidates = data.get("candidates")
        if isinstance(candidates, list) and candidates:
            content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
            parts = content.get("parts") if isinstance(content, dict) else None
            if isinstance(parts, list):
                texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
                if texts:
                    return "".join(texts)
        if isinstance(data.get("text"), str):
            return data["text"]
    raise LlmGatewayError("LLM response missing content")


def _validate(schema: Type[T], content: str) -> T:  # Parse JSON content with schema
    return schema.model_validate_json(_strip_code_fences(content))


def _strip_code_fences(content: str) -> str:  # Remove common markdown fences from LLM output
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()
        if lines:
            lines = lines[1:]
            while lines and lines[0].strip() == "":
                lines = lines[1:]
            while lines and lines[-1].strip() == "":
                lines = lines[:-1]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            text = "\n".join(lines).strip()
    return text
