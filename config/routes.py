from __future__ import annotations  # Upstream provider routing configuration

from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field


class LlmRoute(BaseModel):  # Generative feedback endpoint configuration
    name: str = "feedback"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.0-flash"
    timeout_s: float = Field(default=60.0, ge=0.1)
    api_key_env: str | None = "GEMINI_API_KEY"
    response_mime_type: str | None = "application/json"
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


class SpeechRoute(BaseModel):  # Speech-to-text endpoint configuration
    name: str = "transcription"
    base_url: str = "https://api.deepgram.com"
    endpoint: str = "/v1/listen"
    model: str = "nova-2"
    timeout_s: float = Field(default=120.0, ge=0.1)
    api_key_env: str | None = "DEEPGRAM_API_KEY"
    smart_format: bool = True
    punctuate: bool = True
    content_type: str = "audio/*"
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.endpoint}"


class AppConfig(BaseModel):  # Application configuration root
    llm: LlmRoute = Field(default_factory=LlmRoute)
    speech: SpeechRoute = Field(default_factory=SpeechRoute)


def load_config(path: Path) -> AppConfig:  # Load configuration from disk
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def default_config(path: str | None = None) -> AppConfig:  # Config file when given, built-in routes otherwise
    if path:
        return load_config(Path(path))
    return AppConfig()
