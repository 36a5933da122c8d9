from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import AsyncHttpClient, HttpResponse, LlmGatewayError, generate

__all__ = ["AsyncHttpClient", "HttpResponse", "LlmGatewayError", "generate"]
