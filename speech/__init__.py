from __future__ import annotations  # Speech-to-text package exports

from .transcriber import SpeechGatewayError, SpeechHttpClient, Transcriber, extract_words, parse_response

__all__ = ["SpeechGatewayError", "SpeechHttpClient", "Transcriber", "extract_words", "parse_response"]
