"""Observability utilities for the answer analysis service."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
