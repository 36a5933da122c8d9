"""Error types raised by the analysis components."""
from __future__ import annotations


class ValidationFailure(ValueError):  # Caller supplied missing or malformed input
    pass


class MetricsError(ValidationFailure):  # Timing input cannot produce metrics
    pass


__all__ = ["MetricsError", "ValidationFailure"]
