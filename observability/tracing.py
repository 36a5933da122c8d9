"""Simple span helper for recording pipeline stage timings."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict, Iterator


@contextmanager
def span(timings: Dict[str, int], name: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        timings[name] = int((time.perf_counter() - start) * 1000)


__all__ = ["span"]
