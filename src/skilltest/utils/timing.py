"""Wall-clock helpers."""
from __future__ import annotations

import time


def elapsed_ms(start: float) -> float:
    """Milliseconds since a ``time.perf_counter()`` reading."""

    return (time.perf_counter() - start) * 1000
