"""Timing helpers for request-level performance logging."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from summary_fit.utils.logging import get_logger

log = get_logger(__name__, component="profiling")


@dataclass
class Timing:
    start: float
    elapsed_ms: Optional[float] = None


@contextmanager
def track_time(name: str, *, warn_budget_ms: float | None = None, extra: dict | None = None) -> Iterator[Timing]:
    """Time a block and log its wall-clock duration.

    The yielded Timing has `elapsed_ms` filled in once the block exits, also when
    the block raises.
    """

    timing = Timing(start=time.perf_counter())
    try:
        yield timing
    finally:
        timing.elapsed_ms = round((time.perf_counter() - timing.start) * 1000.0, 3)
        fields = {"segment": name, "duration_ms": timing.elapsed_ms}
        if extra:
            fields.update(extra)
        if warn_budget_ms is not None and timing.elapsed_ms >= warn_budget_ms:
            log.warning("Performance budget exceeded", extra=fields)
        else:
            log.debug("Segment timing", extra=fields)
