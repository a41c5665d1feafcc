"""Caller-side checks for observations entered on the command line."""

from __future__ import annotations

import math
from typing import Optional

from summary_fit.exceptions import ConfigValidationError
from summary_fit.schema.observation import REQUIRED_FIELDS, Scenario

MIN_SAMPLE_SIZE = 10

_FIELD_LABELS = {"a": "min", "b": "max", "m": "median", "q1": "q1", "q3": "q3"}


def validate_observation_inputs(
    scenario: Scenario,
    *,
    n: Optional[float],
    m: Optional[float],
    a: Optional[float] = None,
    b: Optional[float] = None,
    q1: Optional[float] = None,
    q3: Optional[float] = None,
    allow_negative: bool = False,
) -> None:
    values = {"m": m, "a": a, "b": b, "q1": q1, "q3": q3}
    required = REQUIRED_FIELDS[scenario]
    missing = [_FIELD_LABELS[f] for f in required if values[f] is None or not math.isfinite(values[f])]
    if n is None or missing:
        names = (["n"] if n is None else []) + missing
        raise ConfigValidationError(
            f"Scenario {scenario.value} requires valid numbers for: {', '.join(names)}"
        )
    if n < MIN_SAMPLE_SIZE or float(n) != int(n):
        raise ConfigValidationError(f"sample size must be an integer of at least {MIN_SAMPLE_SIZE}")

    lowest = a if scenario.has_extremes else q1
    if not allow_negative and lowest < 0:
        raise ConfigValidationError(
            "Negative values detected: only data with non-negative values is supported "
            "(pass --allow-negative to override)"
        )

    ordered = [values[f] for f in ("a", "q1", "m", "q3", "b") if f in required]
    if any(lo > hi for lo, hi in zip(ordered, ordered[1:])):
        raise ConfigValidationError(
            "values are not in logical order (expected min <= q1 <= median <= q3 <= max)"
        )


__all__ = ["MIN_SAMPLE_SIZE", "validate_observation_inputs"]
