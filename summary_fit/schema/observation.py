"""Input observation schema: sample size plus excerpted order statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from summary_fit.exceptions import InputValidityError

DEFAULT_N_CAP = 1000


class Scenario(str, Enum):
    """Which subset of order statistics the caller supplies."""

    S1 = "s1"  # min, median, max
    S2 = "s2"  # q1, median, q3
    S3 = "s3"  # min, q1, median, q3, max

    @classmethod
    def parse(cls, raw: "Scenario | str | int") -> "Scenario":
        if isinstance(raw, Scenario):
            return raw
        text = str(raw).strip().lower()
        if not text.startswith("s"):
            text = f"s{text}"
        try:
            return cls(text)
        except ValueError:
            raise InputValidityError(f"Unknown scenario '{raw}'. Expected one of: s1, s2, s3") from None

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return REQUIRED_FIELDS[self]

    @property
    def has_extremes(self) -> bool:
        return self in (Scenario.S1, Scenario.S3)

    @property
    def has_quartiles(self) -> bool:
        return self in (Scenario.S2, Scenario.S3)

    @property
    def label(self) -> str:
        return SCENARIO_LABELS[self]


REQUIRED_FIELDS: Dict[Scenario, Tuple[str, ...]] = {
    Scenario.S1: ("a", "m", "b"),
    Scenario.S2: ("q1", "m", "q3"),
    Scenario.S3: ("a", "q1", "m", "q3", "b"),
}

SCENARIO_LABELS: Dict[Scenario, str] = {
    Scenario.S1: "S1 (Min, Median, Max)",
    Scenario.S2: "S2 (Q1, Median, Q3)",
    Scenario.S3: "S3 (Min, Q1, Median, Q3, Max)",
}


@dataclass(frozen=True)
class InputObservation:
    """Summary statistics for one sample.

    Only the fields required by `scenario` must be set; the others are ignored.
    Ordering (a <= q1 <= m <= q3 <= b) and n >= 10 are the caller's
    responsibility and are not re-checked here.
    """

    scenario: Scenario
    n: int
    m: float
    a: Optional[float] = None
    b: Optional[float] = None
    q1: Optional[float] = None
    q3: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "scenario", Scenario.parse(self.scenario))
        if self.n is None or not math.isfinite(float(self.n)) or self.n <= 0:
            raise InputValidityError("n must be a positive sample count")
        object.__setattr__(self, "n", int(self.n))
        missing = [name for name in self.scenario.required_fields if getattr(self, name) is None]
        if missing:
            raise InputValidityError(
                f"Scenario {self.scenario.value} requires {', '.join(missing)}"
            )
        for name in self.scenario.required_fields:
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise InputValidityError(f"{name} must be a finite number")
            object.__setattr__(self, name, value)

    def n_effective(self, cap: int = DEFAULT_N_CAP) -> int:
        return int(min(self.n, cap))

    def spreads(self) -> Tuple[float, float]:
        """Left/right spread around the median, preferring quartiles when present."""
        if self.scenario.has_quartiles:
            return self.m - self.q1, self.q3 - self.m
        return self.m - self.a, self.b - self.m

    def support_bounds(self) -> Tuple[float, float]:
        """Lowest and highest observed statistic."""
        if self.scenario.has_extremes:
            return self.a, self.b
        return self.q1, self.q3

    def data_scale(self) -> float:
        low, high = self.support_bounds()
        return high - low

    def values(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in self.scenario.required_fields}

    @classmethod
    def from_dict(cls, data: dict) -> "InputObservation":
        aliases = {"min": "a", "max": "b", "median": "m"}
        kwargs: dict = {}
        for key, value in data.items():
            field = aliases.get(key, key)
            if field in {"scenario", "n", "m", "a", "b", "q1", "q3"}:
                kwargs[field] = value
        absent = [name for name in ("scenario", "n", "m") if kwargs.get(name) is None]
        if absent:
            raise InputValidityError(f"Observation is missing {', '.join(absent)}")
        return cls(**kwargs)

    def to_dict(self) -> dict:
        payload = {"scenario": self.scenario.value, "n": self.n}
        payload.update(self.values())
        return payload
