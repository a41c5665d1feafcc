"""Shape checks used by the selection cascade."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from summary_fit.schema.observation import InputObservation

# (m - q1) / (q3 - m) for any exponential: ln(3/2) / ln(2)
MEMORYLESS_RATIO = math.log(1.5) / math.log(2.0)


@dataclass(frozen=True)
class AsymmetryProfile:
    left: float
    right: float

    @property
    def ratio(self) -> float:
        """Larger over smaller spread (>= 1)."""
        return max(self.left, self.right) / min(self.left, self.right)

    @property
    def relative_difference(self) -> float:
        return abs(self.left - self.right) / (self.left + self.right)


def asymmetry_profile(observation: InputObservation) -> Optional[AsymmetryProfile]:
    """Spreads around the median, or None when either side is not positive."""
    left, right = observation.spreads()
    if left > 0 and right > 0:
        return AsymmetryProfile(left=left, right=right)
    return None


def is_beta_domain(observation: InputObservation) -> bool:
    low, high = observation.support_bounds()
    return low >= 0 and high <= 1


def memoryless_relative_error(observation: InputObservation) -> Optional[float]:
    """Relative distance of (m - q1)/(q3 - m) from the exponential's value.

    Infinite when only the upper quartile spread is zero. None when the scenario
    has no quartiles or both quartile spreads are zero.
    """

    obs = observation
    if not obs.scenario.has_quartiles:
        return None
    if obs.q3 <= obs.m:
        return math.inf if obs.m > obs.q1 else None
    observed = (obs.m - obs.q1) / (obs.q3 - obs.m)
    return abs(observed - MEMORYLESS_RATIO) / MEMORYLESS_RATIO


__all__ = [
    "AsymmetryProfile",
    "MEMORYLESS_RATIO",
    "asymmetry_profile",
    "is_beta_domain",
    "memoryless_relative_error",
]
