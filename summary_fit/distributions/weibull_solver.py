"""Weibull shape solver: recover k from a mean/std pair.

For a Weibull distribution the squared coefficient of variation depends on the
shape only:

    CV^2 = Gamma(1 + 2/k) / Gamma(1 + 1/k)^2 - 1

The shape is found by bisection over a fixed bracket. When the target CV lies
outside what the bracket can reach, the closed-form approximation
k ~= CV^-1.086 is used instead and the solution is flagged as approximate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from scipy.special import gamma as gamma_func

K_LOW = 0.1
K_HIGH = 20.0
TOLERANCE = 1e-6
MAX_ITERATIONS = 100
FALLBACK_EXPONENT = -1.086


@dataclass(frozen=True)
class WeibullShapeSolution:
    k: float
    method: str  # "bisection" | "approximation"
    iterations: int = 0
    residual: Optional[float] = None

    @property
    def approximate(self) -> bool:
        return self.method == "approximation"


def cv_residual(k: float, target_cv_sq: float) -> float:
    """Gamma(1+2/k)/Gamma(1+1/k)^2 - 1 - target; +inf where undefined."""
    if k <= 0:
        return math.inf
    g1 = float(gamma_func(1.0 + 1.0 / k))
    g2 = float(gamma_func(1.0 + 2.0 / k))
    if g1 == 0 or not math.isfinite(g1) or not math.isfinite(g2):
        return math.inf
    return g2 / (g1 * g1) - 1.0 - target_cv_sq


def solve_weibull_shape(
    mean: float,
    std: float,
    *,
    low: float = K_LOW,
    high: float = K_HIGH,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> Optional[WeibullShapeSolution]:
    """Return the Weibull shape matching `std/mean`, or None when mean or std is not positive."""

    if not (math.isfinite(mean) and math.isfinite(std)) or mean <= 0 or std <= 0:
        return None

    cv = std / mean
    target = cv * cv

    f_low = cv_residual(low, target)
    f_high = cv_residual(high, target)
    if not f_low * f_high < 0:
        return WeibullShapeSolution(k=math.pow(cv, FALLBACK_EXPONENT), method="approximation")

    mid = (low + high) / 2.0
    f_mid = cv_residual(mid, target)
    for iteration in range(1, max_iterations + 1):
        mid = (low + high) / 2.0
        f_mid = cv_residual(mid, target)
        if abs(f_mid) < tolerance:
            return WeibullShapeSolution(k=mid, method="bisection", iterations=iteration, residual=f_mid)
        if f_low * f_mid < 0:
            high = mid
        else:
            low, f_low = mid, f_mid
    return WeibullShapeSolution(k=mid, method="bisection", iterations=max_iterations, residual=f_mid)


__all__ = ["WeibullShapeSolution", "cv_residual", "solve_weibull_shape"]
