"""Map an estimated (mean, std) pair to a family's canonical parameters."""

from __future__ import annotations

import math
from typing import Optional

from scipy.special import gamma as gamma_func

from summary_fit.distributions.families import (
    BetaParams,
    CanonicalParams,
    ExponentialParams,
    Family,
    LogNormalParams,
    NormalParams,
    WeibullParams,
)
from summary_fit.distributions.weibull_solver import solve_weibull_shape


def _finite(*values: float) -> bool:
    return all(v is not None and math.isfinite(v) for v in values)


def beta_params(mean: float, std: float) -> Optional[BetaParams]:
    if not _finite(mean, std) or std == 0:
        return None
    s = mean * (1.0 - mean) / (std * std) - 1.0
    params = BetaParams(alpha=s * mean, beta=s * (1.0 - mean))
    return params if params.is_valid() else None


def weibull_params(mean: float, std: float) -> Optional[WeibullParams]:
    solution = solve_weibull_shape(mean, std)
    if solution is None or not _finite(solution.k) or solution.k <= 0:
        return None
    lam = mean / float(gamma_func(1.0 + 1.0 / solution.k))
    params = WeibullParams(k=solution.k, lam=lam, approximate=solution.approximate)
    return params if params.is_valid() else None


def lognormal_params(mean: float, std: float) -> Optional[LogNormalParams]:
    if not _finite(mean, std) or mean <= 0:
        return None
    sigma_ln_sq = math.log1p((std / mean) ** 2)
    if sigma_ln_sq < 0:
        return None
    params = LogNormalParams(mu_ln=math.log(mean) - sigma_ln_sq / 2.0, sigma_ln=math.sqrt(sigma_ln_sq))
    return params if params.is_valid() else None


def exponential_params(mean: float, std: float) -> Optional[ExponentialParams]:
    # the exponential estimator's mean output doubles as the scale
    params = ExponentialParams(theta=std)
    return params if params.is_valid() else None


def normal_params(mean: float, std: float) -> Optional[NormalParams]:
    params = NormalParams(mu=mean, sigma=std)
    return params if params.is_valid() else None


_MAPPERS = {
    Family.BETA: beta_params,
    Family.WEIBULL: weibull_params,
    Family.LOGNORMAL: lognormal_params,
    Family.EXPONENTIAL: exponential_params,
    Family.NORMAL: normal_params,
}


def map_parameters(family: Family, mean: float, std: float) -> Optional[CanonicalParams]:
    """Return canonical parameters for `family`, or None when the pair is invalid for it."""
    return _MAPPERS[family](mean, std)


__all__ = [
    "beta_params",
    "exponential_params",
    "lognormal_params",
    "map_parameters",
    "normal_params",
    "weibull_params",
]
