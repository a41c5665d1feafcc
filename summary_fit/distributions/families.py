"""Supported distribution families and their closed-form quantile functions.

Each family's canonical parameters are a frozen dataclass carrying its own
quantile function (`ppf`) and validity predicate, so dispatch is by type rather
than by family-name strings.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import ClassVar, Dict, Union

import numpy as np
from scipy import stats


class Family(str, Enum):
    NORMAL = "Normal"
    LOGNORMAL = "Log-Normal"
    WEIBULL = "Weibull"
    EXPONENTIAL = "Exponential"
    BETA = "Beta"

    @property
    def key(self) -> str:
        """Short key used in estimator manifests and config files."""
        return FAMILY_KEYS[self]

    @classmethod
    def parse(cls, raw: "Family | str") -> "Family":
        if isinstance(raw, Family):
            return raw
        text = str(raw).strip().lower()
        for family, key in FAMILY_KEYS.items():
            if text in {key, family.value.lower(), family.name.lower()}:
                return family
        if text in {"exponential", "expon"}:
            return cls.EXPONENTIAL
        raise ValueError(f"Unknown distribution family: {raw}")


FAMILY_KEYS: Dict[Family, str] = {
    Family.NORMAL: "normal",
    Family.LOGNORMAL: "lognormal",
    Family.WEIBULL: "weibull",
    Family.EXPONENTIAL: "exp",
    Family.BETA: "beta",
}


def _finite(*values: float) -> bool:
    return all(v is not None and math.isfinite(v) for v in values)


@dataclass(frozen=True)
class NormalParams:
    family: ClassVar[Family] = Family.NORMAL
    mu: float
    sigma: float

    def is_valid(self) -> bool:
        return _finite(self.mu, self.sigma)

    def ppf(self, p):
        # location-scale form stays defined for sigma <= 0
        return self.mu + self.sigma * stats.norm.ppf(p)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class LogNormalParams:
    family: ClassVar[Family] = Family.LOGNORMAL
    mu_ln: float
    sigma_ln: float

    def is_valid(self) -> bool:
        return _finite(self.mu_ln, self.sigma_ln) and self.sigma_ln >= 0

    def ppf(self, p):
        if self.sigma_ln == 0:
            return np.full_like(np.asarray(p, dtype=float), math.exp(self.mu_ln))
        return stats.lognorm.ppf(p, s=self.sigma_ln, scale=math.exp(self.mu_ln))

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class WeibullParams:
    family: ClassVar[Family] = Family.WEIBULL
    k: float
    lam: float
    # True when k came from the closed-form fallback rather than the root-finder
    approximate: bool = False

    def is_valid(self) -> bool:
        return _finite(self.k, self.lam) and self.k > 0 and self.lam > 0

    def ppf(self, p):
        return stats.weibull_min.ppf(p, self.k, scale=self.lam)

    def as_dict(self) -> Dict[str, float]:
        return {"k": self.k, "lambda": self.lam}


@dataclass(frozen=True)
class ExponentialParams:
    family: ClassVar[Family] = Family.EXPONENTIAL
    theta: float

    def is_valid(self) -> bool:
        return _finite(self.theta) and self.theta > 0

    def ppf(self, p):
        return stats.expon.ppf(p, scale=self.theta)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class BetaParams:
    family: ClassVar[Family] = Family.BETA
    alpha: float
    beta: float

    def is_valid(self) -> bool:
        return _finite(self.alpha, self.beta) and self.alpha > 0 and self.beta > 0

    def ppf(self, p):
        return stats.beta.ppf(p, self.alpha, self.beta)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


CanonicalParams = Union[NormalParams, LogNormalParams, WeibullParams, ExponentialParams, BetaParams]


def quantile(params: CanonicalParams, p) -> np.ndarray:
    """Evaluate the family's inverse CDF at probability (or array of probabilities) `p`."""
    return np.asarray(params.ppf(np.asarray(p, dtype=float)), dtype=float)


__all__ = [
    "BetaParams",
    "CanonicalParams",
    "ExponentialParams",
    "Family",
    "LogNormalParams",
    "NormalParams",
    "WeibullParams",
    "quantile",
]
