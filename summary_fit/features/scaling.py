"""Scale observations into the spread range each family's estimators were trained on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from summary_fit.distributions.families import Family
from summary_fit.schema.observation import InputObservation


@dataclass(frozen=True)
class ComfortZone:
    """Target spread plus the range of spreads that needs no rescaling."""

    target: float
    low: float
    high: float

    def contains(self, spread: float) -> bool:
        return self.low <= spread <= self.high


COMFORT_ZONES: Dict[Family, ComfortZone] = {
    Family.NORMAL: ComfortZone(target=20.0, low=5.0, high=25.0),
    Family.EXPONENTIAL: ComfortZone(target=10.0, low=5.0, high=20.0),
    Family.LOGNORMAL: ComfortZone(target=300.0, low=10.0, high=500.0),
    Family.WEIBULL: ComfortZone(target=20.0, low=5.0, high=40.0),
}

# IQR of a standard normal
IQR_TO_SIGMA = 1.349


@dataclass(frozen=True)
class ScaledFeatureSet:
    """Numeric fields of an observation multiplied by `scale_factor`; n is never scaled."""

    n: int
    m: float
    a: Optional[float]
    b: Optional[float]
    q1: Optional[float]
    q3: Optional[float]
    scale_factor: float = 1.0

    def unscale(self, value: float) -> float:
        return value / self.scale_factor


def rough_spread(observation: InputObservation) -> float:
    """Crude std estimate: range/4 when the extremes are known, else IQR/1.349."""
    if observation.scenario.has_extremes:
        return (observation.b - observation.a) / 4.0
    return (observation.q3 - observation.q1) / IQR_TO_SIGMA


def scale_factor_for(family: Family, observation: InputObservation) -> float:
    zone = COMFORT_ZONES.get(family)
    if zone is None:
        return 1.0
    spread = rough_spread(observation)
    if spread > 0 and not zone.contains(spread):
        return zone.target / spread
    return 1.0


def _mul(value: Optional[float], factor: float) -> Optional[float]:
    return None if value is None else value * factor


def scale_features(family: Family, observation: InputObservation, n: int) -> ScaledFeatureSet:
    """Build the scaled copy of `observation` for `family` using the capped sample size `n`."""
    factor = scale_factor_for(family, observation)
    obs = observation
    return ScaledFeatureSet(
        n=n,
        m=obs.m * factor,
        a=_mul(obs.a, factor),
        b=_mul(obs.b, factor),
        q1=_mul(obs.q1, factor),
        q3=_mul(obs.q3, factor),
        scale_factor=factor,
    )


__all__ = [
    "COMFORT_ZONES",
    "ComfortZone",
    "ScaledFeatureSet",
    "rough_spread",
    "scale_factor_for",
    "scale_features",
]
