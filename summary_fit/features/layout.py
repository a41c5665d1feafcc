"""Feature-vector layouts shared with the trained estimator artifacts.

The field order below is a fixed contract with the estimators: changing it does
not fail loudly, it silently degrades every estimate. Bump
FEATURE_LAYOUT_VERSION together with the artifacts.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np

from summary_fit.distributions.families import Family
from summary_fit.features.scaling import ScaledFeatureSet
from summary_fit.schema.observation import Scenario

FEATURE_LAYOUT_VERSION = "1"

# Normal estimators see spreads centred on the median
CENTERED_LAYOUTS: Dict[Scenario, Tuple[str, ...]] = {
    Scenario.S1: ("n", "a-m", "b-m"),
    Scenario.S2: ("n", "q1-m", "q3-m"),
    Scenario.S3: ("n", "a-m", "q1-m", "q3-m", "b-m"),
}

RAW_LAYOUTS: Dict[Scenario, Tuple[str, ...]] = {
    Scenario.S1: ("n", "a", "m", "b"),
    Scenario.S2: ("n", "q1", "m", "q3"),
    Scenario.S3: ("n", "a", "q1", "m", "q3", "b"),
}


def layout_for(scenario: Scenario, family: Family) -> Tuple[str, ...]:
    if family is Family.NORMAL:
        return CENTERED_LAYOUTS[scenario]
    return RAW_LAYOUTS[scenario]


def _resolve(name: str, features: ScaledFeatureSet) -> float:
    if name == "n":
        return float(features.n)
    if name.endswith("-m"):
        return getattr(features, name[:-2]) - features.m
    return getattr(features, name)


def build_feature_vector(scenario: Scenario, family: Family, features: ScaledFeatureSet) -> np.ndarray:
    """Return the float32 row vector of shape (1, k) fed to the estimators."""
    values = [_resolve(name, features) for name in layout_for(scenario, family)]
    return np.asarray(values, dtype=np.float32).reshape(1, -1)


__all__ = [
    "CENTERED_LAYOUTS",
    "FEATURE_LAYOUT_VERSION",
    "RAW_LAYOUTS",
    "build_feature_vector",
    "layout_for",
]
