"""Quantile-matching loss for a candidate fit."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from summary_fit.distributions.families import CanonicalParams, quantile
from summary_fit.schema.observation import InputObservation, Scenario


def comparison_points(observation: InputObservation, n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Plotting probabilities and matching observed statistics for the scenario.

    The extremes are matched at 1/n and 1 - 1/n using the capped sample size `n`.
    """

    obs = observation
    if obs.scenario is Scenario.S1:
        probs = [1.0 / n, 0.5, 1.0 - 1.0 / n]
        observed = [obs.a, obs.m, obs.b]
    elif obs.scenario is Scenario.S2:
        probs = [0.25, 0.5, 0.75]
        observed = [obs.q1, obs.m, obs.q3]
    else:
        probs = [1.0 / n, 0.25, 0.5, 0.75, 1.0 - 1.0 / n]
        observed = [obs.a, obs.q1, obs.m, obs.q3, obs.b]
    return np.asarray(probs, dtype=float), np.asarray(observed, dtype=float)


def residuals(params: CanonicalParams, observation: InputObservation, n: int) -> np.ndarray:
    probs, observed = comparison_points(observation, n)
    return quantile(params, probs) - observed


def quantile_loss(params: CanonicalParams, observation: InputObservation, n: int) -> float:
    """Sum of squared quantile residuals; +inf when any quantile is not finite."""

    with np.errstate(all="ignore"):
        diffs = residuals(params, observation, n)
        if not np.all(np.isfinite(diffs)):
            return math.inf
        loss = float(np.sum(diffs * diffs))
    return loss if math.isfinite(loss) else math.inf


def num_comparison_points(scenario: Scenario) -> int:
    return 5 if scenario is Scenario.S3 else 3


__all__ = ["comparison_points", "num_comparison_points", "quantile_loss", "residuals"]
