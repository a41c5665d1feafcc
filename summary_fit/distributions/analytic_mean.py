"""Closed-form Normal mean from summary statistics.

The Normal mean is not estimated by a trained model; it is an n-dependent
weighted blend of centrality proxies (midpoint of the extremes, midpoint of the
quartiles, and the median).
"""

from __future__ import annotations

import math

from summary_fit.schema.observation import InputObservation, Scenario


def blend_weights(scenario: Scenario, n: int) -> tuple[float, ...]:
    """Weights for (mid-extremes, median), (mid-quartiles, median) or all three for S3."""

    if scenario is Scenario.S1:
        w1 = 4.0 / (4.0 + n ** 0.75)
        return w1, 1.0 - w1
    if scenario is Scenario.S2:
        w1 = 0.7 + 0.39 / n
        return w1, 1.0 - w1
    w1 = 2.2 / (2.2 + n ** 0.75)
    w2 = 0.7 - 0.72 / n ** 0.55
    return w1, w2, 1.0 - w1 - w2


def normal_mean(observation: InputObservation, n: int) -> float:
    """Weighted-centrality mean for `observation` using the (capped) sample size `n`."""

    obs = observation
    weights = blend_weights(obs.scenario, n)
    if obs.scenario is Scenario.S1:
        proxies = ((obs.a + obs.b) / 2.0, obs.m)
    elif obs.scenario is Scenario.S2:
        proxies = ((obs.q1 + obs.q3) / 2.0, obs.m)
    else:
        proxies = ((obs.a + obs.b) / 2.0, (obs.q1 + obs.q3) / 2.0, obs.m)
    mu = math.fsum(w * x for w, x in zip(weights, proxies))
    return mu


__all__ = ["blend_weights", "normal_mean"]
