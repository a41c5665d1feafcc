"""Point estimation adapter: observation in, unscaled (mean, std) out."""

from __future__ import annotations

from summary_fit.config.manifest import FAMILY_KINDS
from summary_fit.distributions.analytic_mean import normal_mean
from summary_fit.distributions.families import Family
from summary_fit.features.layout import build_feature_vector
from summary_fit.features.scaling import scale_features
from summary_fit.interfaces.estimator import PointEstimationService
from summary_fit.schema.fit import PointEstimate
from summary_fit.schema.observation import InputObservation


class PointEstimationAdapter:
    def __init__(self, service: PointEstimationService) -> None:
        self.service = service

    def estimate(self, family: Family, observation: InputObservation, n: int) -> PointEstimate:
        """Scale, build the feature row, query the estimators and undo the scaling.

        `n` is the capped sample size. The Normal mean never goes through an
        estimator; the Exponential has no std estimator and reports std=None.
        """

        scenario = observation.scenario
        features = scale_features(family, observation, n)
        row = build_feature_vector(scenario, family, features)
        kinds = FAMILY_KINDS[family]

        if family is Family.NORMAL:
            sigma = self.service.estimate(scenario, family, "std", row)
            return PointEstimate(mean=normal_mean(observation, n), std=features.unscale(sigma))

        mean = features.unscale(self.service.estimate(scenario, family, "mean", row))
        std = None
        if "std" in kinds:
            std = features.unscale(self.service.estimate(scenario, family, "std", row))
        return PointEstimate(mean=mean, std=std)


__all__ = ["PointEstimationAdapter"]
