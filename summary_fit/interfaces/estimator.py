"""Interfaces for the pre-trained point estimators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

import numpy as np

from summary_fit.config.manifest import ParameterKind
from summary_fit.distributions.families import Family
from summary_fit.schema.observation import Scenario


@runtime_checkable
class Estimator(Protocol):
    """A loaded regression artifact mapping a (1, k) feature row to a scalar."""

    def predict(self, features: np.ndarray): ...


class PointEstimationService(ABC):
    """Maps a feature vector to a scalar mean or std estimate."""

    @abstractmethod
    def estimate(
        self,
        scenario: Scenario,
        family: Family,
        kind: ParameterKind,
        features: np.ndarray,
    ) -> float:
        """Return the estimate for (scenario, family, kind) given a float32 (1, k) row."""

    def has_estimator(self, scenario: Scenario, family: Family, kind: ParameterKind) -> bool:
        return True


__all__ = ["Estimator", "PointEstimationService"]
