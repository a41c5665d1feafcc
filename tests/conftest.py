import json
from pathlib import Path
from typing import Callable, Dict, Tuple

import numpy as np
import pytest

from summary_fit.config.manifest import iter_manifest
from summary_fit.distributions.families import Family
from summary_fit.interfaces.estimator import PointEstimationService
from summary_fit.schema.observation import Scenario

IQR = 1.349

# Linear coefficients per (scenario, layout kind, parameter). Every estimate is
# homogeneous of degree one in the order statistics and ignores n, so results
# do not depend on the scale factor the adapter applies.
RAW_MEAN = {
    Scenario.S1: [0.0, 0.25, 0.5, 0.25],
    Scenario.S2: [0.0, 1 / 3, 1 / 3, 1 / 3],
    Scenario.S3: [0.0, 0.2, 0.2, 0.2, 0.2, 0.2],
}
RAW_STD = {
    Scenario.S1: [0.0, -0.25, 0.0, 0.25],
    Scenario.S2: [0.0, -1 / IQR, 0.0, 1 / IQR],
    Scenario.S3: [0.0, 0.0, -1 / IQR, 0.0, 1 / IQR, 0.0],
}
CENTERED_STD = {
    Scenario.S1: [0.0, -0.25, 0.25],
    Scenario.S2: [0.0, -1 / IQR, 1 / IQR],
    Scenario.S3: [0.0, 0.0, -1 / IQR, 1 / IQR, 0.0],
}


def linear_coef(scenario: Scenario, family: Family, kind: str) -> list[float]:
    if family is Family.NORMAL:
        return CENTERED_STD[scenario]
    return RAW_MEAN[scenario] if kind == "mean" else RAW_STD[scenario]


Override = Callable[[np.ndarray], float]


class FakeEstimationService(PointEstimationService):
    """In-memory estimator using the linear coefficients above, with per-key overrides."""

    def __init__(self, overrides: Dict[Tuple[Family, str], Override] | None = None) -> None:
        self.overrides = overrides or {}
        self.calls: list[tuple[Scenario, Family, str, np.ndarray]] = []

    def estimate(self, scenario, family, kind, features):
        row = np.asarray(features, dtype=np.float64).reshape(-1)
        self.calls.append((scenario, family, kind, row.copy()))
        override = self.overrides.get((family, kind))
        if override is not None:
            return float(override(row))
        return float(row @ np.asarray(linear_coef(scenario, family, kind)))

    def families_called(self) -> set[Family]:
        return {call[1] for call in self.calls}


@pytest.fixture
def fake_service() -> FakeEstimationService:
    return FakeEstimationService()


def write_linear_artifacts(models_dir: Path, suffix: str = ".json") -> Path:
    models_dir.mkdir(parents=True, exist_ok=True)
    for entry in iter_manifest():
        payload = {"coef": linear_coef(entry.scenario, entry.family, entry.kind), "intercept": 0.0}
        entry.path(models_dir, suffix).write_text(json.dumps(payload))
    return models_dir


@pytest.fixture
def models_dir(tmp_path) -> Path:
    return write_linear_artifacts(tmp_path / "models")


@pytest.fixture
def make_service():
    return FakeEstimationService
