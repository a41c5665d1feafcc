"""Readers for estimator artifacts on disk.

Two formats are understood out of the box:

* ``.json`` - a linear model ``{"coef": [...], "intercept": x}``; optional
  ``"log_target": true`` exponentiates the prediction.
* ``.pkl`` / ``.pickle`` - any pickled object exposing ``predict``.

Other formats (ONNX, joblib, ...) plug in through the ``loader`` argument of
`EstimationService.load`.
"""

from __future__ import annotations

import json
import pickle
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np

from summary_fit.exceptions import EstimatorLoadError
from summary_fit.interfaces.estimator import Estimator


@dataclass(frozen=True)
class LinearEstimator:
    coef: tuple[float, ...]
    intercept: float = 0.0
    log_target: bool = False

    @property
    def n_features_in_(self) -> int:
        return len(self.coef)

    def predict(self, features: np.ndarray) -> np.ndarray:
        x = np.asarray(features, dtype=np.float64).reshape(-1, len(self.coef))
        y = x @ np.asarray(self.coef, dtype=np.float64) + self.intercept
        return np.exp(y) if self.log_target else y

    @classmethod
    def from_dict(cls, data: dict) -> "LinearEstimator":
        coef: Sequence[float] = data["coef"]
        return cls(
            coef=tuple(float(c) for c in coef),
            intercept=float(data.get("intercept", 0.0)),
            log_target=bool(data.get("log_target", False)),
        )

    def to_dict(self) -> dict:
        return {"coef": list(self.coef), "intercept": self.intercept, "log_target": self.log_target}


def load_json_estimator(path: Path) -> LinearEstimator:
    try:
        return LinearEstimator.from_dict(json.loads(Path(path).read_text()))
    except (KeyError, TypeError, ValueError) as exc:
        raise EstimatorLoadError(f"Malformed linear estimator artifact {path}: {exc}") from exc


def load_pickled_estimator(path: Path) -> Estimator:
    with open(path, "rb") as fh:
        obj = pickle.load(fh)
    if not hasattr(obj, "predict"):
        raise EstimatorLoadError(f"Pickled artifact {path} has no predict method")
    return obj


def load_artifact(path: Path) -> Estimator:
    """Dispatch on file suffix."""
    path = Path(path)
    if not path.exists():
        raise EstimatorLoadError(f"Estimator artifact not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        return load_json_estimator(path)
    if suffix in {".pkl", ".pickle"}:
        return load_pickled_estimator(path)
    raise EstimatorLoadError(f"Unsupported estimator artifact format: {path.name}")


__all__ = ["LinearEstimator", "load_artifact", "load_json_estimator", "load_pickled_estimator"]
