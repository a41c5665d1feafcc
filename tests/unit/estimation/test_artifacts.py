import json
import pickle

import numpy as np
import pytest

from summary_fit.estimation.artifacts import LinearEstimator, load_artifact
from summary_fit.exceptions import EstimatorLoadError


class _ConstantModel:
    def predict(self, features):
        return np.full(len(features), 7.0)


def test_json_linear_artifact(tmp_path):
    path = tmp_path / "mu_s1_weibull_model.json"
    path.write_text(json.dumps({"coef": [0.0, 0.5, 0.5], "intercept": 1.0}))
    estimator = load_artifact(path)
    assert estimator.n_features_in_ == 3
    assert estimator.predict(np.array([[10.0, 2.0, 4.0]], dtype=np.float32))[0] == pytest.approx(4.0)


def test_log_target_exponentiates():
    estimator = LinearEstimator(coef=(1.0,), log_target=True)
    assert estimator.predict(np.array([[0.0]]))[0] == pytest.approx(1.0)
    assert LinearEstimator.from_dict(estimator.to_dict()) == estimator


def test_pickled_artifact(tmp_path):
    path = tmp_path / "s2_exp_model.pkl"
    path.write_bytes(pickle.dumps(_ConstantModel()))
    assert load_artifact(path).predict(np.zeros((1, 4)))[0] == 7.0


def test_missing_and_unsupported_artifacts(tmp_path):
    with pytest.raises(EstimatorLoadError):
        load_artifact(tmp_path / "absent.json")
    onnx = tmp_path / "model.onnx"
    onnx.write_bytes(b"\x00")
    with pytest.raises(EstimatorLoadError):
        load_artifact(onnx)


def test_malformed_json_artifact(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"weights": [1, 2]}))
    with pytest.raises(EstimatorLoadError):
        load_artifact(path)
