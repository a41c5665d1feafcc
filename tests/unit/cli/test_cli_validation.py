import pytest

from summary_fit.cli.validation import validate_observation_inputs
from summary_fit.exceptions import ConfigValidationError
from summary_fit.schema.observation import Scenario


def test_valid_inputs_pass():
    validate_observation_inputs(Scenario.S3, n=120, m=5.0, a=0.0, q1=3.0, q3=8.0, b=20.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"n": 50, "m": 5.0, "a": 1.0},
        {"n": None, "m": 5.0, "a": 1.0, "b": 9.0},
        {"n": 9, "m": 5.0, "a": 1.0, "b": 9.0},
        {"n": 50.5, "m": 5.0, "a": 1.0, "b": 9.0},
        {"n": 50, "m": 5.0, "a": -1.0, "b": 9.0},
        {"n": 50, "m": 10.0, "a": 1.0, "b": 9.0},
        {"n": 50, "m": float("nan"), "a": 1.0, "b": 9.0},
    ],
)
def test_invalid_s1_inputs(kwargs):
    with pytest.raises(ConfigValidationError):
        validate_observation_inputs(Scenario.S1, **kwargs)


def test_negative_values_allowed_on_request():
    validate_observation_inputs(Scenario.S2, n=30, m=0.0, q1=-2.0, q3=2.0, allow_negative=True)
