import pytest

from summary_fit.config.settings import DEFAULT_PREFERENCE_ORDER, EngineConfig
from summary_fit.distributions.families import Family
from summary_fit.exceptions import ConfigValidationError


def test_defaults():
    cfg = EngineConfig()
    assert cfg.n_cap == 1000
    assert cfg.tie_margin == pytest.approx(0.001)
    assert cfg.preference_order == DEFAULT_PREFERENCE_ORDER


def test_from_dict_parses_preference_string():
    cfg = EngineConfig.from_dict({"preference_order": "beta, normal", "tie_margin": 0.01, "models_dir": None})
    assert cfg.preference_order == (Family.BETA, Family.NORMAL)
    assert cfg.tie_margin == 0.01
    assert cfg.to_dict()["preference_order"] == ["Beta", "Normal"]
    assert EngineConfig.from_dict(cfg.to_dict()) == cfg


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigValidationError, match="tie_margn"):
        EngineConfig.from_dict({"tie_margn": 0.01})


@pytest.mark.parametrize(
    "overrides",
    [
        {"n_cap": 0},
        {"extreme_asymmetry_ratio": 1.0},
        {"moderate_asymmetry_ratio": 30.0},
        {"tie_margin": -0.1},
        {"max_workers": 0},
        {"preference_order": ("normal", "normal")},
        {"preference_order": ("gamma",)},
        {"artifact_suffix": "json"},
        {"memoryless_exclusion_tolerance": 0.001},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigValidationError):
        EngineConfig(**overrides)
