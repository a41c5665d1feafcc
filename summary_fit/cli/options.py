"""Shared option handling for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from summary_fit.config.loader import load_config_with_precedence
from summary_fit.config.settings import EngineConfig

ENV_PREFIX = "SUMMARY_FIT_"


def _as_bool(value: Any) -> bool:
    return str(value).lower() in {"1", "true", "yes", "on"}


CASTERS = {
    "n_cap": int,
    "extreme_asymmetry_ratio": float,
    "moderate_asymmetry_ratio": float,
    "symmetry_tolerance": float,
    "memoryless_min_n": int,
    "memoryless_match_tolerance": float,
    "memoryless_exclusion_tolerance": float,
    "tie_margin": float,
    "reliability_ratio": float,
    "max_workers": int,
    "load_workers": int,
    "models_dir": str,
    "artifact_suffix": str,
    "loader": str,
    "surface_weibull_approximation": _as_bool,
}


def resolve_engine_config(config: Optional[Path], cli_values: Dict[str, Any]) -> tuple[EngineConfig, Dict[str, Any]]:
    """Merge CLI > ENV > file > defaults and build an EngineConfig from the result."""
    defaults = EngineConfig().to_dict()
    defaults["loader"] = None
    merged = load_config_with_precedence(
        config_path=config,
        env_prefix=ENV_PREFIX,
        cli_values=cli_values,
        defaults=defaults,
        casters=CASTERS,
    )
    engine_values = {key: value for key, value in merged.items() if key != "loader"}
    return EngineConfig.from_dict(engine_values), merged
