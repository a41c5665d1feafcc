"""Engine configuration schema and validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from summary_fit.distributions.families import Family
from summary_fit.exceptions import ConfigValidationError

DEFAULT_PREFERENCE_ORDER: Tuple[Family, ...] = (
    Family.NORMAL,
    Family.LOGNORMAL,
    Family.WEIBULL,
    Family.EXPONENTIAL,
    Family.BETA,
)


@dataclass(slots=True)
class EngineConfig:
    n_cap: int = 1000
    extreme_asymmetry_ratio: float = 20.0
    moderate_asymmetry_ratio: float = 2.0
    symmetry_tolerance: float = 0.01
    memoryless_min_n: int = 100
    memoryless_match_tolerance: float = 0.01
    memoryless_exclusion_tolerance: float = 2.0
    tie_margin: float = 0.001
    preference_order: Tuple[Family, ...] = DEFAULT_PREFERENCE_ORDER
    reliability_ratio: float = 2.0
    max_workers: int = 5
    models_dir: Optional[str] = None
    artifact_suffix: str = ".json"
    load_workers: int = 8
    surface_weibull_approximation: bool = True

    def __post_init__(self) -> None:
        try:
            self.preference_order = tuple(Family.parse(f) for f in self.preference_order)
        except ValueError as exc:
            raise ConfigValidationError(str(exc)) from exc
        if self.n_cap <= 0:
            raise ConfigValidationError("n_cap must be > 0")
        if self.extreme_asymmetry_ratio <= 1:
            raise ConfigValidationError("extreme_asymmetry_ratio must be > 1")
        if not 1 <= self.moderate_asymmetry_ratio <= self.extreme_asymmetry_ratio:
            raise ConfigValidationError(
                "moderate_asymmetry_ratio must be between 1 and extreme_asymmetry_ratio"
            )
        if not 0 <= self.symmetry_tolerance < 1:
            raise ConfigValidationError("symmetry_tolerance must be in [0, 1)")
        if self.memoryless_min_n < 0:
            raise ConfigValidationError("memoryless_min_n must be >= 0")
        if self.memoryless_match_tolerance < 0:
            raise ConfigValidationError("memoryless_match_tolerance must be >= 0")
        if self.memoryless_exclusion_tolerance <= self.memoryless_match_tolerance:
            raise ConfigValidationError(
                "memoryless_exclusion_tolerance must exceed memoryless_match_tolerance"
            )
        if self.tie_margin < 0:
            raise ConfigValidationError("tie_margin must be >= 0")
        if len(set(self.preference_order)) != len(self.preference_order):
            raise ConfigValidationError("preference_order must not repeat a family")
        if self.reliability_ratio <= 0:
            raise ConfigValidationError("reliability_ratio must be positive")
        if self.max_workers <= 0:
            raise ConfigValidationError("max_workers must be positive")
        if self.load_workers <= 0:
            raise ConfigValidationError("load_workers must be positive")
        if not self.artifact_suffix.startswith("."):
            raise ConfigValidationError("artifact_suffix must start with '.'")

    @classmethod
    def from_dict(cls, data: dict) -> "EngineConfig":
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(f"Unknown config keys: {', '.join(unknown)}")
        kwargs = {k: v for k, v in data.items() if v is not None}
        if isinstance(kwargs.get("preference_order"), str):
            kwargs["preference_order"] = [p for p in kwargs["preference_order"].split(",") if p.strip()]
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {
            "n_cap": self.n_cap,
            "extreme_asymmetry_ratio": self.extreme_asymmetry_ratio,
            "moderate_asymmetry_ratio": self.moderate_asymmetry_ratio,
            "symmetry_tolerance": self.symmetry_tolerance,
            "memoryless_min_n": self.memoryless_min_n,
            "memoryless_match_tolerance": self.memoryless_match_tolerance,
            "memoryless_exclusion_tolerance": self.memoryless_exclusion_tolerance,
            "tie_margin": self.tie_margin,
            "preference_order": [f.value for f in self.preference_order],
            "reliability_ratio": self.reliability_ratio,
            "max_workers": self.max_workers,
            "models_dir": self.models_dir,
            "artifact_suffix": self.artifact_suffix,
            "load_workers": self.load_workers,
            "surface_weibull_approximation": self.surface_weibull_approximation,
        }


__all__ = ["DEFAULT_PREFERENCE_ORDER", "EngineConfig"]
