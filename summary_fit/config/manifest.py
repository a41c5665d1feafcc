"""Estimator manifest: which trained artifact serves each (scenario, family, kind)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Literal, Tuple

from summary_fit.distributions.families import Family
from summary_fit.schema.observation import Scenario

ParameterKind = Literal["mean", "std"]
EstimatorKey = Tuple[Scenario, Family, ParameterKind]

# Normal has only a std estimator (its mean is analytic); Exponential only a
# mean estimator, whose output is reused as the scale.
FAMILY_KINDS: Dict[Family, Tuple[ParameterKind, ...]] = {
    Family.BETA: ("mean", "std"),
    Family.LOGNORMAL: ("mean", "std"),
    Family.WEIBULL: ("mean", "std"),
    Family.NORMAL: ("std",),
    Family.EXPONENTIAL: ("mean",),
}

_STEM_OVERRIDES: Dict[EstimatorKey, str] = {
    (Scenario.S3, Family.LOGNORMAL, "std"): "sigma_s3_log_model",
}


def artifact_stem(scenario: Scenario, family: Family, kind: ParameterKind) -> str:
    override = _STEM_OVERRIDES.get((scenario, family, kind))
    if override:
        return override
    if family is Family.EXPONENTIAL:
        return f"{scenario.value}_exp_model"
    prefix = "mu" if kind == "mean" else "sigma"
    return f"{prefix}_{scenario.value}_{family.key}_model"


@dataclass(frozen=True)
class ManifestEntry:
    scenario: Scenario
    family: Family
    kind: ParameterKind
    stem: str

    @property
    def key(self) -> EstimatorKey:
        return (self.scenario, self.family, self.kind)

    @property
    def name(self) -> str:
        return f"{self.scenario.value}_{self.family.key}_{self.kind}"

    def path(self, models_dir: Path, suffix: str) -> Path:
        return Path(models_dir) / f"{self.stem}{suffix}"


def default_manifest() -> list[ManifestEntry]:
    return list(iter_manifest())


def iter_manifest() -> Iterator[ManifestEntry]:
    for scenario in Scenario:
        for family, kinds in FAMILY_KINDS.items():
            for kind in kinds:
                yield ManifestEntry(scenario, family, kind, artifact_stem(scenario, family, kind))


__all__ = [
    "EstimatorKey",
    "FAMILY_KINDS",
    "ManifestEntry",
    "ParameterKind",
    "artifact_stem",
    "default_manifest",
    "iter_manifest",
]
