"""Owned registry of loaded point estimators.

The service is built once at startup, either from already-loaded estimator
objects or by loading every artifact in the manifest. Loading fans out on a
thread pool and joins before the service is returned; if any single artifact
fails, construction fails as a whole.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional

import numpy as np

from summary_fit.config.manifest import EstimatorKey, ManifestEntry, ParameterKind, default_manifest
from summary_fit.distributions.families import Family
from summary_fit.estimation.artifacts import load_artifact
from summary_fit.exceptions import EstimatorError, EstimatorLoadError
from summary_fit.features.layout import FEATURE_LAYOUT_VERSION, layout_for
from summary_fit.interfaces.estimator import Estimator, PointEstimationService
from summary_fit.schema.observation import Scenario
from summary_fit.utils.logging import get_logger

log = get_logger(__name__, component="estimation_service")

ArtifactLoader = Callable[[Path], Estimator]


def _check_layout(key: EstimatorKey, estimator: Estimator) -> None:
    expected = len(layout_for(key[0], key[1]))
    declared = getattr(estimator, "n_features_in_", None)
    if declared is not None and int(declared) != expected:
        log.warning(
            "Estimator feature count does not match layout",
            extra={
                "scenario": key[0].value,
                "family": key[1].value,
                "kind": key[2],
                "declared": int(declared),
                "expected": expected,
                "layout_version": FEATURE_LAYOUT_VERSION,
            },
        )


class EstimationService(PointEstimationService):
    def __init__(self, estimators: Mapping[EstimatorKey, Estimator]) -> None:
        self._estimators: Dict[EstimatorKey, Estimator] = dict(estimators)
        for key, estimator in self._estimators.items():
            _check_layout(key, estimator)

    @classmethod
    def load(
        cls,
        models_dir: Path | str,
        *,
        manifest: Optional[Iterable[ManifestEntry]] = None,
        loader: ArtifactLoader = load_artifact,
        suffix: str = ".json",
        max_workers: int = 8,
    ) -> "EstimationService":
        """Load every manifest entry from `models_dir`; any failure is fatal."""

        entries = list(manifest) if manifest is not None else default_manifest()
        base = Path(models_dir)
        loaded: Dict[EstimatorKey, Estimator] = {}
        failures: Dict[str, str] = {}

        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(entries) or 1))) as executor:
            futures = {executor.submit(loader, entry.path(base, suffix)): entry for entry in entries}
            for fut in as_completed(futures):
                entry = futures[fut]
                try:
                    loaded[entry.key] = fut.result()
                except Exception as exc:  # noqa: BLE001 - collected and re-raised below
                    log.error(
                        "Failed to load estimator",
                        extra={"estimator": entry.name, "path": str(entry.path(base, suffix)), "error": str(exc)},
                    )
                    failures[entry.name] = str(exc)

        if failures:
            names = ", ".join(sorted(failures))
            raise EstimatorLoadError(f"Failed to load {len(failures)} estimator(s): {names}")

        log.info("Estimators loaded", extra={"count": len(loaded), "models_dir": str(base)})
        return cls(loaded)

    def __len__(self) -> int:
        return len(self._estimators)

    def has_estimator(self, scenario: Scenario, family: Family, kind: ParameterKind) -> bool:
        return (scenario, family, kind) in self._estimators

    def estimate(
        self,
        scenario: Scenario,
        family: Family,
        kind: ParameterKind,
        features: np.ndarray,
    ) -> float:
        estimator = self._estimators.get((scenario, family, kind))
        if estimator is None:
            raise EstimatorError(
                f"No {kind} estimator registered for {family.value} in scenario {scenario.value}"
            )
        row = np.asarray(features, dtype=np.float32).reshape(1, -1)
        try:
            output = estimator.predict(row)
            value = float(np.asarray(output, dtype=np.float64).ravel()[0])
        except Exception as exc:  # noqa: BLE001 - third-party estimators raise anything
            raise EstimatorError(
                f"{kind} estimator for {family.value} ({scenario.value}) failed: {exc}"
            ) from exc
        return value


__all__ = ["ArtifactLoader", "EstimationService"]
