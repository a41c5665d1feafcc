"""Factory helpers for building the engine and its estimation service."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from summary_fit.config.settings import EngineConfig
from summary_fit.estimation.artifacts import load_artifact
from summary_fit.estimation.service import ArtifactLoader, EstimationService
from summary_fit.exceptions import ConfigValidationError
from summary_fit.selection.engine import DecisionEngine

log = logging.getLogger(__name__)


def resolve_loader(target: Optional[str]) -> ArtifactLoader:
    """Resolve ``package.module:callable`` to an artifact loader (default: bundled readers)."""
    if not target:
        return load_artifact
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ConfigValidationError(f"Loader must look like 'module:callable', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigValidationError(f"Cannot import loader module {module_name!r}: {exc}") from exc
    loader = getattr(module, attr, None)
    if not callable(loader):
        raise ConfigValidationError(f"Loader {target!r} is not callable")
    return loader


def build_service(config: EngineConfig, loader: Optional[ArtifactLoader] = None) -> EstimationService:
    if not config.models_dir:
        raise ConfigValidationError("models_dir is required to load estimators")
    models_dir = Path(config.models_dir)
    if not models_dir.is_dir():
        raise ConfigValidationError(f"models_dir does not exist: {models_dir}")
    return EstimationService.load(
        models_dir,
        loader=loader or load_artifact,
        suffix=config.artifact_suffix,
        max_workers=config.load_workers,
    )


def build_engine(config: EngineConfig, loader: Optional[ArtifactLoader] = None) -> DecisionEngine:
    engine = DecisionEngine(build_service(config, loader), config)
    log.info(
        "Component loaded",
        extra={"type": engine.__class__.__name__, "models_dir": config.models_dir, "estimators": len(engine.adapter.service)},
    )
    return engine


__all__ = ["build_engine", "build_service", "resolve_loader"]
