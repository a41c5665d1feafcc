"""Configuration loading with CLI > ENV > file > defaults precedence."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from summary_fit.exceptions import ConfigValidationError
from summary_fit.utils.logging import get_logger

log = get_logger(__name__, component="config_loader")

Caster = Callable[[Any], Any]


def _load_yaml(path: Path) -> dict:
    try:
        import yaml  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ConfigValidationError("pyyaml is required to load YAML config files") from exc
    content = yaml.safe_load(Path(path).read_text())
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigValidationError(f"Config file must contain a mapping: {path}")
    return content


def load_config_file(path: Path | str | None) -> dict:
    if path is None:
        return {}
    path = Path(path)
    if not path.exists():
        raise ConfigValidationError(f"Config file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            content = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigValidationError(f"Invalid JSON config {path}: {exc}") from exc
        if not isinstance(content, dict):
            raise ConfigValidationError(f"Config file must contain a mapping: {path}")
        return content
    if suffix in {".yml", ".yaml"}:
        return _load_yaml(path)
    raise ConfigValidationError("Config file must be JSON or YAML")


def _cast(key: str, value: Any, casters: Mapping[str, Caster]) -> Any:
    caster = casters.get(key)
    if caster is None or value is None:
        return value
    try:
        return caster(value)
    except (TypeError, ValueError) as exc:
        raise ConfigValidationError(f"Invalid value for {key}: {value!r}") from exc


def load_config_with_precedence(
    *,
    config_path: Path | str | None,
    env_prefix: str,
    cli_values: Mapping[str, Any],
    defaults: Mapping[str, Any],
    casters: Optional[Mapping[str, Caster]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Merge configuration sources; later sources override earlier ones.

    Order: defaults < config file < environment (``{env_prefix}{KEY}``) < CLI.
    CLI values of None mean "not given" and never override.
    """

    casters = casters or {}
    environ = os.environ if environ is None else environ
    file_values = load_config_file(config_path)

    merged: Dict[str, Any] = dict(defaults)
    sources: Dict[str, str] = {key: "default" for key in defaults}

    for key, value in file_values.items():
        merged[key] = _cast(key, value, casters)
        sources[key] = "file"

    keys = set(merged) | set(cli_values)
    for key in keys:
        env_key = f"{env_prefix}{key.upper()}"
        if env_key in environ:
            merged[key] = _cast(key, environ[env_key], casters)
            sources[key] = "env"

    for key, value in cli_values.items():
        if value is not None:
            merged[key] = _cast(key, value, casters)
            sources[key] = "cli"

    log.debug("Resolved configuration", extra={"sources": sources})
    return merged


__all__ = ["load_config_file", "load_config_with_precedence"]
