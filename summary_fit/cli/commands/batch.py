"""Batch CLI command: fit every row of a CSV table."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from summary_fit.batch import fit_csv
from summary_fit.cli.options import resolve_engine_config
from summary_fit.config.factories import build_engine, resolve_loader
from summary_fit.exceptions import ConfigValidationError
from summary_fit.utils.logging import get_logger

console = Console()
log = get_logger(__name__, component="cli_batch")


def batch(
    source: Path = typer.Argument(..., help="CSV with columns scenario,n,min,q1,median,q3,max"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write results to CSV or JSON"),
    models_dir: Optional[Path] = typer.Option(None, "--models-dir", help="Directory with estimator artifacts"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON config path"),
    loader: Optional[str] = typer.Option(None, "--loader", help="Artifact loader as module:callable"),
) -> None:
    """Fit a distribution for each row of a table of summary statistics."""

    if not source.exists():
        raise ConfigValidationError(f"Input table not found: {source}")
    engine_config, merged = resolve_engine_config(
        config, {"models_dir": str(models_dir) if models_dir else None, "loader": loader}
    )
    engine = build_engine(engine_config, resolve_loader(merged.get("loader")))
    try:
        result = fit_csv(engine, source, output)
    except ValueError as exc:
        raise ConfigValidationError(str(exc)) from exc

    failed = int(result["error"].notna().sum())
    console.print(f"Fitted {len(result) - failed} of {len(result)} rows")
    if failed:
        console.print(f"[yellow]{failed} row(s) failed; see the error column[/yellow]")
    if output is None:
        typer.echo(result.to_csv(index=False))
    log.info("Batch command completed", extra={"rows": len(result), "failed": failed})


__all__ = ["batch"]
