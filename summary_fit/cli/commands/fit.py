"""Fit CLI command: one observation in, best distribution out."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from summary_fit.cli.options import resolve_engine_config
from summary_fit.cli.validation import validate_observation_inputs
from summary_fit.config.factories import build_engine, resolve_loader
from summary_fit.exceptions import ConfigValidationError, InputValidityError
from summary_fit.schema.observation import InputObservation, Scenario
from summary_fit.selection.selection_report import build_selection_report, format_verdict
from summary_fit.utils.logging import get_logger

console = Console()
log = get_logger(__name__, component="cli_fit")


def _parse_scenario(raw: str) -> Scenario:
    try:
        return Scenario.parse(raw)
    except InputValidityError as exc:
        raise ConfigValidationError(str(exc)) from exc


def fit(
    scenario: str = typer.Option(..., "--scenario", "-s", help="s1 (min/median/max), s2 (quartiles) or s3 (all)"),
    n: float = typer.Option(..., "--n", help="Sample size (integer >= 10)"),
    median: float = typer.Option(..., "--median", help="Sample median"),
    minimum: Optional[float] = typer.Option(None, "--min", help="Sample minimum (s1, s3)"),
    maximum: Optional[float] = typer.Option(None, "--max", help="Sample maximum (s1, s3)"),
    q1: Optional[float] = typer.Option(None, "--q1", help="First quartile (s2, s3)"),
    q3: Optional[float] = typer.Option(None, "--q3", help="Third quartile (s2, s3)"),
    models_dir: Optional[Path] = typer.Option(None, "--models-dir", help="Directory with estimator artifacts"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON config path"),
    loader: Optional[str] = typer.Option(None, "--loader", help="Artifact loader as module:callable"),
    allow_negative: bool = typer.Option(False, "--allow-negative", help="Accept negative lower statistics"),
    as_json: bool = typer.Option(False, "--json", help="Print the full selection report as JSON"),
    plot: Optional[Path] = typer.Option(None, "--plot", help="Write a quantile diagnostics plot to this path"),
) -> None:
    """Estimate the best-fitting distribution from summary statistics."""

    parsed = _parse_scenario(scenario)
    validate_observation_inputs(
        parsed, n=n, m=median, a=minimum, b=maximum, q1=q1, q3=q3, allow_negative=allow_negative
    )
    engine_config, merged = resolve_engine_config(
        config, {"models_dir": str(models_dir) if models_dir else None, "loader": loader}
    )
    engine = build_engine(engine_config, resolve_loader(merged.get("loader")))

    observation = InputObservation(scenario=parsed, n=int(n), m=median, a=minimum, b=maximum, q1=q1, q3=q3)
    verdict = engine.select_best_distribution(parsed, observation)

    if as_json:
        typer.echo(json.dumps(build_selection_report(verdict, observation), indent=2))
    else:
        typer.echo(format_verdict(verdict, observation))
        if verdict.candidates:
            table = Table(title="Candidates by loss")
            table.add_column("Family")
            table.add_column("Loss", justify="right")
            table.add_column("Mean", justify="right")
            table.add_column("SD", justify="right")
            for candidate in verdict.candidates:
                table.add_row(
                    candidate.family.value,
                    f"{candidate.loss:.6g}",
                    f"{candidate.mean:.4f}",
                    f"{candidate.std:.4f}",
                )
            console.print(table)
        for warning in verdict.warnings:
            console.print(f"[yellow]WARNING:[/yellow] {warning}")

    if plot is not None:
        from summary_fit.plotting.fit_diagnostics import plot_verdict

        plot_verdict(verdict, observation, observation.n_effective(engine_config.n_cap), output_path=plot)
    log.info("Fit command completed", extra={"scenario": parsed.value, "family": verdict.best_fit.family.value})


__all__ = ["fit"]
