"""Selection report builders (JSON payload and human-readable text)."""

from __future__ import annotations

from typing import Optional

from summary_fit.features.layout import FEATURE_LAYOUT_VERSION
from summary_fit.schema.fit import Verdict
from summary_fit.schema.observation import InputObservation


def build_selection_report(verdict: Verdict, observation: Optional[InputObservation] = None) -> dict:
    report = verdict.to_dict()
    report["chosen_family"] = verdict.best_fit.family.value
    report["feature_layout_version"] = FEATURE_LAYOUT_VERSION
    if observation is not None:
        report["observation"] = observation.to_dict()
        report["scenario_label"] = observation.scenario.label
    return report


def format_verdict(verdict: Verdict, observation: Optional[InputObservation] = None) -> str:
    fit = verdict.best_fit
    lines = []
    if observation is not None:
        lines.append(f"Input Scenario: {observation.scenario.label}")
    lines.append(f"Best Fit Distribution: {fit.family.value}")
    lines.append("-" * 43)
    lines.append(f"Estimated Sample Mean : {fit.mean:.4f}")
    lines.append(f"Estimated Sample SD   : {fit.std:.4f}")
    lines.append("")
    lines.append("Best Fit Distribution Parameters:")
    for key, value in fit.params.as_dict().items():
        lines.append(f"  {key:<7}: {value:.4f}")
    return "\n".join(lines)


__all__ = ["build_selection_report", "format_verdict"]
