"""Fit many observations from a table, one row per published sample."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from summary_fit.exceptions import SummaryFitError
from summary_fit.schema.observation import InputObservation
from summary_fit.selection.engine import DecisionEngine
from summary_fit.utils.logging import get_logger

log = get_logger(__name__, component="batch")

OUTPUT_COLUMNS = ("family", "mean", "std", "params", "loss", "warnings", "error_kind", "error")

_COLUMN_TO_FIELD = {"min": "a", "max": "b", "median": "m", "q1": "q1", "q3": "q3", "n": "n", "scenario": "scenario"}


def _clean(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def row_to_observation(row: pd.Series) -> InputObservation:
    data: Dict[str, Any] = {}
    for column, field in _COLUMN_TO_FIELD.items():
        if column in row.index:
            data[field] = _clean(row[column])
    return InputObservation.from_dict(data)


def _empty_result() -> Dict[str, Any]:
    return {column: None for column in OUTPUT_COLUMNS}


def fit_row(engine: DecisionEngine, row: pd.Series) -> Dict[str, Any]:
    result = _empty_result()
    try:
        obs = row_to_observation(row)
        verdict = engine.select_best_distribution(obs.scenario, obs)
    except SummaryFitError as exc:
        result["error_kind"] = type(exc).__name__
        result["error"] = str(exc)
        log.warning("Row could not be fitted", extra={"row": str(row.name), "error": str(exc)})
        return result
    fit = verdict.best_fit
    result.update(
        family=fit.family.value,
        mean=fit.mean,
        std=fit.std,
        params=json.dumps(fit.params.as_dict()),
        loss=fit.loss,
        warnings=" | ".join(verdict.warnings),
    )
    return result


def fit_frame(engine: DecisionEngine, frame: pd.DataFrame) -> pd.DataFrame:
    """Fit every row; rows that fail keep their error kind and message instead of a fit."""

    missing = {"scenario", "n", "median"} - set(frame.columns)
    if missing:
        raise ValueError(f"Input table is missing columns: {', '.join(sorted(missing))}")
    results = [fit_row(engine, row) for _, row in frame.iterrows()]
    out = pd.DataFrame(results, index=frame.index, columns=list(OUTPUT_COLUMNS))
    fitted = int(out["family"].notna().sum())
    log.info("Batch complete", extra={"rows": len(frame), "fitted": fitted, "failed": len(frame) - fitted})
    return pd.concat([frame, out], axis=1)


def fit_csv(engine: DecisionEngine, source: Path, output: Optional[Path] = None) -> pd.DataFrame:
    frame = pd.read_csv(source)
    frame.columns = frame.columns.str.strip().str.lower()
    result = fit_frame(engine, frame)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        if output.suffix.lower() == ".json":
            result.to_json(output, orient="records", indent=2)
        else:
            result.to_csv(output, index=False)
    return result


__all__ = ["OUTPUT_COLUMNS", "fit_csv", "fit_frame", "fit_row", "row_to_observation"]
