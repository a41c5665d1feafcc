"""
Diagnostic plotting for a selected fit.

Draws each fitted quantile function against the observed summary statistics,
placed at the plotting probabilities the loss is computed on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from summary_fit.distributions.families import Family, quantile
from summary_fit.schema.fit import DistributionFit, Verdict
from summary_fit.schema.observation import InputObservation
from summary_fit.selection.loss import comparison_points
from summary_fit.utils.logging import get_logger

log = get_logger(__name__, component="fit_diagnostics")

# Wong palette, one colour per family
FAMILY_COLORS = {
    Family.NORMAL: "#0072B2",
    Family.LOGNORMAL: "#E69F00",
    Family.WEIBULL: "#009E73",
    Family.EXPONENTIAL: "#CC79A7",
    Family.BETA: "#D55E00",
}


def plot_verdict(
    verdict: Verdict,
    observation: InputObservation,
    n: int,
    output_path: Optional[Path] = None,
    show_plot: bool = False,
) -> Figure:
    """
    Plot the best fit (and any other scored candidates) against the observation.

    Parameters
    ----------
    verdict : Verdict
        Engine output; candidates other than the best fit are drawn dashed
    observation : InputObservation
        Observation the verdict was computed for
    n : int
        Capped sample size used for the extreme plotting probabilities
    output_path : Optional[Path]
        If provided, save figure to this path
    show_plot : bool
        If True, display plot interactively

    Returns
    -------
    Figure
        Matplotlib figure object
    """

    fits: Sequence[DistributionFit] = verdict.candidates or (verdict.best_fit,)
    probs, observed = comparison_points(observation, n)
    low = min(1e-3, float(probs.min()) / 2)
    grid = np.linspace(low, 1.0 - low, 400)

    fig, ax = plt.subplots(figsize=(9, 6))
    for fit in fits:
        is_best = fit == verdict.best_fit
        with np.errstate(all="ignore"):
            curve = quantile(fit.params, grid)
        ax.plot(
            grid,
            curve,
            color=FAMILY_COLORS[fit.family],
            linestyle="-" if is_best else "--",
            linewidth=2.2 if is_best else 1.2,
            label=f"{fit.family.value} (loss={fit.loss:.4g})" + (" *" if is_best else ""),
        )
    ax.scatter(probs, observed, color="black", zorder=5, label="observed statistics")
    ax.set_xlabel("Cumulative probability")
    ax.set_ylabel("Value")
    ax.set_title(f"Quantile fit: {verdict.best_fit.family.value} ({observation.scenario.label})")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper left", fontsize=9)
    fig.tight_layout()

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
        log.info("Saved fit diagnostics plot", extra={"path": str(output_path)})
    if show_plot:
        plt.show()
    return fig


__all__ = ["FAMILY_COLORS", "plot_verdict"]
