"""Pick the final fit from scored candidates using a family preference order."""

from __future__ import annotations

from typing import Optional, Sequence

from summary_fit.distributions.families import Family
from summary_fit.schema.fit import DistributionFit


def within_margin(loss: float, best_loss: float, margin: float) -> bool:
    return loss == best_loss or loss < best_loss * (1.0 + margin)


def rank_candidates(fits: Sequence[DistributionFit]) -> list[DistributionFit]:
    """Ascending loss; ties keep their input order."""
    return sorted(fits, key=lambda fit: fit.loss)


def select_best_fit(
    fits: Sequence[DistributionFit],
    preference_order: Sequence[Family],
    margin: float,
) -> Optional[DistributionFit]:
    """The first preferred family whose loss is within `margin` of the minimum wins.

    Falls back to the lowest-loss fit when no preferred family is close enough.
    """

    ranked = rank_candidates(fits)
    if not ranked:
        return None
    best_loss = ranked[0].loss
    for family in preference_order:
        for fit in ranked:
            if fit.family is family:
                if within_margin(fit.loss, best_loss, margin):
                    return fit
                break
    return ranked[0]


__all__ = ["rank_candidates", "select_best_fit", "within_margin"]
