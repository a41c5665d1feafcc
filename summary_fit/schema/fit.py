"""Result models: point estimates, candidate fits and the final verdict."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from summary_fit.distributions.families import CanonicalParams, Family


@dataclass(frozen=True)
class PointEstimate:
    """Estimated mean/std for one family. A missing std means std equals mean."""

    mean: float
    std: Optional[float] = None

    @property
    def resolved_std(self) -> float:
        return self.mean if self.std is None else self.std


@dataclass(frozen=True)
class DistributionFit:
    family: Family
    mean: float
    std: float
    params: CanonicalParams
    loss: float = math.inf

    def with_loss(self, loss: float) -> "DistributionFit":
        return replace(self, loss=loss)

    @property
    def approximate(self) -> bool:
        """True when the parameters came from a closed-form fallback (Weibull shape)."""
        return bool(getattr(self.params, "approximate", False))

    def to_dict(self) -> dict:
        return {
            "family": self.family.value,
            "mean": self.mean,
            "std": self.std,
            "params": self.params.as_dict(),
            "loss": self.loss if math.isfinite(self.loss) else None,
            "approximate": self.approximate,
        }


@dataclass
class Verdict:
    best_fit: DistributionFit
    warnings: List[str] = field(default_factory=list)
    candidates: Tuple[DistributionFit, ...] = ()

    @property
    def family(self) -> Family:
        return self.best_fit.family

    @property
    def params(self) -> Dict[str, float]:
        return self.best_fit.params.as_dict()

    def to_dict(self) -> dict:
        return {
            "best_fit": self.best_fit.to_dict(),
            "warnings": list(self.warnings),
            "candidates": [c.to_dict() for c in self.candidates],
        }


__all__ = ["DistributionFit", "PointEstimate", "Verdict"]
