"""Decision engine: choose the best-fitting family for one observation.

The cascade runs in this order, each step able to return early:

1. extreme asymmetry guard (raises InputValidityError)
2. Beta-domain shortcut; otherwise Beta is dropped
3. strict-symmetry shortcut to Normal
4. moderate asymmetry drops Normal
5. memoryless shortcut to Exponential (quartile scenarios, large n), or
   dropping Exponential when the quartile ratio is far from exponential
6. general comparison of the remaining families by quantile loss
7. tie-broken selection and reliability check

Step 2 precedes step 3, so symmetric data confined to [0, 1] is reported as
Beta rather than Normal.
"""

from __future__ import annotations

import math
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Mapping, Optional, Sequence

from summary_fit.config.settings import EngineConfig
from summary_fit.distributions.families import Family
from summary_fit.distributions.parameters import map_parameters
from summary_fit.estimation.adapter import PointEstimationAdapter
from summary_fit.exceptions import ComputationFailureError, InputValidityError
from summary_fit.interfaces.estimator import PointEstimationService
from summary_fit.schema.fit import DistributionFit, Verdict
from summary_fit.schema.observation import InputObservation, Scenario
from summary_fit.selection.loss import num_comparison_points, quantile_loss
from summary_fit.selection.model_selector import rank_candidates, select_best_fit
from summary_fit.selection.rules import asymmetry_profile, is_beta_domain, memoryless_relative_error
from summary_fit.utils.logging import get_logger
from summary_fit.utils.profiling import track_time

log = get_logger(__name__, component="decision_engine")

CANDIDATE_ORDER: tuple[Family, ...] = (
    Family.BETA,
    Family.WEIBULL,
    Family.LOGNORMAL,
    Family.NORMAL,
    Family.EXPONENTIAL,
)

SYMMETRY_WARNING = "Data is strictly symmetric; Normal distribution was directly selected."
BETA_WARNING = "Data is in [0,1] range; Beta distribution was directly selected."
MEMORYLESS_WARNING = (
    "Data exhibits strong memoryless property; Exponential distribution was directly selected."
)
RELIABILITY_WARNING = (
    "The best-fit distribution still has a large error relative to the data range. "
    "The result may not be reliable."
)
WEIBULL_APPROXIMATION_WARNING = (
    "Weibull shape was approximated in closed form because the coefficient of variation "
    "is outside the solver bracket; treat the Weibull parameters as low confidence."
)


class DecisionEngine:
    def __init__(self, service: PointEstimationService, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self.adapter = PointEstimationAdapter(service)

    def select_best_distribution(
        self,
        scenario: Scenario | str,
        observation: InputObservation | Mapping,
    ) -> Verdict:
        """Return the best fit plus advisory warnings for one observation.

        Raises InputValidityError, ComputationFailureError or EstimatorError.
        """

        obs = _coerce_observation(scenario, observation)
        n = obs.n_effective(self.config.n_cap)
        request_id = uuid.uuid4().hex[:12]
        context = {"request_id": request_id, "scenario": obs.scenario.value}
        with track_time("select_best_distribution", extra=context) as timing:
            verdict = self._run_cascade(obs, n, context)
        log.info(
            "Distribution selected",
            extra={
                **context,
                "family": verdict.best_fit.family.value,
                "loss": verdict.best_fit.loss,
                "warnings": len(verdict.warnings),
                "duration_ms": timing.elapsed_ms,
            },
        )
        return verdict

    def _run_cascade(self, obs: InputObservation, n: int, context: dict) -> Verdict:
        cfg = self.config
        candidates: List[Family] = list(CANDIDATE_ORDER)

        profile = asymmetry_profile(obs)
        if profile is not None and profile.ratio > cfg.extreme_asymmetry_ratio:
            log.warning("Rejected extreme asymmetry", extra={**context, "ratio": profile.ratio})
            raise InputValidityError(
                f"Extreme asymmetry detected (spread ratio {profile.ratio:.1f} > "
                f"{cfg.extreme_asymmetry_ratio:g}). Data may contain outliers, making estimation unreliable."
            )

        if is_beta_domain(obs):
            return self._shortcut(Family.BETA, obs, n, BETA_WARNING, context)
        candidates.remove(Family.BETA)

        if profile is not None:
            if profile.relative_difference < cfg.symmetry_tolerance:
                return self._shortcut(Family.NORMAL, obs, n, SYMMETRY_WARNING, context)
            if profile.ratio >= cfg.moderate_asymmetry_ratio:
                candidates.remove(Family.NORMAL)

        if n > cfg.memoryless_min_n:
            error = memoryless_relative_error(obs)
            if error is not None:
                if error < cfg.memoryless_match_tolerance:
                    return self._shortcut(Family.EXPONENTIAL, obs, n, MEMORYLESS_WARNING, context)
                if error > cfg.memoryless_exclusion_tolerance:
                    candidates.remove(Family.EXPONENTIAL)

        fits = self._evaluate(candidates, obs, n, context)
        if not fits:
            raise ComputationFailureError(
                "No suitable distribution could be fitted after applying heuristic rules."
            )

        ranked = rank_candidates(fits)
        best = select_best_fit(ranked, cfg.preference_order, cfg.tie_margin)
        warnings = self._reliability_warnings(best, obs)
        return Verdict(best_fit=best, warnings=warnings, candidates=tuple(ranked))

    def fit_family(self, family: Family, obs: InputObservation, n: int) -> Optional[DistributionFit]:
        """Estimate, map and score one family; None when its parameters are invalid."""

        estimate = self.adapter.estimate(family, obs, n)
        std = estimate.resolved_std
        params = map_parameters(family, estimate.mean, std)
        if params is None:
            return None
        fit = DistributionFit(family=family, mean=estimate.mean, std=std, params=params)
        return fit.with_loss(quantile_loss(params, obs, n))

    def _shortcut(
        self,
        family: Family,
        obs: InputObservation,
        n: int,
        warning: str,
        context: dict,
    ) -> Verdict:
        log.info("Shortcut selection", extra={**context, "family": family.value})
        fit = self.fit_family(family, obs, n)
        if fit is None:
            raise ComputationFailureError(
                f"{family.value} was selected by a shortcut rule but its parameters are invalid."
            )
        return Verdict(best_fit=fit, warnings=[warning])

    def _evaluate(
        self,
        families: Sequence[Family],
        obs: InputObservation,
        n: int,
        context: dict,
    ) -> List[DistributionFit]:
        results = self._map(lambda family: self.fit_family(family, obs, n), families)
        fits: List[DistributionFit] = []
        for family, fit in zip(families, results):
            if fit is None:
                log.debug("Dropped candidate with invalid parameters", extra={**context, "family": family.value})
            elif not math.isfinite(fit.loss):
                log.debug("Dropped candidate with non-finite loss", extra={**context, "family": family.value})
            else:
                fits.append(fit)
        return fits

    def _map(self, fn, families: Sequence[Family]) -> Iterable[Optional[DistributionFit]]:
        workers = min(self.config.max_workers, len(families))
        if workers <= 1:
            return [fn(family) for family in families]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() keeps input order and re-raises the first failure
            return list(executor.map(fn, families))

    def _reliability_warnings(self, best: DistributionFit, obs: InputObservation) -> List[str]:
        warnings: List[str] = []
        rmse = math.sqrt(best.loss / num_comparison_points(obs.scenario))
        scale = obs.data_scale()
        if scale > 0 and rmse / scale > self.config.reliability_ratio:
            warnings.append(RELIABILITY_WARNING)
        if self.config.surface_weibull_approximation and best.approximate:
            warnings.append(WEIBULL_APPROXIMATION_WARNING)
        return warnings


def _coerce_observation(scenario: Scenario | str, observation: InputObservation | Mapping) -> InputObservation:
    scenario = Scenario.parse(scenario)
    if isinstance(observation, InputObservation):
        if observation.scenario is not scenario:
            raise InputValidityError(
                f"Observation is for scenario {observation.scenario.value}, not {scenario.value}"
            )
        return observation
    data = dict(observation)
    data["scenario"] = scenario
    return InputObservation.from_dict(data)


__all__ = [
    "BETA_WARNING",
    "CANDIDATE_ORDER",
    "DecisionEngine",
    "MEMORYLESS_WARNING",
    "RELIABILITY_WARNING",
    "SYMMETRY_WARNING",
    "WEIBULL_APPROXIMATION_WARNING",
]
