import math

import numpy as np
import pytest
from scipy import stats

from summary_fit.config.settings import EngineConfig
from summary_fit.distributions.families import ExponentialParams, Family, quantile
from summary_fit.estimation.artifacts import LinearEstimator
from summary_fit.estimation.service import EstimationService
from summary_fit.exceptions import ComputationFailureError, EstimatorError, InputValidityError
from summary_fit.schema.observation import InputObservation, Scenario
from summary_fit.selection.engine import (
    BETA_WARNING,
    MEMORYLESS_WARNING,
    RELIABILITY_WARNING,
    SYMMETRY_WARNING,
    WEIBULL_APPROXIMATION_WARNING,
    DecisionEngine,
)
from summary_fit.selection.loss import quantile_loss


def test_symmetric_data_selects_normal_directly(fake_service):
    obs = InputObservation(scenario="s1", n=50, m=10.0, a=0.0, b=20.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert verdict.family is Family.NORMAL
    assert verdict.warnings == [SYMMETRY_WARNING]
    assert verdict.candidates == ()
    assert verdict.params["mu"] == pytest.approx(10.0)
    assert verdict.params["sigma"] == pytest.approx(5.0)
    assert fake_service.families_called() == {Family.NORMAL}
    expected = stats.norm.ppf([0.02, 0.5, 0.98], loc=10.0, scale=5.0) - np.array([0.0, 10.0, 20.0])
    assert verdict.best_fit.loss == pytest.approx(float(np.sum(expected**2)))


def test_unit_interval_data_selects_beta_before_symmetry(fake_service):
    verdict = DecisionEngine(fake_service).select_best_distribution(
        Scenario.S2, {"n": 40, "q1": 0.2, "median": 0.5, "q3": 0.8}
    )
    assert verdict.family is Family.BETA
    assert verdict.warnings == [BETA_WARNING]
    assert verdict.params["alpha"] == pytest.approx(verdict.params["beta"], rel=1e-5)
    assert fake_service.families_called() == {Family.BETA}


def test_extreme_asymmetry_is_rejected(fake_service):
    obs = InputObservation(scenario="s1", n=50, m=1.0, a=0.0, b=100.0)
    with pytest.raises(InputValidityError, match="Extreme asymmetry"):
        DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert fake_service.calls == []


def test_memoryless_quartiles_select_exponential(fake_service):
    obs = InputObservation(scenario="s3", n=500, m=16.0, a=0.5, q1=10.0, q3=26.26, b=120.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s3", obs)
    assert verdict.family is Family.EXPONENTIAL
    assert verdict.warnings == [MEMORYLESS_WARNING]
    assert verdict.params["theta"] == pytest.approx((0.5 + 10.0 + 16.0 + 26.26 + 120.0) / 5, rel=1e-5)


def test_memoryless_shortcut_needs_large_n(fake_service):
    obs = InputObservation(scenario="s3", n=80, m=16.0, a=0.5, q1=10.0, q3=26.26, b=120.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s3", obs)
    assert MEMORYLESS_WARNING not in verdict.warnings
    assert len(verdict.candidates) == 4


def test_moderate_asymmetry_excludes_normal(fake_service):
    obs = InputObservation(scenario="s1", n=30, m=3.0, a=1.0, b=10.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    families = {fit.family for fit in verdict.candidates}
    assert families == {Family.WEIBULL, Family.LOGNORMAL, Family.EXPONENTIAL}
    assert Family.NORMAL not in fake_service.families_called()
    losses = [fit.loss for fit in verdict.candidates]
    assert losses == sorted(losses)
    assert verdict.best_fit in verdict.candidates
    assert verdict.warnings == []
    for fit in verdict.candidates:
        assert fit.loss == pytest.approx(quantile_loss(fit.params, obs, 30))


def test_thread_pool_and_sequential_runs_agree(make_service):
    obs = InputObservation(scenario="s3", n=60, m=7.0, a=1.0, q1=4.0, q3=12.0, b=30.0)
    threaded = DecisionEngine(make_service(), EngineConfig(max_workers=5)).select_best_distribution("s3", obs)
    sequential = DecisionEngine(make_service(), EngineConfig(max_workers=1)).select_best_distribution("s3", obs)
    assert threaded.to_dict() == sequential.to_dict()


def test_sample_size_is_capped_before_estimation(fake_service):
    obs = InputObservation(scenario="s1", n=50_000, m=10.0, a=0.0, b=20.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert fake_service.calls[0][3][0] == 1000
    assert verdict.family is Family.NORMAL


def test_no_valid_candidate_is_a_computation_failure(make_service):
    overrides = {(family, kind): (lambda row: -1.0) for family in Family for kind in ("mean", "std")}
    obs = InputObservation(scenario="s1", n=30, m=2.0, a=1.0, b=10.0)
    with pytest.raises(ComputationFailureError):
        DecisionEngine(make_service(overrides)).select_best_distribution("s1", obs)


def test_zero_sigma_normal_is_a_degenerate_fit(make_service):
    service = make_service({(Family.NORMAL, "std"): lambda row: 0.0})
    obs = InputObservation(scenario="s1", n=50, m=10.0, a=0.0, b=20.0)
    verdict = DecisionEngine(service).select_best_distribution("s1", obs)
    assert verdict.family is Family.NORMAL
    assert verdict.params["sigma"] == 0.0
    assert verdict.best_fit.loss == pytest.approx(200.0)


def test_invalid_shortcut_parameters_fail(make_service):
    service = make_service({(Family.NORMAL, "std"): lambda row: float("nan")})
    obs = InputObservation(scenario="s1", n=50, m=10.0, a=0.0, b=20.0)
    with pytest.raises(ComputationFailureError):
        DecisionEngine(service).select_best_distribution("s1", obs)


@pytest.mark.parametrize("workers", [1, 5])
def test_estimator_failure_propagates(workers):
    class Broken:
        def predict(self, features):
            raise RuntimeError("corrupt artifact")

    estimators = {
        (Scenario.S2, Family.WEIBULL, "mean"): Broken(),
        (Scenario.S2, Family.WEIBULL, "std"): LinearEstimator(coef=(0.0, -1.0, 0.0, 1.0)),
    }
    engine = DecisionEngine(EstimationService(estimators), EngineConfig(max_workers=workers))
    obs = InputObservation(scenario="s2", n=50, m=12.0, q1=10.0, q3=16.0)
    with pytest.raises(EstimatorError):
        engine.select_best_distribution("s2", obs)


def test_poor_best_fit_is_flagged_unreliable(make_service):
    service = make_service({(family, "mean"): (lambda row: row[2] * 10.0) for family in Family})
    obs = InputObservation(scenario="s2", n=50, m=12.0, q1=10.0, q3=16.0)
    verdict = DecisionEngine(service).select_best_distribution("s2", obs)
    assert RELIABILITY_WARNING in verdict.warnings


def test_approximate_weibull_shape_is_surfaced(make_service):
    overrides = {
        (Family.WEIBULL, "mean"): lambda row: row[2] * 1.05,
        (Family.WEIBULL, "std"): lambda row: row[2] * 0.01,
        (Family.LOGNORMAL, "mean"): lambda row: -1.0,
        (Family.EXPONENTIAL, "mean"): lambda row: -1.0,
    }
    obs = InputObservation(scenario="s1", n=50, m=100.0, a=90.0, b=130.0)
    verdict = DecisionEngine(make_service(overrides)).select_best_distribution("s1", obs)
    assert verdict.family is Family.WEIBULL
    assert verdict.best_fit.approximate
    assert WEIBULL_APPROXIMATION_WARNING in verdict.warnings

    quiet = EngineConfig(surface_weibull_approximation=False)
    verdict = DecisionEngine(make_service(overrides), quiet).select_best_distribution("s1", obs)
    assert WEIBULL_APPROXIMATION_WARNING not in verdict.warnings


def test_scenario_mismatch_is_rejected(fake_service):
    obs = InputObservation(scenario="s1", n=50, m=10.0, a=0.0, b=20.0)
    with pytest.raises(InputValidityError):
        DecisionEngine(fake_service).select_best_distribution("s2", obs)


def test_fit_family_scores_single_family(fake_service):
    obs = InputObservation(scenario="s2", n=50, m=12.0, q1=6.0, q3=24.0)
    fit = DecisionEngine(fake_service).fit_family(Family.EXPONENTIAL, obs, 50)
    assert isinstance(fit.params, ExponentialParams)
    assert fit.params.theta == pytest.approx(14.0)
    assert math.isfinite(fit.loss)
    residuals = quantile(fit.params, [0.25, 0.5, 0.75]) - np.array([6.0, 12.0, 24.0])
    assert fit.loss == pytest.approx(float(np.sum(residuals**2)))


def _candidate_families(verdict):
    return {fit.family for fit in verdict.candidates}


def test_flat_upper_quartile_drops_exponential(fake_service):
    obs = InputObservation(scenario="s2", n=500, m=10.0, q1=5.0, q3=10.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s2", obs)
    assert _candidate_families(verdict) == {Family.NORMAL, Family.WEIBULL, Family.LOGNORMAL}
    assert Family.EXPONENTIAL not in fake_service.families_called()


def test_quartile_ratio_far_from_exponential_drops_it(fake_service):
    # (m - q1) / (q3 - m) = 2.25, more than 200% away from the exponential ratio
    obs = InputObservation(scenario="s2", n=500, m=10.0, q1=1.0, q3=14.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s2", obs)
    assert _candidate_families(verdict) == {Family.WEIBULL, Family.LOGNORMAL}


def test_quartile_ratio_between_tolerances_keeps_exponential(fake_service):
    obs = InputObservation(scenario="s2", n=500, m=16.0, q1=10.0, q3=20.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s2", obs)
    assert MEMORYLESS_WARNING not in verdict.warnings
    assert _candidate_families(verdict) == {
        Family.NORMAL,
        Family.WEIBULL,
        Family.LOGNORMAL,
        Family.EXPONENTIAL,
    }


def test_spread_ratio_of_exactly_twenty_is_accepted(fake_service):
    obs = InputObservation(scenario="s1", n=50, m=1.0, a=0.0, b=21.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert _candidate_families(verdict) == {Family.WEIBULL, Family.LOGNORMAL, Family.EXPONENTIAL}


def test_spread_ratio_just_above_twenty_is_rejected(fake_service):
    obs = InputObservation(scenario="s1", n=50, m=1.0, a=0.0, b=21.0001)
    with pytest.raises(InputValidityError):
        DecisionEngine(fake_service).select_best_distribution("s1", obs)


def test_spread_ratio_of_two_drops_normal(fake_service):
    obs = InputObservation(scenario="s1", n=30, m=3.0, a=1.0, b=7.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert _candidate_families(verdict) == {Family.WEIBULL, Family.LOGNORMAL, Family.EXPONENTIAL}


def test_spread_ratio_below_two_keeps_normal(fake_service):
    obs = InputObservation(scenario="s1", n=30, m=3.0, a=1.0, b=6.98)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert _candidate_families(verdict) == {
        Family.NORMAL,
        Family.WEIBULL,
        Family.LOGNORMAL,
        Family.EXPONENTIAL,
    }


def test_symmetry_shortcut_just_inside_tolerance(fake_service):
    # |100 - 102| / 202 is just under 1%
    obs = InputObservation(scenario="s1", n=50, m=100.0, a=0.0, b=202.0)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert verdict.family is Family.NORMAL
    assert verdict.warnings == [SYMMETRY_WARNING]
    assert verdict.candidates == ()


def test_symmetry_shortcut_not_taken_at_tolerance(fake_service):
    # |100 - 102.1| / 202.1 is just over 1%
    obs = InputObservation(scenario="s1", n=50, m=100.0, a=0.0, b=202.1)
    verdict = DecisionEngine(fake_service).select_best_distribution("s1", obs)
    assert SYMMETRY_WARNING not in verdict.warnings
    assert _candidate_families(verdict) == {
        Family.NORMAL,
        Family.WEIBULL,
        Family.LOGNORMAL,
        Family.EXPONENTIAL,
    }
