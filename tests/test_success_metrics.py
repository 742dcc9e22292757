"""
Tests for success metrics module.
"""

import random

import pytest

from fire_planner.models.monte_carlo import TrialResult
from fire_planner.models.success_metrics import (
    SuccessMetricsCalculator,
    percentile,
    percentile_key,
)

YEARS = [2025, 2026, 2027]


def trial(index, balances, achievement=None, retired=False, depletion=None):
    return TrialResult(
        trial=index,
        achievement_year=achievement,
        retired=retired,
        depletion_year=depletion,
        final_balance=balances[-1],
        balances=balances,
    )


@pytest.fixture
def trials():
    return [
        trial(0, [100.0, 200.0, 300.0], achievement=2026, retired=True),
        trial(1, [100.0, 50.0, 0.0], achievement=2025, retired=True, depletion=2027),
        trial(2, [90.0, 120.0, 150.0]),
        trial(3, [110.0, 220.0, 330.0], achievement=2027, retired=True),
    ]


class TestPercentile:
    """Test the percentile function."""

    def test_empty_series(self):
        """Test an empty series yields zero."""
        assert percentile([], 50) == 0.0

    def test_median_of_odd_series(self):
        """Test the median of an odd-length series is the middle element."""
        assert percentile([1, 3, 5, 7, 9], 50) == 5

    def test_endpoints(self):
        """Test 0 and 100 give the minimum and maximum."""
        values = [4.0, -2.0, 9.5, 3.0]
        assert percentile(values, 0) == -2.0
        assert percentile(values, 100) == 9.5

    def test_linear_interpolation(self):
        """Test interpolation between order statistics."""
        # index = 0.25 * 3 = 0.75 between 10 and 20
        assert percentile([40, 10, 30, 20], 25) == pytest.approx(17.5)

    def test_single_value(self):
        """Test a single-element series."""
        assert percentile([42.0], 90) == 42.0

    def test_key_format(self):
        """Test percentile keys."""
        assert percentile_key(10.0) == "p10"
        assert percentile_key(12.5) == "p12.5"


class TestSuccessMetricsCalculator:
    """Test SuccessMetricsCalculator."""

    def test_success_rate(self, trials):
        """Test the share of trials reaching the target."""
        summary = SuccessMetricsCalculator().calculate_metrics(trials, YEARS)
        assert summary.trials == 4
        assert summary.success_rate == pytest.approx(0.75)

    def test_survival_excludes_non_retired(self, trials):
        """Test survival counts only retired trials."""
        summary = SuccessMetricsCalculator().calculate_metrics(trials, YEARS)
        assert summary.survival_rate == pytest.approx(2 / 3)

    def test_survival_none_when_nobody_retired(self):
        """Test survival is undefined when no trial retired."""
        summary = SuccessMetricsCalculator().calculate_metrics(
            [trial(0, [1.0, 2.0, 3.0])], YEARS
        )
        assert summary.survival_rate is None
        assert summary.success_rate == 0.0

    def test_depletion_statistics(self, trials):
        """Test depletion rate and median depletion year."""
        summary = SuccessMetricsCalculator().calculate_metrics(trials, YEARS)
        assert summary.depletion_rate == pytest.approx(0.25)
        assert summary.median_depletion_year == 2027

    def test_yearly_percentiles_are_cross_sectional(self, trials):
        """Test per-year bands use every trial's balance for that year."""
        summary = SuccessMetricsCalculator([0, 50, 100]).calculate_metrics(
            trials, YEARS
        )
        assert summary.yearly_percentiles[2025] == {
            "p0": 90.0,
            "p50": 100.0,
            "p100": 110.0,
        }
        assert summary.yearly_percentiles[2027]["p0"] == 0.0
        assert summary.yearly_percentiles[2027]["p100"] == 330.0

    def test_achievement_band(self, trials):
        """Test the achievement-year band over achieving trials."""
        summary = SuccessMetricsCalculator([0, 50, 100]).calculate_metrics(
            trials, YEARS
        )
        assert summary.achievement_year_percentiles == {
            "p0": 2025.0,
            "p50": 2026.0,
            "p100": 2027.0,
        }

    def test_achievement_band_empty(self):
        """Test the achievement band is empty when nobody achieved."""
        summary = SuccessMetricsCalculator().calculate_metrics(
            [trial(0, [1.0, 2.0, 3.0])], YEARS
        )
        assert all(v is None for v in summary.achievement_year_percentiles.values())

    def test_final_value_band(self, trials):
        """Test the final value band."""
        summary = SuccessMetricsCalculator([50]).calculate_metrics(trials, YEARS)
        assert summary.final_value_percentiles["p50"] == pytest.approx(225.0)

    def test_readiness_by_year(self, trials):
        """Test readiness accumulates achievement by year."""
        summary = SuccessMetricsCalculator().calculate_metrics(trials, YEARS)
        assert summary.readiness_by_year == {2025: 0.25, 2026: 0.5, 2027: 0.75}

    def test_empty_trials(self):
        """Test aggregation of no trials."""
        summary = SuccessMetricsCalculator().calculate_metrics([], YEARS)
        assert summary.success_rate == 0.0
        assert summary.yearly_percentiles == {}
        assert summary.readiness_by_year == {2025: 0.0, 2026: 0.0, 2027: 0.0}

    def test_reordering_invariance(self, trials):
        """Test shuffling trials leaves the summary unchanged."""
        calculator = SuccessMetricsCalculator()
        baseline = calculator.calculate_metrics(trials, YEARS)
        rng = random.Random(5)
        for _ in range(10):
            shuffled = list(trials)
            rng.shuffle(shuffled)
            assert calculator.calculate_metrics(shuffled, YEARS) == baseline
