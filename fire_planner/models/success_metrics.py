"""
Success metrics for Monte Carlo simulation.

This module reduces a set of trial results into the summary statistics shown to
the user: success and survival rates, depletion statistics, cross-sectional
percentile bands of the portfolio balance per year, and percentile bands of the
achievement year and final value. Every reduction is independent of trial order.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .monte_carlo import TrialResult


DEFAULT_PERCENTILES = [10.0, 25.0, 50.0, 75.0, 90.0]


def percentile(values: Sequence[float], p: float) -> float:
    """
    Percentile by linear interpolation between order statistics.

    The fractional index is p / 100 * (n - 1) over the ascending series.

    Args:
        values: Numeric series in any order
        p: Percentage between 0 and 100

    Returns:
        Interpolated percentile; 0.0 for an empty series
    """
    if len(values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype=np.float64), p))


def percentile_key(p: float) -> str:
    return f"p{p:g}"


class MonteCarloSummary(BaseModel):
    """Aggregate statistics over all trials."""

    model_config = ConfigDict(frozen=True)

    trials: int = Field(..., ge=0, description="Number of trials aggregated")
    success_rate: float = Field(
        ..., ge=0, le=1, description="Share of trials that reached the target"
    )
    survival_rate: Optional[float] = Field(
        default=None,
        ge=0,
        le=1,
        description="Share of retired trials that never depleted (None if none retired)",
    )
    depletion_rate: float = Field(
        ..., ge=0, le=1, description="Share of all trials that depleted"
    )
    median_depletion_year: Optional[float] = Field(default=None)
    yearly_percentiles: Dict[int, Dict[str, float]] = Field(
        default_factory=dict, description="Balance percentiles per calendar year"
    )
    achievement_year_percentiles: Dict[str, Optional[float]] = Field(
        default_factory=dict,
        description="Achievement year percentiles over trials that reached the target",
    )
    final_value_percentiles: Dict[str, float] = Field(default_factory=dict)
    readiness_by_year: Dict[int, float] = Field(
        default_factory=dict,
        description="Share of trials that reached the target by each year",
    )


class SuccessMetricsCalculator:
    """Reduces trial results into a MonteCarloSummary."""

    def __init__(self, percentiles: Optional[List[float]] = None):
        self.percentiles = percentiles or list(DEFAULT_PERCENTILES)

    def calculate_metrics(
        self, trials: Sequence["TrialResult"], years: Sequence[int]
    ) -> MonteCarloSummary:
        """
        Calculate summary statistics.

        Args:
            trials: Trial results in any order
            years: Calendar years covered by every trial's balance trace

        Returns:
            MonteCarloSummary
        """
        total = len(trials)
        achieved = [t.achievement_year for t in trials if t.achievement_year is not None]
        retired = [t for t in trials if t.retired]
        depletion_years = [
            t.depletion_year for t in trials if t.depletion_year is not None
        ]

        survival_rate = None
        if retired:
            survivors = sum(1 for t in retired if t.depletion_year is None)
            survival_rate = survivors / len(retired)

        return MonteCarloSummary(
            trials=total,
            success_rate=len(achieved) / total if total else 0.0,
            survival_rate=survival_rate,
            depletion_rate=len(depletion_years) / total if total else 0.0,
            median_depletion_year=(
                percentile(depletion_years, 50) if depletion_years else None
            ),
            yearly_percentiles=self._calculate_yearly_percentiles(trials, years),
            achievement_year_percentiles=self._calculate_band(achieved),
            final_value_percentiles={
                percentile_key(p): percentile([t.final_balance for t in trials], p)
                for p in self.percentiles
            },
            readiness_by_year=self._calculate_readiness(achieved, years, total),
        )

    def _calculate_band(self, values: List[int]) -> Dict[str, Optional[float]]:
        """Percentile band, with None entries when the series is empty."""
        return {
            percentile_key(p): percentile(values, p) if values else None
            for p in self.percentiles
        }

    def _calculate_yearly_percentiles(
        self, trials: Sequence["TrialResult"], years: Sequence[int]
    ) -> Dict[int, Dict[str, float]]:
        """Cross-sectional balance percentiles for each year."""
        if not trials or not years:
            return {}
        balances = np.array([t.balances for t in trials], dtype=np.float64)
        bands = np.percentile(balances, self.percentiles, axis=0)
        return {
            year: {
                percentile_key(p): float(bands[i, index])
                for i, p in enumerate(self.percentiles)
            }
            for index, year in enumerate(years)
        }

    def _calculate_readiness(
        self, achieved: List[int], years: Sequence[int], total: int
    ) -> Dict[int, float]:
        """Share of trials whose achievement year is on or before each year."""
        if total == 0:
            return {year: 0.0 for year in years}
        return {
            year: sum(1 for a in achieved if a <= year) / total for year in years
        }
