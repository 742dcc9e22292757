"""
Monte Carlo simulation of the accumulation and withdrawal phases.

Each trial walks the same years as the deterministic projection with its own
portfolio. While accumulating, a trial replays the projection's contributions
and withdrawals for the year and only the returns are random. Once the trial's
portfolio reaches that year's target it retires: from the following year wages
stop, the portfolio grows at random returns and then funds the year's expenses
net of rental cash flow and benefit income, taxable account first.

Returns come either from normal draws around the configured means or from
historical S&P 500 years sampled with replacement, per ``return_model``.

Trials are independent. Each one draws from its own generator seeded from a
per-trial seed spawned off the master seed, so results are identical whether
trials run sequentially or across a process pool.
"""

import logging
import multiprocessing
from typing import Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import SimulationCancelledError
from .portfolio_state import PortfolioState
from .projection import ProjectionResult, YearRecord
from .historical_returns import HistoricalReturnsSampler
from .random_returns import AnnualReturnsSource, RandomReturnsGenerator, spawn_seeds
from .scenario import MonteCarloSettings, ScenarioParameters
from .success_metrics import MonteCarloSummary, SuccessMetricsCalculator

logger = logging.getLogger(__name__)


class TrialResult(BaseModel):
    """Outcome of one Monte Carlo trial."""

    model_config = ConfigDict(frozen=True)

    trial: int = Field(..., ge=0, description="Trial index")
    achievement_year: Optional[int] = Field(
        default=None, description="First year the target was reached"
    )
    retired: bool = Field(
        default=False, description="Trial switched to the withdrawal phase"
    )
    depletion_year: Optional[int] = Field(
        default=None, description="First retired year below the depletion threshold"
    )
    final_balance: float = Field(..., ge=0)
    balances: List[float] = Field(..., description="Year-end combined balances")


class MonteCarloResult(BaseModel):
    """Trials and their summary."""

    model_config = ConfigDict(frozen=True)

    summary: MonteCarloSummary
    trials: List[TrialResult]


def withdrawal_need(record: YearRecord) -> float:
    """Portfolio draw needed in a retired year."""
    return max(
        0.0, record.total_expenses - record.rental_cash_flow - record.benefit_income
    )


def simulate_trial(
    params: ScenarioParameters,
    years: Sequence[YearRecord],
    returns: AnnualReturnsSource,
    trial: int = 0,
) -> TrialResult:
    """
    Walk one trial over the deterministic year sequence.

    Args:
        params: Scenario parameters
        years: Deterministic ledger used as the accumulation schedule
        returns: Return generator for this trial
        trial: Trial index

    Returns:
        TrialResult with the full balance trace
    """
    investments = params.investments
    settings = params.monte_carlo
    portfolio = PortfolioState.from_initial_savings(
        investments.initial_savings, investments.initial_taxable_fraction
    )

    achievement_year: Optional[int] = None
    depletion_year: Optional[int] = None
    retired = False
    balances: List[float] = []

    for record in years:
        tax_advantaged_return, taxable_return = returns.annual_returns(
            investments.tax_advantaged_return,
            investments.taxable_return,
            settings.volatility,
        )

        if retired:
            portfolio.apply_year(tax_advantaged_return, taxable_return)
            portfolio.withdraw(withdrawal_need(record))
            if depletion_year is None and portfolio.total < settings.depletion_threshold:
                depletion_year = record.year
        else:
            portfolio.apply_year(
                tax_advantaged_return,
                taxable_return,
                record.tax_advantaged_contribution,
                record.taxable_contribution,
                record.taxable_withdrawal,
            )
            if achievement_year is None and portfolio.total >= record.fire_target:
                achievement_year = record.year
                retired = settings.retire_on_achievement

        balances.append(portfolio.total)

    return TrialResult(
        trial=trial,
        achievement_year=achievement_year,
        retired=retired,
        depletion_year=depletion_year,
        final_balance=balances[-1] if balances else 0.0,
        balances=balances,
    )


def returns_source(settings: MonteCarloSettings, seed: int) -> AnnualReturnsSource:
    """Seeded return source for one trial under the configured return model."""
    if settings.return_model == "historical":
        return HistoricalReturnsSampler(seed=seed)
    return RandomReturnsGenerator(seed=seed)


def _run_chunk(
    task: Tuple[ScenarioParameters, List[YearRecord], List[Tuple[int, int]]],
) -> List[TrialResult]:
    params, years, chunk = task
    return [
        simulate_trial(
            params, years, returns_source(params.monte_carlo, seed), trial
        )
        for trial, seed in chunk
    ]


class MonteCarloEngine:
    """Runs Monte Carlo trials against a deterministic projection."""

    def __init__(
        self,
        params: ScenarioParameters,
        projection: ProjectionResult,
        workers: int = 1,
        chunk_size: int = 100,
        should_cancel: Optional[Callable[[], bool]] = None,
    ):
        """Initialize the engine.

        Args:
            params: Scenario parameters
            projection: Deterministic projection for the same parameters
            workers: Worker processes; 1 runs trials in this process
            chunk_size: Trials per unit of work
            should_cancel: Polled between trials or chunks; True abandons the batch
        """
        self.params = params
        self.projection = projection
        self.workers = max(1, workers)
        self.chunk_size = max(1, chunk_size)
        self.should_cancel = should_cancel

    def _check_cancelled(self, completed: int) -> None:
        if self.should_cancel is not None and self.should_cancel():
            logger.info("Monte Carlo batch cancelled after %d trials", completed)
            raise SimulationCancelledError(
                f"Simulation cancelled after {completed} trials"
            )

    def _chunks(self, seeds: List[int]) -> List[List[Tuple[int, int]]]:
        indexed = list(enumerate(seeds))
        return [
            indexed[start : start + self.chunk_size]
            for start in range(0, len(indexed), self.chunk_size)
        ]

    def run_trials(self, seed: Optional[int] = None) -> List[TrialResult]:
        """
        Run every trial.

        Args:
            seed: Master seed; falls back to the scenario's Monte Carlo seed

        Returns:
            Trial results ordered by trial index

        Raises:
            SimulationCancelledError: If the batch was cancelled
        """
        settings = self.params.monte_carlo
        master_seed = seed if seed is not None else settings.seed
        seeds = spawn_seeds(master_seed, settings.trials)
        years = list(self.projection.years)
        chunks = self._chunks(seeds)

        results: List[TrialResult] = []
        if self.workers == 1 or len(chunks) == 1:
            for trial, trial_seed in enumerate(seeds):
                self._check_cancelled(len(results))
                results.append(
                    simulate_trial(
                        self.params,
                        years,
                        returns_source(settings, trial_seed),
                        trial,
                    )
                )
            return results

        tasks = [(self.params, years, chunk) for chunk in chunks]
        with multiprocessing.Pool(processes=self.workers) as pool:
            for chunk_results in pool.imap_unordered(_run_chunk, tasks):
                self._check_cancelled(len(results))
                results.extend(chunk_results)
        return sorted(results, key=lambda r: r.trial)

    def run(self, seed: Optional[int] = None) -> MonteCarloResult:
        """
        Run all trials and aggregate them.

        Args:
            seed: Master seed override

        Returns:
            MonteCarloResult with the summary and every trial
        """
        trials = self.run_trials(seed)
        calculator = SuccessMetricsCalculator(self.params.monte_carlo.percentiles)
        summary = calculator.calculate_metrics(
            trials, [record.year for record in self.projection.years]
        )
        return MonteCarloResult(summary=summary, trials=trials)
