"""
Simulation service for coordinating FIRE projection runs.

This service runs the deterministic projection and then the Monte Carlo
simulation against it, applies the application's trial limits and default seed,
and logs the outcome of each run.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from fire_planner.models.monte_carlo import MonteCarloEngine, MonteCarloResult
from fire_planner.models.projection import ProjectionResult, run_projection
from fire_planner.models.scenario import ScenarioParameters

logger = logging.getLogger(__name__)


class TrialLimitError(ValueError):
    """Raised when a scenario requests more trials than the service allows."""


class SimulationService:
    """Service for orchestrating projection and Monte Carlo runs."""

    def __init__(
        self,
        workers: int = 1,
        max_trials: Optional[int] = None,
        default_seed: Optional[int] = None,
    ) -> None:
        """Initialize the simulation service.

        Args:
            workers: Worker processes used for Monte Carlo trials
            max_trials: Upper bound on trials per run (None = unbounded)
            default_seed: Master seed used when the scenario sets none
        """
        self.workers = workers
        self.max_trials = max_trials
        self.default_seed = default_seed

    def run_projection(self, params: ScenarioParameters) -> ProjectionResult:
        """Run the deterministic projection.

        Args:
            params: Scenario parameters

        Returns:
            ProjectionResult
        """
        started = time.perf_counter()
        result = run_projection(params)
        logger.info(
            "Projection %d-%d finished in %.3fs, achievement year %s",
            params.timeline.start_year,
            params.timeline.end_year,
            time.perf_counter() - started,
            result.achievement_year,
        )
        if result.deficit_years:
            logger.warning("Funding deficits in years %s", result.deficit_years)
        return result

    def run_monte_carlo(
        self,
        params: ScenarioParameters,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Dict[str, Any]:
        """Run the projection followed by the Monte Carlo simulation.

        Args:
            params: Scenario parameters
            should_cancel: Optional callback that abandons the batch when True

        Returns:
            Dictionary with the projection and the Monte Carlo result

        Raises:
            TrialLimitError: If the scenario requests too many trials
            SimulationCancelledError: If the batch was cancelled
        """
        trials = params.monte_carlo.trials
        if self.max_trials is not None and trials > self.max_trials:
            raise TrialLimitError(
                f"Requested {trials} trials exceeds the limit of {self.max_trials}"
            )

        projection = self.run_projection(params)

        seed = params.monte_carlo.seed
        if seed is None:
            seed = self.default_seed

        logger.info(
            "Starting Monte Carlo run: %d trials, volatility %.3f, %d workers",
            trials,
            params.monte_carlo.volatility,
            self.workers,
        )
        started = time.perf_counter()
        engine = MonteCarloEngine(
            params, projection, workers=self.workers, should_cancel=should_cancel
        )
        result: MonteCarloResult = engine.run(seed)
        summary = result.summary
        logger.info(
            "Monte Carlo run finished in %.3fs: success %.1f%%, survival %s",
            time.perf_counter() - started,
            summary.success_rate * 100,
            "n/a"
            if summary.survival_rate is None
            else f"{summary.survival_rate * 100:.1f}%",
        )

        return {"projection": projection, "monte_carlo": result}
