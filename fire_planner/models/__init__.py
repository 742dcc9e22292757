"""Projection and simulation models for FIRE planning scenarios."""

from .exceptions import FirePlannerError, SimulationCancelledError
from .scenario import (
    BenefitSettings,
    CareerSettings,
    EducationSettings,
    ExpenseSettings,
    FireTargetSettings,
    Household,
    InvestmentSettings,
    MonteCarloSettings,
    MortgageTerms,
    RentalPropertySettings,
    ScenarioParameters,
    SpouseIncomeSettings,
    TaxSettings,
    TimelineSettings,
)
from .time_grid import InflationAdjuster, TimeGrid
from .tax_calculator import TaxBreakdown, TaxCalculator
from .mortgage_amortization import MortgageCalculator, MortgageYear
from .income_engine import CareerPhase, IncomeBreakdown, IncomeEngine
from .education_fund import EducationAccount, EducationFundTracker
from .portfolio_state import PortfolioState
from .projection import ProjectionEngine, ProjectionResult, YearRecord, run_projection
from .historical_returns import HistoricalReturnsSampler
from .random_returns import RandomReturnsGenerator
from .monte_carlo import MonteCarloEngine, MonteCarloResult, TrialResult
from .success_metrics import MonteCarloSummary, SuccessMetricsCalculator, percentile

__all__ = [
    "FirePlannerError",
    "SimulationCancelledError",
    "ScenarioParameters",
    "TimelineSettings",
    "Household",
    "CareerSettings",
    "SpouseIncomeSettings",
    "BenefitSettings",
    "ExpenseSettings",
    "TaxSettings",
    "RentalPropertySettings",
    "MortgageTerms",
    "EducationSettings",
    "InvestmentSettings",
    "FireTargetSettings",
    "MonteCarloSettings",
    "TimeGrid",
    "InflationAdjuster",
    "TaxBreakdown",
    "TaxCalculator",
    "MortgageCalculator",
    "MortgageYear",
    "CareerPhase",
    "IncomeBreakdown",
    "IncomeEngine",
    "EducationAccount",
    "EducationFundTracker",
    "PortfolioState",
    "ProjectionEngine",
    "ProjectionResult",
    "YearRecord",
    "run_projection",
    "RandomReturnsGenerator",
    "HistoricalReturnsSampler",
    "MonteCarloEngine",
    "MonteCarloResult",
    "TrialResult",
    "MonteCarloSummary",
    "SuccessMetricsCalculator",
    "percentile",
]
