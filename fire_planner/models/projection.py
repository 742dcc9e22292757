"""
Deterministic year-by-year projection engine.

This module walks the projection horizon one calendar year at a time and builds
the household ledger: incomes, rental property cash flow, taxes, expenses,
education savings, account allocation, portfolio growth and the FIRE target.
The resulting sequence of ``YearRecord`` rows is also the cash-flow schedule the
Monte Carlo engine replays during accumulation.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .education_fund import EducationFundTracker
from .fire_target import FireTargetEvaluator
from .income_engine import IncomeEngine
from .portfolio_state import PortfolioState
from .rental_property import RentalPropertyModel
from .scenario import ScenarioParameters, SpendingBand
from .tax_calculator import TaxCalculator
from .time_grid import InflationAdjuster, TimeGrid, compound

logger = logging.getLogger(__name__)


class YearRecord(BaseModel):
    """One immutable row of the deterministic ledger."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., description="Calendar year")
    age: int = Field(..., description="Primary earner age at year end")
    career_phase: str = Field(..., description="Primary earner career phase")

    # Income
    primary_income: float = Field(..., ge=0)
    spouse_income: float = Field(..., ge=0)
    benefit_income: float = Field(..., ge=0)
    total_income: float = Field(..., ge=0)
    employer_match: float = Field(..., ge=0)

    # Taxes
    federal_tax: float = Field(..., ge=0)
    state_tax: float = Field(..., ge=0)
    payroll_tax: float = Field(..., ge=0)
    total_tax: float = Field(..., ge=0)
    effective_rate: float = Field(..., ge=0)
    net_income: float

    # Expenses
    living_expenses: float = Field(..., ge=0)
    tuition: float = Field(..., ge=0)
    education_contribution: float = Field(..., ge=0)
    education_costs: Dict[str, float] = Field(default_factory=dict)
    education_shortfall: float = Field(..., ge=0)
    total_expenses: float = Field(..., ge=0)

    # Rental property
    rental_cash_flow: float
    rental_tax_net: float
    mortgage_interest: float = Field(..., ge=0)

    # Allocation
    net_savings: float
    tax_advantaged_capacity: float = Field(..., ge=0)
    tax_advantaged_contribution: float = Field(..., ge=0)
    taxable_contribution: float = Field(..., ge=0)
    taxable_withdrawal: float = Field(..., ge=0)
    portfolio_growth: float

    # Balances
    tax_advantaged_balance: float = Field(..., ge=0)
    taxable_balance: float = Field(..., ge=0)
    total_balance: float = Field(..., ge=0)
    education_balances: Dict[str, float] = Field(default_factory=dict)
    total_education_balance: float = Field(..., ge=0)

    # Target
    sustainable_withdrawal: float = Field(..., ge=0)
    base_target: float = Field(..., ge=0)
    education_reserve: float = Field(..., ge=0)
    healthcare_buffer: float = Field(..., ge=0)
    fire_target: float = Field(..., ge=0)
    is_fire: bool = Field(..., description="Portfolio meets this year's target")
    fire_achieved: bool = Field(..., description="Target met in this or an earlier year")
    deficit: bool = Field(..., description="Savings shortfall exceeded taxable balance")


class ProjectionResult(BaseModel):
    """Output of a deterministic projection."""

    model_config = ConfigDict(frozen=True)

    years: List[YearRecord] = Field(..., description="Ledger rows in year order")
    achievement_year: Optional[int] = Field(
        default=None, description="First year the target was met"
    )
    overfunding_warning: Optional[str] = Field(default=None)

    @property
    def final_balance(self) -> float:
        return self.years[-1].total_balance if self.years else 0.0

    @property
    def deficit_years(self) -> List[int]:
        return [record.year for record in self.years if record.deficit]

    def get_year(self, year: int) -> Optional[YearRecord]:
        for record in self.years:
            if record.year == year:
                return record
        return None


def spending_multiplier(bands: List[SpendingBand], age: int) -> float:
    """
    Cumulative spending reduction for an age.

    Each band reduces spending multiplicatively for every full year spent in
    it, so years in a band is clamp(age - start, 0, width).

    Args:
        bands: Spending bands
        age: Primary earner age

    Returns:
        Multiplier in (0, 1]
    """
    multiplier = 1.0
    for band in bands:
        years = max(0, age - band.start_age)
        if band.end_age is not None:
            years = min(years, band.end_age - band.start_age)
        if years > 0:
            multiplier *= (1 - band.annual_decrement) ** years
    return multiplier


class ProjectionEngine:
    """Builds the deterministic ledger for a scenario."""

    def __init__(self, params: ScenarioParameters):
        self.params = params
        timeline = params.timeline
        self.time_grid = TimeGrid(
            start_year=timeline.start_year, end_year=timeline.end_year
        )
        self.inflation = InflationAdjuster(
            inflation_rate=timeline.inflation_rate, base_year=timeline.start_year
        )
        self.income_engine = IncomeEngine(params)
        self.tax_calculator = TaxCalculator(params.taxes, self.inflation)
        self.rental_model = RentalPropertyModel(params.rental_property, self.inflation)
        self.target_evaluator = FireTargetEvaluator(
            params.fire_target, self.inflation, params.household.primary_birth_year
        )

    def living_expenses(self, year: int) -> float:
        expenses = self.params.expenses
        base = self.inflation.to_nominal_value(
            expenses.monthly_expenses * 12, year
        ) + compound(
            expenses.property_tax,
            expenses.property_tax_growth,
            year - self.time_grid.start_year,
        )
        age = year - self.params.household.primary_birth_year
        return base * spending_multiplier(expenses.spending_bands, age)

    def tuition(self, year: int) -> float:
        return sum(e.amount for e in self.params.expenses.tuition if e.year == year)

    def tax_advantaged_capacity(self, year: int, employer_match: float) -> float:
        """Combined contribution room across contributors plus employer match."""
        investments = self.params.investments
        individual = investments.retirement_plan_limit + investments.ira_limit
        return (
            self.inflation.to_nominal_value(individual, year) * investments.contributors
            + employer_match
        )

    def run(self) -> ProjectionResult:
        """
        Run the deterministic projection over the full horizon.

        Returns:
            ProjectionResult with one YearRecord per year
        """
        params = self.params
        investments = params.investments
        portfolio = PortfolioState.from_initial_savings(
            investments.initial_savings, investments.initial_taxable_fraction
        )
        education = EducationFundTracker(
            params.education,
            params.education_return_rate,
            self.time_grid.end_year,
        )

        records: List[YearRecord] = []
        achievement_year: Optional[int] = None

        for year in self.time_grid.get_years():
            income = self.income_engine.get_annual_income(year)
            rental = self.rental_model.evaluate(year)
            taxes = self.tax_calculator.calculate(
                year,
                primary_wages=income.primary_income,
                spouse_wages=income.spouse_income,
                passive_income=rental.tax_net,
                benefit_income=income.benefit_income,
            )
            net_income = income.total_income - taxes.total

            living = self.living_expenses(year)
            tuition = self.tuition(year)
            savings_before_education = net_income + rental.cash_flow - living - tuition

            education_year = education.advance_year(year, savings_before_education)
            education_contribution = education_year.total_contribution
            shortfall = education_year.shortfall
            net_savings = savings_before_education - education_contribution - shortfall

            capacity = self.tax_advantaged_capacity(year, income.employer_match)
            tax_advantaged_contribution = 0.0
            taxable_contribution = 0.0
            taxable_withdrawal = 0.0
            deficit = False
            if net_savings > 0:
                tax_advantaged_contribution = min(net_savings, capacity)
                taxable_contribution = max(0.0, net_savings - capacity)
            elif net_savings < 0:
                needed = -net_savings
                if portfolio.taxable >= needed:
                    taxable_withdrawal = needed
                else:
                    deficit = True
                    taxable_withdrawal = portfolio.taxable
                    logger.debug(
                        "Funding deficit in %d: needed %.0f, taxable %.0f",
                        year,
                        needed,
                        portfolio.taxable,
                    )

            growth = portfolio.apply_year(
                investments.tax_advantaged_return,
                investments.taxable_return,
                tax_advantaged_contribution,
                taxable_contribution,
                taxable_withdrawal,
            )

            target = self.target_evaluator.evaluate(
                year, portfolio.total, education.forward_reserve(year)
            )
            if achievement_year is None and target.is_met:
                achievement_year = year

            records.append(
                YearRecord(
                    year=year,
                    age=year - params.household.primary_birth_year,
                    career_phase=income.phase,
                    primary_income=income.primary_income,
                    spouse_income=income.spouse_income,
                    benefit_income=income.benefit_income,
                    total_income=income.total_income,
                    employer_match=income.employer_match,
                    federal_tax=taxes.federal,
                    state_tax=taxes.state,
                    payroll_tax=taxes.payroll,
                    total_tax=taxes.total,
                    effective_rate=taxes.effective_rate,
                    net_income=net_income,
                    living_expenses=living,
                    tuition=tuition,
                    education_contribution=education_contribution,
                    education_costs=education_year.costs,
                    education_shortfall=shortfall,
                    total_expenses=living + tuition + shortfall,
                    rental_cash_flow=rental.cash_flow,
                    rental_tax_net=rental.tax_net,
                    mortgage_interest=rental.mortgage_interest,
                    net_savings=net_savings,
                    tax_advantaged_capacity=capacity,
                    tax_advantaged_contribution=tax_advantaged_contribution,
                    taxable_contribution=taxable_contribution,
                    taxable_withdrawal=taxable_withdrawal,
                    portfolio_growth=growth,
                    tax_advantaged_balance=portfolio.tax_advantaged,
                    taxable_balance=portfolio.taxable,
                    total_balance=portfolio.total,
                    education_balances=education_year.balances,
                    total_education_balance=education_year.total_balance,
                    sustainable_withdrawal=target.sustainable_withdrawal,
                    base_target=target.base,
                    education_reserve=target.education_reserve,
                    healthcare_buffer=target.healthcare_buffer,
                    fire_target=target.total,
                    is_fire=target.is_met,
                    fire_achieved=achievement_year is not None,
                    deficit=deficit,
                )
            )

        overfunding_warning = None
        if records and records[-1].total_education_balance > 0:
            overfunding_warning = (
                "Education accounts may be overfunded. Final balance: "
                f"${records[-1].total_education_balance:,.0f}. "
                "Consider reducing contributions."
            )
            logger.warning(overfunding_warning)

        return ProjectionResult(
            years=records,
            achievement_year=achievement_year,
            overfunding_warning=overfunding_warning,
        )


def run_projection(params: ScenarioParameters) -> ProjectionResult:
    """Run a deterministic projection for a scenario."""
    return ProjectionEngine(params).run()
