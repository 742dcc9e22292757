"""
Income modeling for FIRE projections.

The primary earner's career is an ordered list of ``CareerPhase`` definitions.
Each phase pairs a predicate over the calendar year with an income formula and
an employer match rate; the first phase whose predicate holds determines the
year's income. The secondary earner follows a single geometric growth series,
and passive benefits start at a configured claim age and then track inflation.
"""

from typing import Callable, List

from pydantic import BaseModel, ConfigDict, Field

from .scenario import BenefitStream, ScenarioParameters
from .time_grid import compound


class CareerPhase(BaseModel):
    """One segment of the primary earner's career."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Phase name")
    applies: Callable[[int], bool] = Field(
        ..., description="Predicate selecting the years in this phase"
    )
    income: Callable[[int], float] = Field(
        ..., description="Income formula for a year within the phase"
    )
    match_rate: float = Field(
        default=0.0, ge=0, le=1, description="Employer match as share of income"
    )


class IncomeBreakdown(BaseModel):
    """Household income for one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    phase: str
    primary_income: float = Field(..., ge=0)
    spouse_income: float = Field(..., ge=0)
    primary_benefit: float = Field(..., ge=0)
    spouse_benefit: float = Field(..., ge=0)
    employer_match: float = Field(..., ge=0)

    @property
    def benefit_income(self) -> float:
        return self.primary_benefit + self.spouse_benefit

    @property
    def total_income(self) -> float:
        return self.primary_income + self.spouse_income + self.benefit_income


def scale_salary(scale: List[float], rank: int) -> float:
    """Lockstep salary for a 1-based rank, clamped to the scale."""
    if rank <= 0:
        return scale[0]
    if rank >= len(scale):
        return scale[-1]
    return scale[rank - 1]


def build_career_phases(params: ScenarioParameters) -> List[CareerPhase]:
    """
    Build the ordered career phase list for a scenario.

    Args:
        params: Scenario parameters

    Returns:
        Phases in evaluation order; with ordered phase years they partition
        every calendar year
    """
    career = params.career
    inflation = params.timeline.inflation_rate

    return [
        CareerPhase(
            name="pre_career",
            applies=lambda year: year < career.scale_start_year,
            income=lambda year: career.pre_career_income,
            match_rate=career.pre_career_match_rate,
        ),
        CareerPhase(
            name="scale",
            applies=lambda year: (
                career.scale_start_year <= year < career.interruption_start_year
            ),
            income=lambda year: scale_salary(
                career.salary_scale, year - career.scale_start_year + 1
            ),
            match_rate=career.scale_match_rate,
        ),
        CareerPhase(
            name="interruption",
            applies=lambda year: (
                career.interruption_start_year <= year < career.interruption_end_year
            ),
            income=lambda year: compound(
                career.interruption_salary,
                inflation,
                year - career.interruption_start_year,
            ),
            match_rate=career.interruption_match_rate,
        ),
        CareerPhase(
            name="return",
            applies=lambda year: (
                career.interruption_end_year <= year < career.terminal_start_year
            ),
            income=lambda year: scale_salary(
                career.salary_scale,
                career.return_rank + year - career.interruption_end_year,
            ),
            match_rate=career.scale_match_rate,
        ),
        CareerPhase(
            name="terminal",
            applies=lambda year: year >= career.terminal_start_year,
            income=lambda year: compound(
                career.terminal_salary,
                career.terminal_growth,
                year - career.terminal_start_year,
            ),
            match_rate=career.terminal_match_rate,
        ),
    ]


def benefit_amount(
    stream: BenefitStream, birth_year: int, inflation: float, year: int
) -> float:
    """Benefit paid in ``year``; zero before birth year + claim age."""
    start_year = birth_year + stream.claim_age
    if year < start_year:
        return 0.0
    return compound(stream.annual_amount, inflation, year - start_year)


class IncomeEngine:
    """Evaluates household income for any projection year."""

    def __init__(self, params: ScenarioParameters):
        self.params = params
        self.phases = build_career_phases(params)

    def get_phase(self, year: int) -> CareerPhase:
        """First career phase whose predicate holds for ``year``."""
        for phase in self.phases:
            if phase.applies(year):
                return phase
        # Unreachable with validated phase ordering
        return self.phases[-1]

    def primary_income(self, year: int) -> float:
        return self.get_phase(year).income(year)

    def spouse_income(self, year: int) -> float:
        spouse = self.params.spouse
        return compound(
            spouse.base_income,
            spouse.growth_rate,
            year - self.params.timeline.start_year,
        )

    def get_annual_income(self, year: int) -> IncomeBreakdown:
        """
        Compute all household income streams for a year.

        Args:
            year: Calendar year

        Returns:
            IncomeBreakdown including the employer match
        """
        phase = self.get_phase(year)
        primary = phase.income(year)
        spouse = self.spouse_income(year)
        household = self.params.household
        benefits = self.params.benefits
        inflation = self.params.timeline.inflation_rate

        return IncomeBreakdown(
            year=year,
            phase=phase.name,
            primary_income=primary,
            spouse_income=spouse,
            primary_benefit=benefit_amount(
                benefits.primary, household.primary_birth_year, inflation, year
            ),
            spouse_benefit=benefit_amount(
                benefits.spouse, household.spouse_birth_year, inflation, year
            ),
            employer_match=primary * phase.match_rate
            + spouse * self.params.spouse.match_rate,
        )
