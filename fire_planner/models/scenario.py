"""
Pydantic models for FIRE planning scenarios.

This module defines ``ScenarioParameters``, the complete immutable configuration
for a projection and Monte Carlo run. Every rate, year and dollar amount used by
the engine is a field here; the engine components read nothing else. All rates
are decimals (0.03 means 3%).
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FrozenModel(BaseModel):
    """Base class for immutable configuration sections."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class TimelineSettings(FrozenModel):
    """Projection horizon and general inflation."""

    start_year: int = Field(
        default=2025, ge=1900, le=2100, description="First projected year"
    )
    horizon_years: int = Field(
        default=62,
        ge=0,
        le=100,
        description="Years projected after the start year (inclusive horizon)",
    )
    inflation_rate: float = Field(
        default=0.03, ge=-0.05, le=0.2, description="General annual inflation"
    )

    @property
    def end_year(self) -> int:
        return self.start_year + self.horizon_years


class Household(FrozenModel):
    """Birth years used for age-driven rules."""

    primary_birth_year: int = Field(default=1987, ge=1900, le=2100)
    spouse_birth_year: int = Field(default=1989, ge=1900, le=2100)


DEFAULT_SALARY_SCALE = [
    245000.0,
    260000.0,
    295000.0,
    360000.0,
    415000.0,
    455000.0,
    525000.0,
    535000.0,
]


class CareerSettings(FrozenModel):
    """Piecewise primary-earner career income."""

    pre_career_income: float = Field(
        default=40000, ge=0, description="Fixed income before the scale phase"
    )
    scale_start_year: int = Field(default=2028, ge=1900, le=2100)
    salary_scale: List[float] = Field(
        default_factory=lambda: list(DEFAULT_SALARY_SCALE),
        min_length=1,
        description="Lockstep compensation by rank (index 0 is rank 1)",
    )
    interruption_start_year: int = Field(default=2029, ge=1900, le=2100)
    interruption_end_year: int = Field(default=2031, ge=1900, le=2100)
    interruption_salary: float = Field(
        default=100000, ge=0, description="Salary in the first interruption year"
    )
    return_rank: int = Field(
        default=3, ge=1, le=40, description="Scale rank credited on return"
    )
    terminal_start_year: int = Field(default=2036, ge=1900, le=2100)
    terminal_salary: float = Field(default=110000, ge=0)
    terminal_growth: float = Field(default=0.03, ge=-0.1, le=0.2)
    pre_career_match_rate: float = Field(default=0.0, ge=0, le=1)
    scale_match_rate: float = Field(default=0.0, ge=0, le=1)
    interruption_match_rate: float = Field(default=0.04, ge=0, le=1)
    terminal_match_rate: float = Field(default=0.04, ge=0, le=1)

    @model_validator(mode="after")
    def validate_phase_order(self):
        years = [
            self.scale_start_year,
            self.interruption_start_year,
            self.interruption_end_year,
            self.terminal_start_year,
        ]
        if years != sorted(years):
            raise ValueError(
                "Career phase years must be ordered: scale start <= interruption "
                "start <= interruption end <= terminal start"
            )
        if any(amount < 0 for amount in self.salary_scale):
            raise ValueError("Salary scale amounts must be non-negative")
        return self


class SpouseIncomeSettings(FrozenModel):
    """Secondary earner geometric income series."""

    base_income: float = Field(
        default=200000, ge=0, description="Income in the start year"
    )
    growth_rate: float = Field(default=0.03, ge=-0.1, le=0.2)
    match_rate: float = Field(
        default=0.04, ge=0, le=1, description="Employer match as share of wages"
    )


class BenefitStream(FrozenModel):
    """A passive benefit (e.g. social security) for one person."""

    annual_amount: float = Field(
        default=0, ge=0, description="Annual benefit in the first benefit year"
    )
    claim_age: int = Field(default=67, ge=50, le=80)


class BenefitSettings(FrozenModel):
    """Passive benefit incomes for both people."""

    primary: BenefitStream = Field(
        default_factory=lambda: BenefitStream(annual_amount=35000, claim_age=68)
    )
    spouse: BenefitStream = Field(
        default_factory=lambda: BenefitStream(annual_amount=40000, claim_age=70)
    )


class ScheduledExpense(FrozenModel):
    """A one-off expense in a given year (nominal dollars)."""

    year: int = Field(..., ge=1900, le=2200)
    amount: float = Field(..., ge=0)


class SpendingBand(FrozenModel):
    """Annual multiplicative spending reduction applied within an age band."""

    start_age: int = Field(..., ge=0, le=120)
    end_age: Optional[int] = Field(
        default=None, ge=0, le=150, description="Exclusive end age (None = open)"
    )
    annual_decrement: float = Field(..., ge=0, le=0.5)

    @model_validator(mode="after")
    def validate_ages(self):
        if self.end_age is not None and self.end_age <= self.start_age:
            raise ValueError("Spending band end_age must be greater than start_age")
        return self


class ExpenseSettings(FrozenModel):
    """Household living costs."""

    monthly_expenses: float = Field(default=10000, ge=0)
    property_tax: float = Field(default=20000, ge=0)
    property_tax_growth: float = Field(default=0.02, ge=-0.1, le=0.2)
    tuition: List[ScheduledExpense] = Field(
        default_factory=lambda: [
            ScheduledExpense(year=2026, amount=60000),
            ScheduledExpense(year=2027, amount=30000),
        ]
    )
    spending_bands: List[SpendingBand] = Field(
        default_factory=lambda: [
            SpendingBand(start_age=65, end_age=75, annual_decrement=0.01),
            SpendingBand(start_age=75, end_age=85, annual_decrement=0.04),
            SpendingBand(start_age=85, annual_decrement=0.02),
        ]
    )


class TaxBracket(FrozenModel):
    """One marginal bracket; ``upper_limit`` is in base-year dollars."""

    upper_limit: Optional[float] = Field(
        default=None, gt=0, description="Bracket ceiling (None = unbounded)"
    )
    rate: float = Field(..., ge=0, lt=1)


class AboveTheLineAllowance(FrozenModel):
    """A deduction taken before the standard/itemized choice."""

    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, description="Base-year amount")
    base_year_amount: Optional[float] = Field(
        default=None,
        ge=0,
        description=(
            "Amount used in the base year itself; when set, ``amount`` applies "
            "from the following year and is inflated only from there"
        ),
    )


def _federal_brackets() -> List[TaxBracket]:
    return [
        TaxBracket(upper_limit=23200, rate=0.10),
        TaxBracket(upper_limit=94300, rate=0.12),
        TaxBracket(upper_limit=201050, rate=0.22),
        TaxBracket(upper_limit=383900, rate=0.24),
        TaxBracket(upper_limit=487450, rate=0.32),
        TaxBracket(upper_limit=731200, rate=0.35),
        TaxBracket(rate=0.37),
    ]


def _state_brackets() -> List[TaxBracket]:
    return [
        TaxBracket(upper_limit=20198, rate=0.01),
        TaxBracket(upper_limit=47884, rate=0.02),
        TaxBracket(upper_limit=75576, rate=0.04),
        TaxBracket(upper_limit=105146, rate=0.06),
        TaxBracket(upper_limit=132590, rate=0.08),
        TaxBracket(upper_limit=679278, rate=0.093),
        TaxBracket(upper_limit=814732, rate=0.103),
        TaxBracket(upper_limit=1000000, rate=0.113),
        TaxBracket(rate=0.123),
    ]


def _validate_schedule(brackets: List[TaxBracket], label: str) -> None:
    if not brackets:
        raise ValueError(f"{label} brackets cannot be empty")
    limits = [b.upper_limit for b in brackets[:-1]]
    if any(limit is None for limit in limits):
        raise ValueError(f"Only the last {label} bracket may be unbounded")
    if brackets[-1].upper_limit is not None:
        raise ValueError(f"The last {label} bracket must be unbounded")
    if limits != sorted(limits) or len(set(limits)) != len(limits):
        raise ValueError(f"{label} bracket limits must be strictly increasing")


class TaxSettings(FrozenModel):
    """Simplified federal, state and payroll tax rules."""

    standard_deduction: float = Field(default=29200, ge=0)
    itemized_deductions: float = Field(default=0, ge=0)
    allowances: List[AboveTheLineAllowance] = Field(
        default_factory=lambda: [
            AboveTheLineAllowance(name="hsa", amount=8550),
            AboveTheLineAllowance(
                name="dependent_care_fsa", amount=7500, base_year_amount=5000
            ),
        ]
    )
    federal_brackets: List[TaxBracket] = Field(default_factory=_federal_brackets)
    state_brackets: List[TaxBracket] = Field(default_factory=_state_brackets)
    social_security_rate: float = Field(default=0.062, ge=0, lt=1)
    social_security_wage_base: float = Field(default=168600, ge=0)
    wage_base_growth: float = Field(default=0.04, ge=-0.1, le=0.2)
    medicare_rate: float = Field(default=0.0145, ge=0, lt=1)
    additional_medicare_rate: float = Field(default=0.009, ge=0, lt=1)
    additional_medicare_threshold: float = Field(default=250000, ge=0)

    @model_validator(mode="after")
    def validate_brackets(self):
        _validate_schedule(self.federal_brackets, "federal")
        _validate_schedule(self.state_brackets, "state")
        return self


class MortgageTerms(FrozenModel):
    """Fixed-rate loan on the rental property."""

    origination_year: int = Field(default=2020, ge=1900, le=2100)
    payoff_year: int = Field(default=2051, ge=1900, le=2200)
    annual_rate: float = Field(default=0.0275, ge=0, le=0.25)
    monthly_payment: Optional[float] = Field(
        default=1633, ge=0, description="Principal and interest per month"
    )
    original_principal: Optional[float] = Field(
        default=400000,
        ge=0,
        description="Used to derive the level payment when no payment is given",
    )

    @model_validator(mode="after")
    def validate_terms(self):
        if self.payoff_year <= self.origination_year:
            raise ValueError("Mortgage payoff year must be after the origination year")
        if self.monthly_payment is None and self.original_principal is None:
            raise ValueError(
                "Mortgage needs either a monthly_payment or an original_principal"
            )
        return self

    @property
    def term_months(self) -> int:
        return (self.payoff_year - self.origination_year) * 12


class RentalPropertySettings(FrozenModel):
    """Passive rental property income and costs."""

    monthly_rent: float = Field(default=5800, ge=0)
    property_tax: float = Field(default=8000, ge=0)
    property_tax_growth: float = Field(default=0.02, ge=-0.1, le=0.2)
    insurance: float = Field(default=3323, ge=0)
    maintenance: float = Field(default=11000, ge=0)
    vacancy_rate: float = Field(default=0.05, ge=0, le=1)
    mortgage: Optional[MortgageTerms] = Field(default_factory=MortgageTerms)


class Beneficiary(FrozenModel):
    """A child with an education savings account."""

    name: str = Field(..., min_length=1)
    birth_year: int = Field(..., ge=1900, le=2200)
    initial_balance: float = Field(default=0, ge=0)
    annual_contribution: float = Field(default=9000, ge=0)


class EducationSettings(FrozenModel):
    """Education savings accounts and college costs."""

    beneficiaries: List[Beneficiary] = Field(
        default_factory=lambda: [
            Beneficiary(name="child_1", birth_year=2021),
            Beneficiary(name="child_2", birth_year=2025),
        ]
    )
    age_ceiling: int = Field(
        default=22, ge=1, le=40, description="Account is active while age < ceiling"
    )
    college_start_age: int = Field(default=18, ge=0, le=40)
    college_years: int = Field(default=4, ge=0, le=10)
    annual_cost: float = Field(default=40000, ge=0)
    cost_inflation: float = Field(default=0.035, ge=-0.1, le=0.3)
    cost_base_year: int = Field(default=2025, ge=1900, le=2100)
    return_rate: Optional[float] = Field(
        default=None,
        ge=-0.5,
        le=0.5,
        description="Account growth rate (None = tax-advantaged return)",
    )
    blackout_start_year: Optional[int] = Field(default=None, ge=1900, le=2200)
    blackout_end_year: Optional[int] = Field(
        default=2027, ge=1900, le=2200, description="Inclusive last blackout year"
    )
    contribution_cap_fraction: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Share of positive pre-education net savings available",
    )

    @model_validator(mode="after")
    def validate_education(self):
        names = [b.name for b in self.beneficiaries]
        if len(set(names)) != len(names):
            raise ValueError("Beneficiary names must be unique")
        if (
            self.blackout_start_year is not None
            and self.blackout_end_year is not None
            and self.blackout_end_year < self.blackout_start_year
        ):
            raise ValueError("Blackout end year must be >= blackout start year")
        return self

    def in_blackout(self, year: int) -> bool:
        if self.blackout_start_year is None and self.blackout_end_year is None:
            return False
        start = self.blackout_start_year
        end = self.blackout_end_year
        return (start is None or year >= start) and (end is None or year <= end)

    def in_college(self, age: int) -> bool:
        return (
            self.college_start_age <= age < self.college_start_age + self.college_years
            and age < self.age_ceiling
        )


class InvestmentSettings(FrozenModel):
    """Starting portfolio, return assumptions and contribution limits."""

    initial_savings: float = Field(default=500000, ge=0)
    initial_taxable_fraction: float = Field(default=0.6, ge=0, le=1)
    tax_advantaged_return: float = Field(default=0.07, ge=-0.5, le=0.5)
    taxable_return: float = Field(default=0.06, ge=-0.5, le=0.5)
    retirement_plan_limit: float = Field(
        default=23500, ge=0, description="Individual 401(k)-style limit, base year"
    )
    ira_limit: float = Field(
        default=7000, ge=0, description="Individual IRA-style limit, base year"
    )
    contributors: int = Field(default=2, ge=0, le=10)


class FireTargetSettings(FrozenModel):
    """Sustainable-withdrawal target definition."""

    annual_spend: float = Field(
        default=135000, ge=0, description="Retirement spending in base-year dollars"
    )
    withdrawal_rate: float = Field(default=0.04, ge=0, le=1)
    include_healthcare_buffer: bool = Field(default=False)
    annual_healthcare_cost: float = Field(default=12000, ge=0)
    healthcare_coverage_age: int = Field(
        default=65, ge=0, le=120, description="Age public coverage begins"
    )


class MonteCarloSettings(FrozenModel):
    """Stochastic simulation controls.

    With zero volatility and the normal return model every trial replays the
    deterministic ledger. Its final balance matches the projection only when
    ``retire_on_achievement`` is off, since retired trials draw down instead.
    """

    trials: int = Field(default=1000, ge=1, le=100000)
    return_model: Literal["normal", "historical"] = Field(
        default="normal",
        description="normal draws around the configured means; historical "
        "samples S&P 500 calendar years with replacement",
    )
    volatility: float = Field(default=0.15, ge=0, le=1)
    seed: Optional[int] = Field(default=None, ge=0)
    depletion_threshold: float = Field(default=1000, ge=0)
    percentiles: List[float] = Field(
        default_factory=lambda: [10.0, 25.0, 50.0, 75.0, 90.0], min_length=1
    )
    retire_on_achievement: bool = Field(
        default=True,
        description="Switch trials to drawdown once the target is reached. "
        "Disable to replay the deterministic ledger for the whole horizon.",
    )

    @model_validator(mode="after")
    def validate_percentiles(self):
        if any(not 0 <= p <= 100 for p in self.percentiles):
            raise ValueError("Percentiles must be between 0 and 100")
        return self


class ScenarioParameters(FrozenModel):
    """Complete configuration for one projection and Monte Carlo run."""

    timeline: TimelineSettings = Field(default_factory=TimelineSettings)
    household: Household = Field(default_factory=Household)
    career: CareerSettings = Field(default_factory=CareerSettings)
    spouse: SpouseIncomeSettings = Field(default_factory=SpouseIncomeSettings)
    benefits: BenefitSettings = Field(default_factory=BenefitSettings)
    expenses: ExpenseSettings = Field(default_factory=ExpenseSettings)
    taxes: TaxSettings = Field(default_factory=TaxSettings)
    rental_property: Optional[RentalPropertySettings] = Field(
        default_factory=RentalPropertySettings
    )
    education: EducationSettings = Field(default_factory=EducationSettings)
    investments: InvestmentSettings = Field(default_factory=InvestmentSettings)
    fire_target: FireTargetSettings = Field(default_factory=FireTargetSettings)
    monte_carlo: MonteCarloSettings = Field(default_factory=MonteCarloSettings)

    @property
    def education_return_rate(self) -> float:
        if self.education.return_rate is not None:
            return self.education.return_rate
        return self.investments.tax_advantaged_return
