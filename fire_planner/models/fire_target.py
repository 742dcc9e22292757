"""
FIRE target evaluation.

The target for a year is the inflated retirement spend multiplied by the
reciprocal of the withdrawal rate, plus any education costs the accounts are not
projected to cover, plus an optional healthcare reserve for the years before
public coverage begins.
"""

from pydantic import BaseModel, ConfigDict, Field

from .scenario import FireTargetSettings
from .time_grid import InflationAdjuster


class FireTarget(BaseModel):
    """Target components for one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    base: float = Field(..., ge=0, description="Spend times portfolio multiple")
    education_reserve: float = Field(..., ge=0)
    healthcare_buffer: float = Field(..., ge=0)
    sustainable_withdrawal: float = Field(
        ..., ge=0, description="Withdrawal the current portfolio supports"
    )
    portfolio: float = Field(..., ge=0, description="Portfolio evaluated")

    @property
    def total(self) -> float:
        return self.base + self.education_reserve + self.healthcare_buffer

    @property
    def is_met(self) -> bool:
        return self.portfolio >= self.total


class FireTargetEvaluator:
    """Computes the sustainable-withdrawal target per year."""

    def __init__(
        self,
        settings: FireTargetSettings,
        inflation: InflationAdjuster,
        primary_birth_year: int,
    ):
        self.settings = settings
        self.inflation = inflation
        self.primary_birth_year = primary_birth_year

    @property
    def portfolio_multiple(self) -> float:
        """Reciprocal of the withdrawal rate; zero when the rate is zero."""
        rate = self.settings.withdrawal_rate
        return 1 / rate if rate > 0 else 0.0

    def base_target(self, year: int) -> float:
        spend = self.inflation.to_nominal_value(self.settings.annual_spend, year)
        return spend * self.portfolio_multiple

    def healthcare_buffer(self, year: int) -> float:
        """Inflated healthcare cost for each year until coverage age."""
        if not self.settings.include_healthcare_buffer:
            return 0.0
        age = year - self.primary_birth_year
        years_uncovered = max(0, self.settings.healthcare_coverage_age - age)
        annual_cost = self.inflation.to_nominal_value(
            self.settings.annual_healthcare_cost, year
        )
        return annual_cost * years_uncovered

    def evaluate(
        self, year: int, portfolio: float, education_reserve: float = 0.0
    ) -> FireTarget:
        """
        Evaluate the target for a year against a portfolio value.

        Args:
            year: Calendar year
            portfolio: Combined investment balance at year end
            education_reserve: Uncovered future education costs

        Returns:
            FireTarget with its components
        """
        return FireTarget(
            year=year,
            base=self.base_target(year),
            education_reserve=max(0.0, education_reserve),
            healthcare_buffer=self.healthcare_buffer(year),
            sustainable_withdrawal=portfolio * self.settings.withdrawal_rate,
            portfolio=portfolio,
        )
