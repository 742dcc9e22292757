"""
Simplified household tax calculations for FIRE projections.

This module computes federal and state income tax using progressive bracket
schedules, plus payroll taxes (social security, medicare and the additional
medicare surtax). Bracket thresholds, deductions and allowances are expressed in
base-year dollars and inflated to the evaluation year.

Benefit income is treated as fully taxable. This is a deliberate simplification
of the partial-inclusion rules and is preserved as such.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .scenario import TaxBracket, TaxSettings
from .time_grid import InflationAdjuster, compound


class TaxBreakdown(BaseModel):
    """Tax owed for one calendar year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., description="Calendar year")
    taxable_income: float = Field(..., ge=0, description="Income after deductions")
    federal: float = Field(..., ge=0)
    state: float = Field(..., ge=0)
    social_security: float = Field(..., ge=0)
    medicare: float = Field(..., ge=0)
    additional_medicare: float = Field(..., ge=0)
    effective_rate: float = Field(..., ge=0, description="Total tax / total income")

    @property
    def payroll(self) -> float:
        return self.social_security + self.medicare + self.additional_medicare

    @property
    def total(self) -> float:
        return self.federal + self.state + self.payroll


def progressive_tax(income: float, brackets: List[TaxBracket], factor: float) -> float:
    """
    Integrate tax owed across a marginal bracket schedule.

    Args:
        income: Taxable income (nominal)
        brackets: Schedule in base-year dollars, last bracket unbounded
        factor: Inflation factor applied to every bracket ceiling

    Returns:
        Tax owed (never negative)
    """
    if income <= 0:
        return 0.0

    tax = 0.0
    lower = 0.0
    for bracket in brackets:
        upper = None if bracket.upper_limit is None else bracket.upper_limit * factor
        if upper is None or income <= upper:
            tax += (income - lower) * bracket.rate
            break
        tax += (upper - lower) * bracket.rate
        lower = upper
    return tax


class TaxCalculator:
    """Computes a TaxBreakdown for a household in a given year."""

    def __init__(self, settings: TaxSettings, inflation: InflationAdjuster):
        self.settings = settings
        self.inflation = inflation

    @property
    def base_year(self) -> int:
        return self.inflation.base_year

    def allowances(self, year: int) -> float:
        """Total above-the-line allowances for ``year``."""
        total = 0.0
        for allowance in self.settings.allowances:
            if allowance.base_year_amount is None:
                total += self.inflation.to_nominal_value(allowance.amount, year)
            elif year <= self.base_year:
                total += allowance.base_year_amount
            else:
                # Stepped allowance inflates from the year after the base year
                total += compound(
                    allowance.amount,
                    self.inflation.inflation_rate,
                    year - self.base_year - 1,
                )
        return total

    def deduction(self, year: int) -> float:
        """Greater of the inflated standard and itemized deductions."""
        return max(
            self.inflation.to_nominal_value(self.settings.standard_deduction, year),
            self.inflation.to_nominal_value(self.settings.itemized_deductions, year),
        )

    def wage_base(self, year: int) -> float:
        return compound(
            self.settings.social_security_wage_base,
            self.settings.wage_base_growth,
            year - self.base_year,
        )

    def payroll_taxes(self, primary_wages: float, spouse_wages: float, year: int):
        """
        Payroll taxes on the two earners' wages.

        Returns:
            Tuple of (social_security, medicare, additional_medicare)
        """
        primary_wages = max(0.0, primary_wages)
        spouse_wages = max(0.0, spouse_wages)
        wage_base = self.wage_base(year)
        social_security = self.settings.social_security_rate * (
            min(primary_wages, wage_base) + min(spouse_wages, wage_base)
        )
        combined = primary_wages + spouse_wages
        medicare = self.settings.medicare_rate * combined
        additional = self.settings.additional_medicare_rate * max(
            0.0, combined - self.settings.additional_medicare_threshold
        )
        return social_security, medicare, additional

    def calculate(
        self,
        year: int,
        primary_wages: float = 0.0,
        spouse_wages: float = 0.0,
        passive_income: float = 0.0,
        benefit_income: float = 0.0,
    ) -> TaxBreakdown:
        """
        Calculate the full tax breakdown for one year.

        Args:
            year: Calendar year
            primary_wages: Primary earner wages
            spouse_wages: Secondary earner wages
            passive_income: Net passive income subject to tax (may be negative)
            benefit_income: Passive benefit income, fully taxable

        Returns:
            TaxBreakdown for the year
        """
        total_income = primary_wages + spouse_wages + passive_income + benefit_income
        taxable_income = max(
            0.0, total_income - self.allowances(year) - self.deduction(year)
        )

        factor = self.inflation.factor(year)
        settings = self.settings
        federal = progressive_tax(taxable_income, settings.federal_brackets, factor)
        state = progressive_tax(taxable_income, settings.state_brackets, factor)
        social_security, medicare, additional = self.payroll_taxes(
            primary_wages, spouse_wages, year
        )

        total = federal + state + social_security + medicare + additional
        effective_rate = total / total_income if total_income > 0 else 0.0

        return TaxBreakdown(
            year=year,
            taxable_income=taxable_income,
            federal=federal,
            state=state,
            social_security=social_security,
            medicare=medicare,
            additional_medicare=additional,
            effective_rate=effective_rate,
        )
