"""
Rental property cash flow for FIRE projections.

A rental property is reported two ways. The tax view subtracts only the
mortgage interest, since principal repayment is not deductible. The cash view
subtracts the full principal and interest payment while the loan is active.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .mortgage_amortization import MortgageCalculator
from .scenario import RentalPropertySettings
from .time_grid import InflationAdjuster, compound


class RentalYear(BaseModel):
    """Rental property results for one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    gross_rent: float = Field(..., ge=0, description="Annual rent before vacancy")
    vacancy_loss: float = Field(..., ge=0)
    operating_costs: float = Field(
        ..., ge=0, description="Property tax, insurance and maintenance"
    )
    mortgage_interest: float = Field(..., ge=0)
    mortgage_payments: float = Field(..., ge=0)
    tax_net: float = Field(..., description="Net income subject to tax")
    cash_flow: float = Field(..., description="Net cash received")


def empty_rental_year(year: int) -> RentalYear:
    return RentalYear(
        year=year,
        gross_rent=0.0,
        vacancy_loss=0.0,
        operating_costs=0.0,
        mortgage_interest=0.0,
        mortgage_payments=0.0,
        tax_net=0.0,
        cash_flow=0.0,
    )


class RentalPropertyModel:
    """Computes yearly rental cash flow and its taxable net."""

    def __init__(
        self,
        settings: Optional[RentalPropertySettings],
        inflation: InflationAdjuster,
    ):
        self.settings = settings
        self.inflation = inflation

    def evaluate(self, year: int) -> RentalYear:
        """
        Evaluate the rental property for a year.

        Args:
            year: Calendar year

        Returns:
            RentalYear; all zeros when the household owns no rental
        """
        settings = self.settings
        if settings is None:
            return empty_rental_year(year)

        gross_rent = self.inflation.to_nominal_value(settings.monthly_rent * 12, year)
        vacancy_loss = gross_rent * settings.vacancy_rate
        property_tax = compound(
            settings.property_tax,
            settings.property_tax_growth,
            year - self.inflation.base_year,
        )
        operating_costs = (
            property_tax
            + self.inflation.to_nominal_value(settings.insurance, year)
            + self.inflation.to_nominal_value(settings.maintenance, year)
        )

        interest = 0.0
        payments = 0.0
        if settings.mortgage is not None:
            mortgage_year = MortgageCalculator.evaluate_year(settings.mortgage, year)
            interest = mortgage_year.interest
            if year < settings.mortgage.payoff_year and (
                year >= settings.mortgage.origination_year
            ):
                payments = MortgageCalculator.monthly_payment(settings.mortgage) * 12

        operating_net = gross_rent - vacancy_loss - operating_costs
        return RentalYear(
            year=year,
            gross_rent=gross_rent,
            vacancy_loss=vacancy_loss,
            operating_costs=operating_costs,
            mortgage_interest=interest,
            mortgage_payments=payments,
            tax_net=operating_net - interest,
            cash_flow=operating_net - payments,
        )
