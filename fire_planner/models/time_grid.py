"""
Time grid and inflation utilities for FIRE projections.

This module provides the projection horizon and the compounding helpers used to
inflate base-year amounts (expenses, tax thresholds, contribution limits) to
nominal values for any projection year.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def compound(amount: float, rate: float, periods: int) -> float:
    """
    Grow an amount geometrically.

    Args:
        amount: Starting amount
        rate: Growth rate per period (decimal)
        periods: Number of periods (may be negative to discount)

    Returns:
        amount * (1 + rate) ** periods
    """
    if periods == 0:
        return amount
    return amount * (1 + rate) ** periods


class TimeGrid(BaseModel):
    """Inclusive range of calendar years covered by a projection."""

    model_config = ConfigDict(frozen=True)

    start_year: int = Field(
        ..., ge=1900, le=2100, description="First projected year"
    )
    end_year: int = Field(..., ge=1900, le=2200, description="Last projected year")

    @field_validator("end_year")
    @classmethod
    def validate_end_year(cls, v: int, info: ValidationInfo) -> int:
        if "start_year" in info.data and v < info.data["start_year"]:
            raise ValueError("End year must be >= start year")
        return v

    def get_years(self) -> List[int]:
        """Get list of years in the time grid."""
        return list(range(self.start_year, self.end_year + 1))


class InflationAdjuster(BaseModel):
    """Inflates base-year amounts to nominal values."""

    model_config = ConfigDict(frozen=True)

    inflation_rate: float = Field(
        ..., ge=-0.5, le=1, description="Annual inflation rate (decimal)"
    )
    base_year: int = Field(
        ..., ge=1900, le=2100, description="Year the base amounts are expressed in"
    )

    def factor(self, year: int) -> float:
        """Cumulative inflation factor from the base year to ``year``."""
        return compound(1.0, self.inflation_rate, year - self.base_year)

    def to_nominal_value(self, real_amount: float, year: int) -> float:
        """Convert a base-year amount to ``year`` dollars."""
        return real_amount * self.factor(year)
