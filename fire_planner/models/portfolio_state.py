"""
Two-account portfolio working state.

The same update rule is used by the deterministic projection and by every Monte
Carlo trial: growth is earned on the opening balances, then the year's
contributions are added and withdrawals removed. Balances are floored at zero
after every update.
"""

from pydantic import BaseModel, Field


class PortfolioState(BaseModel):
    """Tax-advantaged and taxable balances for one walk over the horizon."""

    tax_advantaged: float = Field(default=0.0, ge=0)
    taxable: float = Field(default=0.0, ge=0)

    @classmethod
    def from_initial_savings(
        cls, initial_savings: float, taxable_fraction: float
    ) -> "PortfolioState":
        taxable = initial_savings * taxable_fraction
        return cls(tax_advantaged=initial_savings - taxable, taxable=taxable)

    @property
    def total(self) -> float:
        return self.tax_advantaged + self.taxable

    def apply_year(
        self,
        tax_advantaged_return: float,
        taxable_return: float,
        tax_advantaged_contribution: float = 0.0,
        taxable_contribution: float = 0.0,
        taxable_withdrawal: float = 0.0,
    ) -> float:
        """
        Advance both balances by one year.

        Args:
            tax_advantaged_return: Return earned by the tax-advantaged account
            taxable_return: Return earned by the taxable account
            tax_advantaged_contribution: Amount added to the tax-advantaged account
            taxable_contribution: Amount added to the taxable account
            taxable_withdrawal: Amount removed from the taxable account

        Returns:
            Combined growth earned on the opening balances
        """
        tax_advantaged_growth = self.tax_advantaged * tax_advantaged_return
        taxable_growth = self.taxable * taxable_return

        self.tax_advantaged = max(
            0.0,
            self.tax_advantaged + tax_advantaged_growth + tax_advantaged_contribution,
        )
        self.taxable = max(
            0.0,
            self.taxable + taxable_growth + taxable_contribution - taxable_withdrawal,
        )
        return tax_advantaged_growth + taxable_growth

    def withdraw(self, amount: float) -> float:
        """
        Withdraw from taxable first, then tax-advantaged.

        Returns:
            Amount that could not be covered
        """
        if amount <= 0:
            return 0.0
        from_taxable = min(amount, self.taxable)
        self.taxable -= from_taxable
        remaining = amount - from_taxable
        from_tax_advantaged = min(remaining, self.tax_advantaged)
        self.tax_advantaged -= from_tax_advantaged
        self.taxable = max(0.0, self.taxable)
        self.tax_advantaged = max(0.0, self.tax_advantaged)
        return remaining - from_tax_advantaged
