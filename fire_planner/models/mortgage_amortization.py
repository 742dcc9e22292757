"""
Mortgage amortization calculations for FIRE projections.

The remaining balance for any year is derived in closed form from the annuity
present-value formula, so evaluating one year never walks the loan from
origination. Only the twelve months of the evaluation year are simulated.
"""

from pydantic import BaseModel, ConfigDict, Field

from .scenario import MortgageTerms


class MortgageYear(BaseModel):
    """Derived mortgage state for one calendar year."""

    model_config = ConfigDict(frozen=True)

    year: int
    opening_balance: float = Field(..., ge=0)
    interest: float = Field(..., ge=0, description="Interest accrued in the year")
    principal: float = Field(..., ge=0, description="Principal repaid in the year")
    closing_balance: float = Field(..., ge=0)
    payments: float = Field(..., ge=0, description="Total payments made in the year")

    @property
    def is_active(self) -> bool:
        return self.payments > 0


class MortgageCalculator:
    """Closed-form mortgage calculations."""

    @staticmethod
    def calculate_monthly_payment(
        principal: float, annual_rate: float, term_months: int
    ) -> float:
        """
        Calculate the level monthly payment using the standard formula.

        Args:
            principal: Loan principal amount
            annual_rate: Annual interest rate (as decimal, e.g., 0.0275)
            term_months: Loan term in months

        Returns:
            Monthly payment amount
        """
        if principal <= 0 or term_months <= 0:
            return 0.0
        monthly_rate = annual_rate / 12
        if monthly_rate <= 0:
            return principal / term_months
        growth = (1 + monthly_rate) ** term_months
        return principal * monthly_rate * growth / (growth - 1)

    @staticmethod
    def remaining_balance(payment: float, annual_rate: float, months: int) -> float:
        """
        Present value of the remaining level payments.

        Args:
            payment: Monthly payment
            annual_rate: Annual interest rate (decimal)
            months: Remaining number of payments

        Returns:
            Outstanding principal
        """
        if months <= 0 or payment <= 0:
            return 0.0
        monthly_rate = annual_rate / 12
        if monthly_rate <= 0:
            return payment * months
        return payment * (1 - (1 + monthly_rate) ** -months) / monthly_rate

    @staticmethod
    def monthly_payment(terms: MortgageTerms) -> float:
        """Payment from the terms, derived from the principal when not given."""
        if terms.monthly_payment is not None:
            return terms.monthly_payment
        return MortgageCalculator.calculate_monthly_payment(
            terms.original_principal or 0.0, terms.annual_rate, terms.term_months
        )

    @staticmethod
    def evaluate_year(terms: MortgageTerms, year: int) -> MortgageYear:
        """
        Derive the mortgage state for one year.

        No interest accrues before origination or at/after the payoff year.

        Args:
            terms: Loan terms
            year: Evaluation year

        Returns:
            MortgageYear with the interest and principal paid that year
        """
        remaining_months = (terms.payoff_year - year) * 12
        if year < terms.origination_year or remaining_months <= 0:
            return MortgageYear(
                year=year,
                opening_balance=0.0,
                interest=0.0,
                principal=0.0,
                closing_balance=0.0,
                payments=0.0,
            )

        payment = MortgageCalculator.monthly_payment(terms)
        monthly_rate = terms.annual_rate / 12
        opening = MortgageCalculator.remaining_balance(
            payment, terms.annual_rate, remaining_months
        )

        balance = opening
        interest_total = 0.0
        paid = 0.0
        for _ in range(12):
            if balance <= 0:
                break
            interest = balance * monthly_rate
            principal = min(payment - interest, balance)
            interest_total += interest
            paid += interest + principal
            balance -= principal

        balance = max(0.0, balance)
        return MortgageYear(
            year=year,
            opening_balance=opening,
            interest=interest_total,
            principal=max(0.0, opening - balance),
            closing_balance=balance,
            payments=paid,
        )

    @staticmethod
    def annual_interest(terms: MortgageTerms, year: int) -> float:
        """Interest accrued during ``year``."""
        return MortgageCalculator.evaluate_year(terms, year).interest
