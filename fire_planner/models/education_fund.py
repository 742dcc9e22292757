"""
Education savings accounts for FIRE projections.

Each beneficiary has an account that grows and receives contributions while the
beneficiary is between birth and the configured age ceiling. College costs are
paid from the account first; any shortfall is drawn from the household and
reported. Once the beneficiary ages out the account freezes: it is neither
grown, funded, debited nor liquidated, and any leftover is reported as potential
overfunding at the end of the horizon.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .scenario import Beneficiary, EducationSettings
from .time_grid import compound


class EducationAccount(BaseModel):
    """Working balance of one beneficiary's education account."""

    beneficiary: Beneficiary = Field(..., description="Account owner")
    balance: float = Field(..., ge=0, description="Current balance")
    total_contributions: float = Field(
        default=0.0, ge=0, description="Cumulative contributions"
    )

    @property
    def name(self) -> str:
        return self.beneficiary.name

    def age(self, year: int) -> int:
        return year - self.beneficiary.birth_year

    def is_active(self, year: int, age_ceiling: int) -> bool:
        """Active from birth until the age ceiling (exclusive)."""
        return 0 <= self.age(year) < age_ceiling


class EducationYear(BaseModel):
    """Education fund activity for one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    contributions: Dict[str, float] = Field(default_factory=dict)
    costs: Dict[str, float] = Field(default_factory=dict)
    balances: Dict[str, float] = Field(default_factory=dict)
    shortfall: float = Field(default=0.0, ge=0, description="Costs paid by household")

    @property
    def total_contribution(self) -> float:
        return sum(self.contributions.values())

    @property
    def total_cost(self) -> float:
        return sum(self.costs.values())

    @property
    def total_balance(self) -> float:
        return sum(self.balances.values())


class EducationFundTracker:
    """Tracks every beneficiary's account across a projection."""

    def __init__(
        self, settings: EducationSettings, return_rate: float, end_year: int
    ):
        self.settings = settings
        self.return_rate = return_rate
        self.end_year = end_year
        self.accounts: List[EducationAccount] = [
            EducationAccount(beneficiary=b, balance=b.initial_balance)
            for b in settings.beneficiaries
        ]

    def college_cost(self, age: int, year: int) -> float:
        """Cost for a beneficiary of ``age`` in ``year``; zero outside college."""
        if age < 0 or not self.settings.in_college(age):
            return 0.0
        return compound(
            self.settings.annual_cost,
            self.settings.cost_inflation,
            year - self.settings.cost_base_year,
        )

    def scheduled_contribution(self, account: EducationAccount, year: int) -> float:
        """Uncapped contribution planned for an account in ``year``."""
        if not account.is_active(year, self.settings.age_ceiling):
            return 0.0
        if self.settings.in_blackout(year):
            return 0.0
        return account.beneficiary.annual_contribution

    def advance_year(
        self, year: int, net_savings_before_education: float
    ) -> EducationYear:
        """
        Grow, fund and debit every account for one year.

        Args:
            year: Calendar year
            net_savings_before_education: Household savings available this year

        Returns:
            EducationYear with contributions, costs, closing balances and shortfall
        """
        ceiling = self.settings.age_ceiling

        for account in self.accounts:
            if account.is_active(year, ceiling):
                account.balance *= 1 + self.return_rate

        needs = {a.name: self.scheduled_contribution(a, year) for a in self.accounts}
        total_need = sum(needs.values())
        available = self.settings.contribution_cap_fraction * max(
            0.0, net_savings_before_education
        )
        funded = min(total_need, available)

        contributions: Dict[str, float] = {}
        for account in self.accounts:
            share = needs[account.name] / total_need if total_need > 0 else 0.0
            amount = funded * share
            account.balance += amount
            account.total_contributions += amount
            contributions[account.name] = amount

        costs: Dict[str, float] = {}
        shortfall = 0.0
        for account in self.accounts:
            cost = self.college_cost(account.age(year), year)
            costs[account.name] = cost
            if cost <= 0:
                continue
            if account.balance >= cost:
                account.balance -= cost
            else:
                shortfall += cost - account.balance
                account.balance = 0.0

        return EducationYear(
            year=year,
            contributions=contributions,
            costs=costs,
            balances={a.name: a.balance for a in self.accounts},
            shortfall=shortfall,
        )

    def forward_reserve(self, year: int) -> float:
        """
        Future college costs not covered by projected account balances.

        Each beneficiary under the age ceiling is projected over the years after
        ``year`` up to the horizon end: the balance grows and receives scheduled
        contributions while the beneficiary is active, and costs are summed.

        Args:
            year: Current projection year (already settled)

        Returns:
            Sum over beneficiaries of max(0, future costs - projected balance)
        """
        ceiling = self.settings.age_ceiling
        reserve = 0.0
        for account in self.accounts:
            if account.age(year) >= ceiling:
                continue
            balance = account.balance
            costs = 0.0
            for future_year in range(year + 1, self.end_year + 1):
                age = account.age(future_year)
                if age >= ceiling:
                    break
                costs += self.college_cost(age, future_year)
                if age >= 0:
                    balance = balance * (1 + self.return_rate) + (
                        self.scheduled_contribution(account, future_year)
                    )
            reserve += max(0.0, costs - balance)
        return reserve

    def total_balance(self) -> float:
        return sum(a.balance for a in self.accounts)
