"""
Tests for the education fund tracker.
"""

import pytest

from fire_planner.models.education_fund import EducationFundTracker
from fire_planner.models.scenario import Beneficiary, EducationSettings


def make_settings(**overrides):
    data = {
        "beneficiaries": [Beneficiary(name="kid", birth_year=2010)],
        "blackout_end_year": None,
        "cost_base_year": 2025,
    }
    data.update(overrides)
    return EducationSettings(**data)


class TestContributions:
    """Test capped contributions."""

    def test_full_contribution_when_savings_ample(self):
        """Test the scheduled amount is funded when savings allow."""
        tracker = EducationFundTracker(make_settings(), 0.0, 2060)
        result = tracker.advance_year(2025, 100000)
        assert result.contributions["kid"] == pytest.approx(9000)

    def test_contribution_capped_at_half_of_savings(self):
        """Test contributions are capped at half of positive savings."""
        tracker = EducationFundTracker(make_settings(), 0.0, 2060)
        result = tracker.advance_year(2025, 10000)
        assert result.total_contribution == pytest.approx(5000)

    def test_no_contribution_without_savings(self):
        """Test negative savings fund nothing."""
        tracker = EducationFundTracker(make_settings(), 0.0, 2060)
        result = tracker.advance_year(2025, -5000)
        assert result.total_contribution == 0.0

    def test_no_contribution_during_blackout(self):
        """Test the blackout window suppresses contributions."""
        settings = make_settings(blackout_end_year=2027)
        tracker = EducationFundTracker(settings, 0.0, 2060)
        assert tracker.advance_year(2027, 100000).total_contribution == 0.0
        assert tracker.advance_year(2028, 100000).total_contribution == pytest.approx(
            9000
        )

    def test_cap_apportioned_pro_rata(self):
        """Test a binding cap is shared in proportion to need."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(name="a", birth_year=2015, annual_contribution=6000),
                Beneficiary(name="b", birth_year=2018, annual_contribution=2000),
            ]
        )
        tracker = EducationFundTracker(settings, 0.0, 2060)
        result = tracker.advance_year(2025, 8000)
        assert result.contributions["a"] == pytest.approx(3000)
        assert result.contributions["b"] == pytest.approx(1000)

    def test_unborn_beneficiary_gets_nothing(self):
        """Test no contribution before the beneficiary is born."""
        settings = make_settings(beneficiaries=[Beneficiary(name="b", birth_year=2030)])
        tracker = EducationFundTracker(settings, 0.05, 2060)
        result = tracker.advance_year(2025, 100000)
        assert result.contributions["b"] == 0.0

    def test_cumulative_contributions_bounded(self):
        """Test cumulative contributions never exceed the per-year schedule."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(name="a", birth_year=2012),
                Beneficiary(name="b", birth_year=2020),
            ],
            blackout_end_year=2026,
        )
        tracker = EducationFundTracker(settings, 0.07, 2060)
        allowed = {"a": 0.0, "b": 0.0}
        for year in range(2025, 2061):
            for account in tracker.accounts:
                allowed[account.name] += tracker.scheduled_contribution(account, year)
            savings = 30000 if year % 3 else -10000
            tracker.advance_year(year, savings)
        for account in tracker.accounts:
            assert account.total_contributions <= allowed[account.name] + 1e-9


class TestCostsAndBalances:
    """Test costs, shortfalls and balances."""

    def test_growth_before_contribution(self):
        """Test the balance grows before the year's contribution is added."""
        settings = make_settings(
            beneficiaries=[Beneficiary(name="kid", birth_year=2015, initial_balance=1000)]
        )
        tracker = EducationFundTracker(settings, 0.10, 2060)
        result = tracker.advance_year(2025, 100000)
        assert result.balances["kid"] == pytest.approx(1100 + 9000)

    def test_cost_inflates_from_base_year(self):
        """Test college costs inflate at the education rate."""
        tracker = EducationFundTracker(make_settings(), 0.0, 2060)
        assert tracker.college_cost(18, 2028) == pytest.approx(40000 * 1.035**3)
        assert tracker.college_cost(17, 2027) == 0.0
        assert tracker.college_cost(22, 2032) == 0.0

    def test_shortfall_drawn_from_household(self):
        """Test costs beyond the balance are reported as a shortfall."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(
                    name="kid",
                    birth_year=2007,
                    initial_balance=10000,
                    annual_contribution=0,
                )
            ]
        )
        tracker = EducationFundTracker(settings, 0.0, 2060)
        result = tracker.advance_year(2025, 0)
        assert result.costs["kid"] == pytest.approx(40000)
        assert result.shortfall == pytest.approx(30000)
        assert result.balances["kid"] == 0.0

    def test_cost_paid_from_account(self):
        """Test costs are paid from a sufficient balance."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(
                    name="kid",
                    birth_year=2007,
                    initial_balance=100000,
                    annual_contribution=0,
                )
            ]
        )
        tracker = EducationFundTracker(settings, 0.0, 2060)
        result = tracker.advance_year(2025, 0)
        assert result.shortfall == 0.0
        assert result.balances["kid"] == pytest.approx(60000)

    def test_account_freezes_after_ceiling(self):
        """Test no growth, funding or debits after aging out."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(name="kid", birth_year=2000, initial_balance=5000)
            ]
        )
        tracker = EducationFundTracker(settings, 0.10, 2060)
        result = tracker.advance_year(2025, 100000)
        assert result.balances["kid"] == 5000
        assert result.costs["kid"] == 0.0
        assert result.contributions["kid"] == 0.0

    def test_balances_never_negative(self):
        """Test balances stay non-negative across a full horizon."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(name="a", birth_year=2008),
                Beneficiary(name="b", birth_year=2021),
            ]
        )
        tracker = EducationFundTracker(settings, 0.05, 2070)
        for year in range(2025, 2071):
            result = tracker.advance_year(year, 15000)
            assert all(balance >= 0 for balance in result.balances.values())


class TestForwardReserve:
    """Test the forward-looking education reserve."""

    def test_reserve_covers_unfunded_costs(self):
        """Test the reserve equals future costs when nothing is saved."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(name="kid", birth_year=2010, annual_contribution=0)
            ],
            cost_inflation=0.0,
        )
        tracker = EducationFundTracker(settings, 0.0, 2060)
        # Ages 18-21 fall in 2028-2031, all after 2025
        assert tracker.forward_reserve(2025) == pytest.approx(4 * 40000)

    def test_reserve_excludes_current_year(self):
        """Test the current year's cost is not counted again."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(name="kid", birth_year=2007, annual_contribution=0)
            ],
            cost_inflation=0.0,
        )
        tracker = EducationFundTracker(settings, 0.0, 2060)
        assert tracker.forward_reserve(2025) == pytest.approx(3 * 40000)

    def test_reserve_nets_projected_balance(self):
        """Test projected balances reduce the reserve."""
        settings = make_settings(
            beneficiaries=[
                Beneficiary(
                    name="kid",
                    birth_year=2010,
                    initial_balance=50000,
                    annual_contribution=0,
                )
            ],
            cost_inflation=0.0,
        )
        tracker = EducationFundTracker(settings, 0.0, 2060)
        assert tracker.forward_reserve(2025) == pytest.approx(160000 - 50000)

    def test_reserve_limited_to_horizon(self):
        """Test costs past the horizon end are ignored."""
        settings = make_settings(
            beneficiaries=[Beneficiary(name="kid", birth_year=2100)]
        )
        tracker = EducationFundTracker(settings, 0.05, 2087)
        assert tracker.forward_reserve(2025) == 0.0

    def test_reserve_zero_after_ceiling(self):
        """Test aged-out beneficiaries need no reserve."""
        settings = make_settings(beneficiaries=[Beneficiary(name="kid", birth_year=1990)])
        tracker = EducationFundTracker(settings, 0.05, 2087)
        assert tracker.forward_reserve(2025) == 0.0
