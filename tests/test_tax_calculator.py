"""
Tests for the household tax calculator.
"""

import pytest

from fire_planner.models.scenario import AboveTheLineAllowance, TaxBracket, TaxSettings
from fire_planner.models.tax_calculator import TaxCalculator, progressive_tax
from fire_planner.models.time_grid import InflationAdjuster


@pytest.fixture
def inflation():
    return InflationAdjuster(inflation_rate=0.03, base_year=2025)


@pytest.fixture
def calculator(inflation):
    return TaxCalculator(TaxSettings(), inflation)


class TestProgressiveTax:
    """Test bracket integration."""

    BRACKETS = [
        TaxBracket(upper_limit=10000, rate=0.10),
        TaxBracket(upper_limit=40000, rate=0.20),
        TaxBracket(rate=0.30),
    ]

    def test_zero_income(self):
        """Test that zero income yields zero tax."""
        assert progressive_tax(0.0, self.BRACKETS, 1.0) == 0.0

    def test_negative_income(self):
        """Test that negative income yields zero tax."""
        assert progressive_tax(-5000.0, self.BRACKETS, 1.0) == 0.0

    def test_within_first_bracket(self):
        """Test income inside the first bracket."""
        assert progressive_tax(5000.0, self.BRACKETS, 1.0) == pytest.approx(500.0)

    def test_spanning_brackets(self):
        """Test income spanning every bracket."""
        # 10000 * 0.1 + 30000 * 0.2 + 10000 * 0.3
        assert progressive_tax(50000.0, self.BRACKETS, 1.0) == pytest.approx(10000.0)

    def test_at_bracket_boundary(self):
        """Test income exactly at a bracket ceiling."""
        assert progressive_tax(40000.0, self.BRACKETS, 1.0) == pytest.approx(7000.0)

    def test_inflated_thresholds(self):
        """Test that bracket ceilings scale with the inflation factor."""
        # Ceilings become 20000 and 80000
        assert progressive_tax(50000.0, self.BRACKETS, 2.0) == pytest.approx(8000.0)


class TestTaxCalculator:
    """Test TaxCalculator."""

    def test_zero_income_yields_zero_everything(self, calculator):
        """Test that zero income yields zero for every component."""
        result = calculator.calculate(2025)
        assert result.federal == 0.0
        assert result.state == 0.0
        assert result.social_security == 0.0
        assert result.medicare == 0.0
        assert result.additional_medicare == 0.0
        assert result.total == 0.0
        assert result.effective_rate == 0.0

    def test_base_year_allowances(self, calculator):
        """Test the base-year allowance total uses the stepped base amount."""
        assert calculator.allowances(2025) == pytest.approx(8550 + 5000)

    def test_stepped_allowance_after_base_year(self, calculator):
        """Test the stepped allowance inflates only from the following year."""
        assert calculator.allowances(2026) == pytest.approx(8550 * 1.03 + 7500)
        assert calculator.allowances(2027) == pytest.approx(
            8550 * 1.03**2 + 7500 * 1.03
        )

    def test_deduction_takes_larger_option(self, inflation):
        """Test that the larger of standard and itemized deductions is used."""
        calculator = TaxCalculator(
            TaxSettings(standard_deduction=29200, itemized_deductions=40000), inflation
        )
        assert calculator.deduction(2025) == pytest.approx(40000)
        assert calculator.deduction(2026) == pytest.approx(41200)

    def test_taxable_income(self, calculator):
        """Test taxable income after allowances and the deduction."""
        result = calculator.calculate(2025, primary_wages=100000)
        assert result.taxable_income == pytest.approx(100000 - 13550 - 29200)

    def test_income_below_deductions_has_no_income_tax(self, calculator):
        """Test that income below deductions yields no income tax."""
        result = calculator.calculate(2025, primary_wages=20000)
        assert result.taxable_income == 0.0
        assert result.federal == 0.0
        assert result.state == 0.0
        assert result.payroll > 0.0

    def test_social_security_wage_base_cap(self, calculator):
        """Test social security tax is capped per earner at the wage base."""
        result = calculator.calculate(2025, primary_wages=300000, spouse_wages=50000)
        assert result.social_security == pytest.approx(0.062 * (168600 + 50000))

    def test_wage_base_grows(self, calculator):
        """Test the wage base grows geometrically from the base year."""
        assert calculator.wage_base(2027) == pytest.approx(168600 * 1.04**2)

    def test_medicare_and_surtax(self, calculator):
        """Test medicare on all wages and the surtax above the threshold."""
        result = calculator.calculate(2025, primary_wages=200000, spouse_wages=150000)
        assert result.medicare == pytest.approx(0.0145 * 350000)
        assert result.additional_medicare == pytest.approx(0.009 * 100000)

    def test_benefit_income_fully_taxable_and_not_payroll(self, calculator):
        """Test benefit income is taxed as income but not as wages."""
        result = calculator.calculate(2025, benefit_income=100000)
        assert result.taxable_income == pytest.approx(100000 - 13550 - 29200)
        assert result.payroll == 0.0
        assert result.federal > 0.0

    def test_passive_loss_reduces_taxable_income(self, calculator):
        """Test that a passive loss offsets other income."""
        with_loss = calculator.calculate(
            2025, primary_wages=200000, passive_income=-10000
        )
        without = calculator.calculate(2025, primary_wages=200000)
        assert with_loss.taxable_income == pytest.approx(without.taxable_income - 10000)

    def test_federal_known_value(self, inflation):
        """Test federal tax against a hand-computed value."""
        settings = TaxSettings(allowances=[], standard_deduction=0)
        calculator = TaxCalculator(settings, inflation)
        result = calculator.calculate(2025, passive_income=100000)
        expected = 23200 * 0.10 + (94300 - 23200) * 0.12 + (100000 - 94300) * 0.22
        assert result.federal == pytest.approx(expected)

    def test_effective_rate_consistent(self, calculator):
        """Test the effective rate equals total tax over total income."""
        result = calculator.calculate(2030, primary_wages=250000, spouse_wages=180000)
        assert result.effective_rate == pytest.approx(result.total / 430000)

    @pytest.mark.parametrize(
        "income", [0, 1, 5000, 42750, 100000, 250000, 750000, 2500000, 10000000]
    )
    def test_tax_bounds(self, calculator, income):
        """Test non-negative tax and an effective rate in [0, 1)."""
        result = calculator.calculate(
            2040, primary_wages=income * 0.6, spouse_wages=income * 0.4
        )
        assert result.total >= 0
        assert 0 <= result.effective_rate < 1

    def test_custom_allowance_without_step(self, inflation):
        """Test an allowance inflated from the base year."""
        settings = TaxSettings(
            allowances=[AboveTheLineAllowance(name="hsa", amount=1000)]
        )
        calculator = TaxCalculator(settings, inflation)
        assert calculator.allowances(2025) == pytest.approx(1000)
        assert calculator.allowances(2026) == pytest.approx(1030)
