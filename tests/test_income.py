"""Tests for income streams and net income calculation."""

import pytest
from takehome_jp.errors import NegativeBusinessIncomeError, UnsupportedConfigurationError, ValidationError
from takehome_jp.income import (
    BonusIncome,
    BusinessIncome,
    CommutingAllowance,
    MiscellaneousIncome,
    SalaryIncome,
    StockCompensation,
    calculate_income_breakdown,
    calculate_net_employment_income,
    calculate_total_net_income,
    monthly_remuneration,
)


class TestNetEmploymentIncome:
    def test_below_minimum(self):
        """65.1万未満 → 給与所得0"""
        assert calculate_net_employment_income(650_000) == 0
        assert calculate_net_employment_income(0) == 0

    def test_flat_deduction_band(self):
        """190万未満 → 収入 − 65万"""
        assert calculate_net_employment_income(651_000) == 1_000
        assert calculate_net_employment_income(1_899_999) == 1_249_999

    def test_70_percent_band(self):
        """190万以上360万以下 → 4千円未満切り捨て×70% − 8万"""
        assert calculate_net_employment_income(1_900_000) == 1_250_000
        assert calculate_net_employment_income(3_600_000) == 2_440_000

    def test_4000_yen_rounding(self):
        assert calculate_net_employment_income(3_003_999) == calculate_net_employment_income(3_000_000)

    def test_80_percent_band(self):
        """360万超660万以下 → ×80% − 44万"""
        assert calculate_net_employment_income(5_000_000) == 3_560_000
        assert calculate_net_employment_income(6_600_000) == 4_840_000

    def test_90_percent_band(self):
        assert calculate_net_employment_income(8_500_000) == 6_550_000

    def test_cap_band(self):
        """850万超 → 給与所得控除195万で頭打ち"""
        assert calculate_net_employment_income(10_000_000) == 8_050_000


class TestIncomeBreakdown:
    def setup_method(self):
        self.streams = [
            SalaryIncome(amount=300_000, frequency="monthly"),
            BonusIncome(amount=500_000, month=5),
            BonusIncome(amount=700_000, month=11),
            BusinessIncome(amount=1_000_000, blue_filer_deduction=650_000),
            MiscellaneousIncome(amount=100_000),
            CommutingAllowance(amount=30_000, frequency="3-months"),
            StockCompensation(amount=2_000_000),
        ]

    def test_salary_annualized(self):
        assert calculate_income_breakdown(self.streams).salary_income == 3_600_000

    def test_bonuses_kept(self):
        b = calculate_income_breakdown(self.streams)
        assert b.bonus_total == 1_200_000
        assert [x.month for x in b.bonuses] == [5, 11]

    def test_business_and_misc(self):
        b = calculate_income_breakdown(self.streams)
        assert b.net_business_and_misc_income_before_deduction == 1_100_000
        assert b.net_business_and_misc_income == 450_000
        assert b.blue_filer_deduction == 650_000

    def test_commuting_excluded_from_total(self):
        b = calculate_income_breakdown(self.streams)
        assert b.commuting_allowance == 120_000
        assert b.total_annual_income == 3_600_000 + 1_200_000 + 1_100_000

    def test_blue_filer_limited_to_income(self):
        b = calculate_income_breakdown([BusinessIncome(amount=300_000, blue_filer_deduction=650_000)])
        assert b.blue_filer_deduction == 300_000
        assert b.net_business_and_misc_income == 0

    def test_second_business_rejected(self):
        with pytest.raises(ValidationError, match="Only one business"):
            calculate_income_breakdown([BusinessIncome(amount=1), BusinessIncome(amount=2)])

    def test_negative_business_rejected(self):
        with pytest.raises(NegativeBusinessIncomeError, match="losses"):
            calculate_income_breakdown([BusinessIncome(amount=-1)])

    def test_negative_misc_rejected(self):
        with pytest.raises(ValidationError, match="Miscellaneous"):
            calculate_income_breakdown([MiscellaneousIncome(amount=-1)])

    def test_total_net_income(self):
        """給与所得(480万) + 事業・雑所得(45万)"""
        net_employment = calculate_net_employment_income(4_800_000)
        assert calculate_total_net_income(self.streams) == net_employment + 450_000

    def test_monthly_remuneration_includes_commuting(self):
        b = calculate_income_breakdown(self.streams)
        assert monthly_remuneration(b) == pytest.approx((3_600_000 + 120_000) / 12)


class TestStreamValidation:
    def test_commuting_frequencies(self):
        assert CommutingAllowance(10_000, "monthly").annual_amount == 120_000
        assert CommutingAllowance(60_000, "6-months").annual_amount == 120_000
        assert CommutingAllowance(120_000, "annual").annual_amount == 120_000

    def test_unknown_salary_frequency(self):
        with pytest.raises(ValidationError, match="frequency"):
            SalaryIncome(amount=1, frequency="weekly")

    def test_bonus_month_range(self):
        with pytest.raises(ValidationError, match="0-11"):
            BonusIncome(amount=1, month=12)

    def test_negative_salary_rejected(self):
        with pytest.raises(ValidationError, match="Salary amount"):
            SalaryIncome(amount=-100_000, frequency="monthly")

    def test_negative_bonus_rejected(self):
        with pytest.raises(ValidationError, match="Bonus amount"):
            BonusIncome(amount=-1_000_000, month=5)

    def test_negative_commuting_rejected(self):
        with pytest.raises(ValidationError, match="Commuting allowance"):
            CommutingAllowance(amount=-1, frequency="monthly")

    def test_zero_amounts_allowed(self):
        assert SalaryIncome(amount=0).annual_amount == 0
        assert BonusIncome(amount=0, month=0).amount == 0
        assert CommutingAllowance(amount=0).annual_amount == 0

    def test_blue_filer_deduction_values(self):
        with pytest.raises(ValidationError, match="blue filer"):
            BusinessIncome(amount=1_000_000, blue_filer_deduction=300_000)

    def test_domestic_stock_compensation_rejected(self):
        with pytest.raises(UnsupportedConfigurationError, match="domestic"):
            StockCompensation(amount=1, issuer_domicile="domestic")
