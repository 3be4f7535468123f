"""Tests for the take-home calculation pipeline."""

import pytest
from takehome_jp.calculator import TakeHomeInputs, TakeHomeResults, calculate_taxes
from takehome_jp.dependents import Dependent
from takehome_jp.health_insurance import (
    DEPENDENT_COVERAGE_ID,
    NATIONAL_HEALTH_INSURANCE_ID,
    calculate_nhi_breakdown,
)
from takehome_jp.income import (
    BonusIncome,
    BusinessIncome,
    CommutingAllowance,
    SalaryIncome,
    StockCompensation,
)
from takehome_jp.rates import RateTables


def _inputs(salary=5_000_000, *extra, **kwargs):
    streams = [SalaryIncome(amount=salary)] if salary else []
    return TakeHomeInputs(
        income_streams=[*streams, *extra],
        health_insurance_provider=kwargs.pop("provider", "KyokaiKenpo"),
        region=kwargs.pop("region", "Tokyo"),
        **kwargs,
    )


class TestGolden:
    """給与500万・協会けんぽ東京・介護なし"""

    def setup_method(self):
        self.r = calculate_taxes(_inputs())

    def test_income(self):
        assert self.r.annual_income == 5_000_000
        assert self.r.net_employment_income == 3_560_000
        assert self.r.total_net_income == 3_560_000
        assert self.r.has_employment_income

    def test_social_insurance(self):
        assert self.r.health_insurance == 243_780
        assert self.r.pension == 450_180
        assert self.r.employment_insurance == 27_504
        assert self.r.social_insurance_total == 721_464

    def test_national_tax(self):
        assert self.r.national_basic_deduction == 680_000
        assert self.r.national_taxable_income == 2_158_000
        assert self.r.national_income_tax_base == pytest.approx(118_300)
        assert self.r.reconstruction_surtax == pytest.approx(118_300 * 0.021)
        assert self.r.national_income_tax == 120_700

    def test_residence_tax(self):
        assert self.r.residence_basic_deduction == 430_000
        assert self.r.residence_taxable_income == 2_408_000
        assert self.r.residence_tax.city.income_tax == 142_900
        assert self.r.residence_tax.prefecture.income_tax == 95_300
        assert self.r.residence_tax.total == 243_200

    def test_take_home(self):
        assert self.r.take_home_income == 3_914_636
        assert self.r.take_home_income == self.r.annual_income - self.r.total_burden

    def test_furusato(self):
        assert self.r.furusato_nozei.limit == 61_000
        assert self.r.furusato_nozei.out_of_pocket_cost == 2_000

    def test_context_echoed(self):
        assert self.r.health_insurance_provider == "KyokaiKenpo"
        assert self.r.region == "Tokyo"
        assert self.r.salary_income == 5_000_000
        assert self.r.monthly_remuneration == pytest.approx(5_000_000 / 12)


class TestDefaults:
    def test_no_income(self):
        r = calculate_taxes(TakeHomeInputs())
        assert r == TakeHomeResults()
        assert r.take_home_income == 0
        assert not r.has_employment_income
        assert r.net_employment_income is None

    def test_no_income_keeps_context(self):
        r = calculate_taxes(TakeHomeInputs(region="Osaka", is_subject_to_ltc=True))
        assert r.region == "Osaka"
        assert r.is_subject_to_ltc
        assert r.total_burden == 0

    def test_idempotent(self):
        inputs = _inputs(5_000_000, BonusIncome(500_000, 5), dependents=[Dependent("spouse", "under70")])
        assert calculate_taxes(inputs) == calculate_taxes(inputs)

    def test_inputs_not_mutated(self):
        streams = [SalaryIncome(amount=5_000_000), BonusIncome(500_000, 11), BonusIncome(500_000, 5)]
        inputs = TakeHomeInputs(income_streams=list(streams))
        calculate_taxes(inputs)
        assert inputs.income_streams == streams


class TestBonuses:
    def test_zero_bonus_has_no_effect(self):
        base = calculate_taxes(_inputs())
        with_zero = calculate_taxes(_inputs(5_000_000, BonusIncome(0, 5)))
        assert with_zero.take_home_income == base.take_home_income
        assert with_zero.social_insurance_total == base.social_insurance_total
        assert with_zero.national_income_tax == base.national_income_tax

    def test_zero_bonus_alone_is_not_employment(self):
        r = calculate_taxes(_inputs(0, BonusIncome(0, 5), BusinessIncome(3_000_000), provider=NATIONAL_HEALTH_INSURANCE_ID))
        assert not r.has_employment_income
        assert r.employment_insurance == 0

    def test_bonus_portions(self):
        r = calculate_taxes(_inputs(5_000_000, BonusIncome(1_000_000, 5)))
        assert r.annual_income == 6_000_000
        assert r.health_insurance_on_bonus == 49_550
        assert r.pension_on_bonus == 91_500
        assert r.employment_insurance_on_bonus == 5_500


class TestProviders:
    def test_national_health_insurance(self):
        r = calculate_taxes(_inputs(provider=NATIONAL_HEALTH_INSURANCE_ID))
        assert r.health_insurance == calculate_nhi_breakdown(3_560_000, False, "Tokyo").total
        assert r.nhi_breakdown.total == r.health_insurance
        assert r.pension == 210_120
        assert r.employment_insurance == 27_504

    def test_dependent_coverage(self):
        r = calculate_taxes(_inputs(1_000_000, provider=DEPENDENT_COVERAGE_ID))
        assert r.health_insurance == 0
        assert r.pension == 0
        assert r.employment_insurance > 0

    def test_ltc_increases_health(self):
        r = calculate_taxes(_inputs(is_subject_to_ltc=True))
        assert r.health_insurance == 282_900


class TestDeductions:
    def test_manual_social_insurance(self):
        r = calculate_taxes(_inputs(manual_social_insurance_entry=True, manual_social_insurance_amount=500_000))
        assert r.health_insurance == 0
        assert r.social_insurance_total == 500_000
        assert r.social_insurance_override == 500_000
        assert r.national_taxable_income == 2_380_000

    def test_manual_zero_is_honored(self):
        r = calculate_taxes(_inputs(manual_social_insurance_entry=True, manual_social_insurance_amount=0))
        assert r.social_insurance_total == 0

    def test_ideco(self):
        """iDeCo 2.3万/月 → 課税所得が27.6万減る"""
        r = calculate_taxes(_inputs(dc_plan_contributions=276_000))
        assert r.national_taxable_income == 1_882_000
        assert r.dc_plan_contributions == 276_000

    def test_spouse_deduction(self):
        r = calculate_taxes(_inputs(dependents=[Dependent("spouse", "under70")]))
        assert r.dependent_deductions.national.total == 380_000
        assert r.national_taxable_income == 2_158_000 - 380_000
        assert r.residence_taxable_income == 2_408_000 - 330_000

    def test_low_income_no_tax(self):
        r = calculate_taxes(_inputs(1_000_000))
        assert r.national_taxable_income == 0
        assert r.national_income_tax == 0
        assert r.national_income_tax_base is None
        assert r.reconstruction_surtax is None


class TestOtherIncome:
    def test_business_only(self):
        r = calculate_taxes(_inputs(0, BusinessIncome(3_000_000, 650_000), provider=NATIONAL_HEALTH_INSURANCE_ID))
        assert r.annual_income == 3_000_000
        assert r.total_net_income == 2_350_000
        assert r.blue_filer_deduction == 650_000
        assert r.net_employment_income is None
        assert r.employment_insurance == 0
        assert r.pension == 210_120

    def test_commuting_allowance(self):
        """通勤手当は標準報酬月額に含むが課税所得には含まない"""
        r = calculate_taxes(_inputs(5_000_000, CommutingAllowance(20_000, "monthly")))
        assert r.annual_income == 5_000_000
        assert r.commuting_allowance == 240_000
        assert r.health_insurance == 261_624
        assert r.pension == 483_120
        assert r.employment_insurance == 27_504

    def test_stock_compensation_excluded(self):
        base = calculate_taxes(_inputs())
        r = calculate_taxes(_inputs(5_000_000, StockCompensation(2_000_000)))
        assert r.annual_income == base.annual_income
        assert r.take_home_income == base.take_home_income


class TestRateTables:
    def test_injected_tables(self):
        tables = RateTables(employment_insurance_rate=0)
        r = calculate_taxes(_inputs(), tables)
        assert r.employment_insurance == 0
        assert r.social_insurance_total == 243_780 + 450_180


class TestMonotonic:
    def test_take_home_increases_with_salary(self):
        take_homes = [calculate_taxes(_inputs(s)).take_home_income for s in range(1_000_000, 30_000_001, 500_000)]
        assert all(a < b for a, b in zip(take_homes, take_homes[1:]))
