"""Tests for national income tax calculation functions."""

import pytest
from takehome_jp.rates import RateTables
from takehome_jp.tax import (
    calculate_national_basic_deduction,
    calculate_national_income_tax,
    calculate_national_income_tax_base,
    calculate_reconstruction_surtax,
    calculate_taxable_income,
    marginal_income_tax_rate,
)


class TestNationalBasicDeduction:
    def test_low_income(self):
        """合計所得132万以下 → 95万"""
        assert calculate_national_basic_deduction(1_320_000) == 950_000

    def test_step_boundaries(self):
        assert calculate_national_basic_deduction(1_320_001) == 880_000
        assert calculate_national_basic_deduction(3_560_000) == 680_000
        assert calculate_national_basic_deduction(6_550_000) == 630_000
        assert calculate_national_basic_deduction(23_500_000) == 580_000

    def test_phase_out(self):
        assert calculate_national_basic_deduction(24_000_000) == 480_000
        assert calculate_national_basic_deduction(24_500_000) == 320_000
        assert calculate_national_basic_deduction(25_000_000) == 160_000
        assert calculate_national_basic_deduction(25_000_001) == 0


class TestTaxableIncome:
    def test_rounded_down_to_thousand(self):
        assert calculate_taxable_income(3_560_000, 721_464, 0, 680_000, 0) == 2_158_000

    def test_never_negative(self):
        assert calculate_taxable_income(500_000, 100_000, 0, 950_000, 380_000) == 0


class TestNationalIncomeTax:
    def test_zero(self):
        assert calculate_national_income_tax(0) == 0

    def test_lowest_bracket(self):
        """100万 × 5% = 5万、復興税込み51,050 → 51,000"""
        assert calculate_national_income_tax(1_000_000) == 51_000

    def test_bracket_boundary(self):
        assert calculate_national_income_tax(1_949_000) == 99_400

    def test_second_bracket(self):
        assert calculate_national_income_tax(2_158_000) == 120_700

    def test_fifth_bracket(self):
        """1,000万 × 33% − 153.6万 = 176.4万"""
        assert calculate_national_income_tax_base(10_000_000) == pytest.approx(1_764_000)
        assert calculate_national_income_tax(10_000_000) == 1_801_000

    def test_top_bracket(self):
        assert calculate_national_income_tax_base(50_000_000) == pytest.approx(50_000_000 * 0.45 - 4_796_000)

    def test_negative_taxable_clamped(self):
        assert calculate_national_income_tax_base(-100_000) == 0

    def test_surtax(self):
        assert calculate_reconstruction_surtax(100_000) == pytest.approx(2_100)

    def test_injected_surtax_rate(self):
        tables = RateTables(reconstruction_surtax_rate=0)
        assert calculate_national_income_tax(1_000_000, tables) == 50_000

    def test_monotonic(self):
        taxes = [calculate_national_income_tax(t) for t in range(0, 50_000_001, 100_000)]
        assert all(a <= b for a, b in zip(taxes, taxes[1:]))


class TestMarginalRate:
    def test_boundaries(self):
        assert marginal_income_tax_rate(1_949_000) == pytest.approx(0.05)
        assert marginal_income_tax_rate(1_950_000) == pytest.approx(0.10)
        assert marginal_income_tax_rate(40_000_000) == pytest.approx(0.45)
