"""Tests for furusato nozei limit calculation."""

import pytest
from takehome_jp.furusato import (
    NO_FURUSATO_NOZEI,
    calculate_furusato_nozei_details,
    calculate_income_tax_reduction,
    special_deduction_rate,
)
from takehome_jp.residence_tax import NON_TAXABLE_RESIDENCE_TAX_DETAIL, calculate_residence_tax


class TestSpecialDeductionRate:
    def test_10_percent_bracket(self):
        """90% − 10% × 1.021 = 79.79%"""
        assert special_deduction_rate(2_358_000) == pytest.approx(0.7979)

    def test_lowest_bracket(self):
        assert special_deduction_rate(1_000_000) == pytest.approx(0.84895)

    def test_top_bracket(self):
        assert special_deduction_rate(50_000_000) == pytest.approx(0.9 - 0.45 * 1.021)


class TestFurusatoNozei:
    def setup_method(self):
        # 給与500万・協会けんぽ東京: 社会保険料 721,464円
        self.residence = calculate_residence_tax(3_560_000, 721_464)
        self.details = calculate_furusato_nozei_details(2_158_536, self.residence)

    def test_limit(self):
        assert self.residence.total == 243_200
        assert self.details.limit == 61_000

    def test_reductions(self):
        assert self.details.income_tax_reduction == 6_000
        assert self.details.residence_tax_reduction == 53_000

    def test_residence_credit_parts(self):
        assert self.details.residence_tax_basic_deduction == pytest.approx(5_900)
        assert self.details.residence_tax_special_deduction == 47_077

    def test_out_of_pocket(self):
        """上限額まで寄附すれば自己負担は2,000円"""
        assert self.details.out_of_pocket_cost == 2_000

    def test_limit_rounded_to_thousand(self):
        assert self.details.limit % 1000 == 0


class TestNoFurusato:
    def test_no_national_tax(self):
        residence = calculate_residence_tax(3_560_000, 721_464)
        assert calculate_furusato_nozei_details(0, residence) is NO_FURUSATO_NOZEI

    def test_residence_non_taxable(self):
        assert calculate_furusato_nozei_details(1_000_000, NON_TAXABLE_RESIDENCE_TAX_DETAIL) is NO_FURUSATO_NOZEI

    def test_default_values(self):
        assert NO_FURUSATO_NOZEI.limit == 0
        assert NO_FURUSATO_NOZEI.out_of_pocket_cost == 0


class TestIncomeTaxReduction:
    def test_reduction(self):
        assert calculate_income_tax_reduction(2_158_536, 59_000) == 120_700 - 114_700

    def test_zero_donation(self):
        assert calculate_income_tax_reduction(2_158_536, 0) == 0
