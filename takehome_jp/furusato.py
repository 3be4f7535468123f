"""Furusato nozei (ふるさと納税) donation limit and the resulting tax reductions."""

import math
from dataclasses import dataclass

from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables
from takehome_jp.residence_tax import ResidenceTaxDetails
from takehome_jp.tax import calculate_national_income_tax

OUT_OF_POCKET_COST = 2_000  # 自己負担額
DONATION_BASIC_DEDUCTION_RATE = 0.1  # 住民税 基本分
SPECIAL_DEDUCTION_CAP_RATE = 0.2  # 特例分の上限（所得割額の20%）
DONATION_CAP_RATE = 0.3  # 寄附金控除の対象上限（総所得金額等の30%）

# 特例控除割合の判定に使う所得税の限界税率（課税総所得金額 − 人的控除額の差）
_SPECIAL_DEDUCTION_BRACKETS = (
    (1_950_000, 0.05),
    (3_300_000, 0.10),
    (6_950_000, 0.20),
    (9_000_000, 0.23),
    (18_000_000, 0.33),
    (40_000_000, 0.40),
    (float("inf"), 0.45),
)


@dataclass(frozen=True)
class FurusatoNozeiDetails:
    limit: int = 0
    income_tax_reduction: int = 0
    residence_tax_basic_deduction: float = 0
    residence_tax_special_deduction: int = 0
    residence_tax_reduction: int = 0
    out_of_pocket_cost: int = 0


NO_FURUSATO_NOZEI = FurusatoNozeiDetails()


def special_deduction_rate(adjusted_taxable_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> float:
    """特例控除割合 = 90% − 所得税の限界税率 × 1.021 (地方税法第37条の2)."""
    marginal = _SPECIAL_DEDUCTION_BRACKETS[-1][1]
    for upper, rate in _SPECIAL_DEDUCTION_BRACKETS:
        if adjusted_taxable_income <= upper:
            marginal = rate
            break
    return 1 - DONATION_BASIC_DEDUCTION_RATE - marginal * (1 + tables.reconstruction_surtax_rate)


def calculate_income_tax_reduction(
    taxable_income: float,
    deductible_donation: float,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> int:
    before = calculate_national_income_tax(math.floor(taxable_income / 1000) * 1000, tables)
    after = calculate_national_income_tax(math.floor((taxable_income - deductible_donation) / 1000) * 1000, tables)
    return before - after


def calculate_furusato_nozei_details(
    national_taxable_income: float,
    residence: ResidenceTaxDetails,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> FurusatoNozeiDetails:
    """Largest donation whose out-of-pocket cost stays at about 2,000 yen.

    ``national_taxable_income`` is the income-tax base before rounding to
    1,000 yen. The limit is where the residence-tax special deduction reaches
    20% of the income portion, bounded by 30% of residence taxable income.
    """
    if national_taxable_income <= 0 or residence.taxable_income <= 0:
        return NO_FURUSATO_NOZEI

    income_portion = residence.total - residence.per_capita_tax
    rate = special_deduction_rate(residence.taxable_income - residence.personal_deduction_difference, tables)

    raw_limit = income_portion * SPECIAL_DEDUCTION_CAP_RATE / rate + OUT_OF_POCKET_COST
    statutory_cap = residence.taxable_income * DONATION_CAP_RATE
    limit = math.floor(min(raw_limit, statutory_cap) / 1000) * 1000
    deductible = max(limit - OUT_OF_POCKET_COST, 0)

    income_tax_reduction = calculate_income_tax_reduction(national_taxable_income, deductible, tables)
    basic = deductible * DONATION_BASIC_DEDUCTION_RATE
    special_raw = deductible * rate
    special = (math.ceil(special_raw * residence.city_proportion)
               + math.ceil(special_raw * residence.prefectural_proportion))

    credit = basic + special
    city_before = residence.city.taxable_income * residence.residence_tax_rate - residence.city.adjustment_credit
    city_after = math.floor((city_before - math.ceil(credit * residence.city_proportion)) / 100) * 100
    pref_before = (residence.prefecture.taxable_income * residence.residence_tax_rate
                   - residence.prefecture.adjustment_credit)
    pref_after = math.floor((pref_before - math.ceil(credit * residence.prefectural_proportion)) / 100) * 100
    residence_reduction = residence.total - (city_after + pref_after + residence.per_capita_tax)

    return FurusatoNozeiDetails(
        limit=limit,
        income_tax_reduction=income_tax_reduction,
        residence_tax_basic_deduction=basic,
        residence_tax_special_deduction=special,
        residence_tax_reduction=residence_reduction,
        out_of_pocket_cost=limit - residence_reduction - income_tax_reduction,
    )
