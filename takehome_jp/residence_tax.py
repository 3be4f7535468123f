"""Residence tax (住民税: 市町村民税 + 道府県民税)."""

import math
from dataclasses import dataclass, field

from takehome_jp.dependents import (
    DependentDeductionResults,
    calculate_personal_deduction_difference,
    count_non_taxable_dependents,
)
from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables, lookup_step

CITY_PROPORTION = 0.6
PREFECTURAL_PROPORTION = 0.4
RESIDENCE_TAX_RATE = 0.1
CITY_INCOME_RATE = 0.06
PREFECTURAL_INCOME_RATE = 0.04

CITY_PER_CAPITA_TAX = 3_000
PREFECTURAL_PER_CAPITA_TAX = 1_000
FOREST_ENVIRONMENT_TAX = 1_000  # 森林環境税（国税、住民税均等割と併せて徴収）

# 非課税限度額（1級地）
NON_TAXABLE_FLOOR = 450_000  # 単身者
_PER_CAPITA_BASE = 350_000
_PER_CAPITA_ADDITION = 100_000
_PER_CAPITA_DEPENDENT_ADDITION = 210_000
_INCOME_PORTION_DEPENDENT_ADDITION = 320_000

BASIC_DEDUCTION_DIFFERENCE = 50_000  # 基礎控除の人的控除額の差
ADJUSTMENT_CREDIT_INCOME_LIMIT = 25_000_000
_ADJUSTMENT_CREDIT_THRESHOLD = 2_000_000
_ADJUSTMENT_CREDIT_RATE = 0.05


@dataclass(frozen=True)
class CityResidenceTax:
    taxable_income: float = 0
    adjustment_credit: float = 0
    income_tax: int = 0
    per_capita_tax: int = 0


@dataclass(frozen=True)
class PrefecturalResidenceTax:
    taxable_income: float = 0
    adjustment_credit: float = 0
    income_tax: int = 0
    per_capita_tax: int = 0


@dataclass(frozen=True)
class ResidenceTaxDetails:
    taxable_income: int = 0  # 課税標準額
    city_proportion: float = CITY_PROPORTION
    prefectural_proportion: float = PREFECTURAL_PROPORTION
    residence_tax_rate: float = RESIDENCE_TAX_RATE
    basic_deduction: int = 0
    personal_deduction_difference: int = 0
    city: CityResidenceTax = field(default_factory=CityResidenceTax)
    prefecture: PrefecturalResidenceTax = field(default_factory=PrefecturalResidenceTax)
    per_capita_tax: int = 0
    forest_environment_tax: int = 0
    total: int = 0

    @property
    def income_portion(self) -> int:
        """所得割 (city + prefecture)."""
        return self.city.income_tax + self.prefecture.income_tax


NON_TAXABLE_RESIDENCE_TAX_DETAIL = ResidenceTaxDetails()


def calculate_residence_basic_deduction(net_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> int:
    """Residence tax basic deduction: 43万 up to 2,400万, phased out to zero above 2,500万."""
    return lookup_step(tables.residence_basic_deductions, net_income)


def per_capita_non_taxable_limit(qualifying_dependents: int) -> int:
    """均等割の非課税限度額."""
    if qualifying_dependents <= 0:
        return NON_TAXABLE_FLOOR
    return (_PER_CAPITA_BASE * (qualifying_dependents + 1) + _PER_CAPITA_ADDITION
            + _PER_CAPITA_DEPENDENT_ADDITION)


def income_portion_non_taxable_limit(qualifying_dependents: int) -> int:
    """所得割の非課税限度額."""
    limit = _PER_CAPITA_BASE * (max(qualifying_dependents, 0) + 1) + _PER_CAPITA_ADDITION
    if qualifying_dependents > 0:
        limit += _INCOME_PORTION_DEPENDENT_ADDITION
    return limit


def calculate_adjustment_credit(net_income: float, taxable_income: float, difference: float) -> float:
    """調整控除額 (地方税法第314条の6)."""
    if net_income > ADJUSTMENT_CREDIT_INCOME_LIMIT:
        return 0
    if taxable_income <= _ADJUSTMENT_CREDIT_THRESHOLD:
        return min(difference * _ADJUSTMENT_CREDIT_RATE, taxable_income * _ADJUSTMENT_CREDIT_RATE)
    return max(
        (difference - (taxable_income - _ADJUSTMENT_CREDIT_THRESHOLD)) * _ADJUSTMENT_CREDIT_RATE,
        difference * _ADJUSTMENT_CREDIT_RATE,
    )


def calculate_residence_tax(
    net_income: float,
    non_basic_deductions: float,
    dependent_deductions: DependentDeductionResults | None = None,
    tax_credit: float = 0,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> ResidenceTaxDetails:
    """Residence tax for one taxpayer.

    ``non_basic_deductions`` covers social insurance and DC plan contributions;
    the basic deduction and dependent deductions are applied here.
    ``tax_credit`` (税額控除) is split between city and prefecture 60/40.
    """
    if net_income <= NON_TAXABLE_FLOOR:
        return NON_TAXABLE_RESIDENCE_TAX_DETAIL

    qualifying = count_non_taxable_dependents(dependent_deductions) if dependent_deductions else 0
    if net_income <= per_capita_non_taxable_limit(qualifying):
        return NON_TAXABLE_RESIDENCE_TAX_DETAIL

    basic_deduction = calculate_residence_basic_deduction(net_income, tables)
    dependent_total = dependent_deductions.residence.total if dependent_deductions else 0
    taxable_income = math.floor(
        max(0, net_income - non_basic_deductions - basic_deduction - dependent_total) / 1000
    ) * 1000

    difference = BASIC_DEDUCTION_DIFFERENCE if net_income <= ADJUSTMENT_CREDIT_INCOME_LIMIT else 0
    if dependent_deductions:
        difference += calculate_personal_deduction_difference(dependent_deductions, net_income)

    credit = calculate_adjustment_credit(net_income, taxable_income, difference)
    city_credit = credit * CITY_PROPORTION
    prefectural_credit = credit * PREFECTURAL_PROPORTION

    if net_income <= income_portion_non_taxable_limit(qualifying):
        city_income_tax = 0
        prefectural_income_tax = 0
    else:
        city_income_tax = math.floor(
            (taxable_income * CITY_INCOME_RATE - city_credit - tax_credit * CITY_PROPORTION) / 100
        ) * 100
        prefectural_income_tax = math.floor(
            (taxable_income * PREFECTURAL_INCOME_RATE - prefectural_credit
             - tax_credit * PREFECTURAL_PROPORTION) / 100
        ) * 100

    per_capita = CITY_PER_CAPITA_TAX + PREFECTURAL_PER_CAPITA_TAX + FOREST_ENVIRONMENT_TAX

    return ResidenceTaxDetails(
        taxable_income=taxable_income,
        basic_deduction=basic_deduction,
        personal_deduction_difference=difference,
        city=CityResidenceTax(
            taxable_income=taxable_income * CITY_PROPORTION,
            adjustment_credit=city_credit,
            income_tax=city_income_tax,
            per_capita_tax=CITY_PER_CAPITA_TAX,
        ),
        prefecture=PrefecturalResidenceTax(
            taxable_income=taxable_income * PREFECTURAL_PROPORTION,
            adjustment_credit=prefectural_credit,
            income_tax=prefectural_income_tax,
            per_capita_tax=PREFECTURAL_PER_CAPITA_TAX,
        ),
        per_capita_tax=per_capita,
        forest_environment_tax=FOREST_ENVIRONMENT_TAX,
        total=city_income_tax + prefectural_income_tax + per_capita,
    )
