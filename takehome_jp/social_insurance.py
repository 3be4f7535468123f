"""Shared social insurance helpers: premium rounding and employment insurance."""

import math
from dataclasses import dataclass

from takehome_jp.income import BonusIncome
from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables


def round_social_insurance_premium(amount: float) -> int:
    """Round a premium the statutory way (50銭以下切り捨て、50銭超切り上げ).

    A fractional part of exactly 0.5 rounds down.
    """
    floor = math.floor(amount)
    if amount - floor <= 0.5:
        return floor
    return math.ceil(amount)


def round_half_up(amount: float) -> int:
    """Conventional half-up rounding, used for NHI portions."""
    return math.floor(amount + 0.5)


@dataclass(frozen=True)
class PremiumBreakdown:
    """Annual premium with the share attributable to bonuses."""

    total: int = 0
    bonus_portion: int = 0


def calculate_employment_insurance_breakdown(
    salary_income: float,
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...],
    has_employment_income: bool,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> PremiumBreakdown:
    """雇用保険料（労働者負担分）.

    Twelve monthly premiums on salary / 12 plus one premium per bonus, each
    rounded with the social insurance rule.
    """
    if not has_employment_income or (salary_income <= 0 and len(bonuses) == 0):
        return PremiumBreakdown()

    rate = tables.employment_insurance_rate
    annual = 0
    if salary_income > 0:
        monthly = round_social_insurance_premium(salary_income / 12 * rate)
        for _ in range(12):
            annual += monthly

    bonus_portion = 0
    for bonus in bonuses:
        bonus_portion += round_social_insurance_premium(bonus.amount * rate)
    annual += bonus_portion

    return PremiumBreakdown(total=max(annual, 0), bonus_portion=bonus_portion)


def calculate_employment_insurance(
    salary_income: float,
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...],
    has_employment_income: bool,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> int:
    return calculate_employment_insurance_breakdown(salary_income, bonuses, has_employment_income, tables).total
