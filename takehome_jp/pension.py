"""Pension contributions: employees' pension (厚生年金) and national pension (国民年金)."""

from dataclasses import dataclass

from takehome_jp.errors import ValidationError
from takehome_jp.income import BonusIncome
from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables, SMRBracket, find_smr_bracket
from takehome_jp.social_insurance import PremiumBreakdown, round_social_insurance_premium


@dataclass(frozen=True)
class PensionBonusItem:
    month: int
    total_bonus_amount: int
    standard_bonus_amount: int
    premium: int


def find_pension_bracket(monthly_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> SMRBracket:
    if monthly_income < 0:
        raise ValidationError("Monthly income must be non-negative")
    return find_smr_bracket(tables.pension_smr_brackets, monthly_income)


def calculate_pension_bonus_breakdown(
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...],
    is_half_amount: bool = True,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> list[PensionBonusItem]:
    """Premium per bonus month; same-month bonuses are combined before the monthly cap."""
    if not bonuses:
        return []
    rate = tables.employees_pension_rate / 2 if is_half_amount else tables.employees_pension_rate

    by_month: dict[int, int] = {}
    for bonus in bonuses:
        by_month[bonus.month] = by_month.get(bonus.month, 0) + bonus.amount

    items = []
    for month in sorted(by_month):
        total = by_month[month]
        standard = min(total // 1000 * 1000, tables.pension_bonus_monthly_cap)
        items.append(PensionBonusItem(
            month=month,
            total_bonus_amount=total,
            standard_bonus_amount=standard,
            premium=round_social_insurance_premium(standard * rate),
        ))
    return items


def calculate_pension_breakdown(
    is_employees_pension: bool = True,
    monthly_income: float = 0,
    is_half_amount: bool = True,
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...] = (),
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> PremiumBreakdown:
    """Annual pension contribution.

    National pension is a flat monthly amount; employees' pension is charged
    on the standard monthly remuneration plus each bonus month.
    """
    if not is_employees_pension:
        return PremiumBreakdown(total=tables.national_pension_monthly * 12, bonus_portion=0)
    if monthly_income < 0:
        raise ValidationError("Monthly income must be a positive number")

    bracket = find_pension_bracket(monthly_income, tables)
    full = bracket.smr_amount * tables.employees_pension_rate
    monthly = round_social_insurance_premium(full / 2 if is_half_amount else full)

    total = monthly * 12
    bonus_portion = 0
    if any(b.amount > 0 for b in bonuses):
        items = calculate_pension_bonus_breakdown(bonuses, is_half_amount, tables)
        bonus_portion = sum(item.premium for item in items)
        total += bonus_portion

    return PremiumBreakdown(total=total, bonus_portion=bonus_portion)


def calculate_pension_premium(
    is_employees_pension: bool = True,
    monthly_income: float = 0,
    is_half_amount: bool = True,
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...] = (),
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> int:
    return calculate_pension_breakdown(is_employees_pension, monthly_income, is_half_amount, bonuses, tables).total
