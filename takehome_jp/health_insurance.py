"""Health insurance premiums: employee plans (健康保険) and National Health Insurance (国民健康保険)."""

from dataclasses import dataclass

from takehome_jp.errors import ValidationError
from takehome_jp.income import BonusIncome
from takehome_jp.rates import (
    DEFAULT_RATE_TABLES,
    NHIRegionParams,
    RateTables,
    RegionalRates,
    find_smr_bracket,
)
from takehome_jp.social_insurance import PremiumBreakdown, round_half_up, round_social_insurance_premium

NATIONAL_HEALTH_INSURANCE_ID = "NationalHealthInsurance"
DEPENDENT_COVERAGE_ID = "DependentCoverage"
CUSTOM_PROVIDER_ID = "Custom"
DEFAULT_PROVIDER = "KyokaiKenpo"
DEFAULT_PROVIDER_REGION = "DEFAULT"

# 被扶養者認定の年収要件（130万円未満）
DEPENDENT_INCOME_THRESHOLD = 1_300_000


def is_dependent_coverage_eligible(annual_income: float) -> bool:
    """True if the annual income qualifies for coverage as a dependent (被扶養者)."""
    return annual_income < DEPENDENT_INCOME_THRESHOLD


@dataclass(frozen=True)
class CustomRates:
    """User-supplied employee-share rates, in percent (e.g. 4.955)."""

    health_rate: float
    ltc_rate: float = 0.0


@dataclass(frozen=True)
class HealthBonusItem:
    month: int
    bonus_amount: int
    standard_bonus_amount: int  # 千円未満切り捨て、年度累計上限適用後
    cumulative_standard_bonus: int
    premium: int
    includes_long_term_care: bool


@dataclass(frozen=True)
class NHIBreakdown:
    medical_portion: int = 0
    elderly_support_portion: int = 0
    long_term_care_portion: int = 0
    total: int = 0


def get_regional_rates(provider: str, region: str, tables: RateTables = DEFAULT_RATE_TABLES) -> RegionalRates:
    """Look up a provider's rates for a region, falling back to its DEFAULT region."""
    definition = tables.providers.get(provider)
    if definition is None:
        raise ValidationError(f"Unknown health insurance provider: {provider}")
    rates = definition.regions.get(region) or definition.regions.get(DEFAULT_PROVIDER_REGION)
    if rates is None:
        raise ValidationError(f"Region {region!r} is not defined for provider {provider}")
    return rates


def get_nhi_params(region: str, tables: RateTables = DEFAULT_RATE_TABLES) -> NHIRegionParams:
    params = tables.nhi_regions.get(region)
    if params is None:
        raise ValidationError(f"National Health Insurance parameters not found for region: {region}")
    return params


def calculate_monthly_employee_premium(smr_amount: int, rates: RegionalRates, include_ltc: bool) -> int:
    rate = rates.health_rate + (rates.ltc_rate if include_ltc else 0)
    return round_social_insurance_premium(smr_amount * rate)


def calculate_health_bonus_breakdown(
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...],
    rates: RegionalRates,
    include_ltc: bool,
    annual_cap: int = DEFAULT_RATE_TABLES.health_bonus_annual_cap,
) -> list[HealthBonusItem]:
    """Premium on each bonus (標準賞与額).

    Bonuses are processed in month order so that the annual cumulative cap
    on the standard bonus amount is reached by the earliest payments.
    """
    rate = rates.health_rate + (rates.ltc_rate if include_ltc else 0)
    items = []
    cumulative = 0
    for bonus in sorted(bonuses, key=lambda b: b.month):
        rounded = bonus.amount // 1000 * 1000
        remaining = max(0, annual_cap - cumulative)
        standard = min(rounded, remaining)
        cumulative += standard
        items.append(HealthBonusItem(
            month=bonus.month,
            bonus_amount=bonus.amount,
            standard_bonus_amount=standard,
            cumulative_standard_bonus=cumulative,
            premium=round_social_insurance_premium(standard * rate),
            includes_long_term_care=include_ltc,
        ))
    return items


def calculate_nhi_breakdown(
    net_income: float,
    include_ltc: bool,
    region: str,
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> NHIBreakdown:
    """国民健康保険料 by portion.

    ``net_income`` is the current year's net income, used in place of the
    previous year's income the municipality would actually assess.
    """
    params = get_nhi_params(region, tables)
    base = max(0, net_income - params.standard_deduction)

    medical = min(base * params.medical_rate + params.medical_per_capita + params.medical_household_flat,
                  params.medical_cap)
    support = min(base * params.support_rate + params.support_per_capita + params.support_household_flat,
                  params.support_cap)
    ltc = 0
    if include_ltc and params.ltc_rate and params.ltc_per_capita and params.ltc_cap:
        ltc = min(base * params.ltc_rate + params.ltc_per_capita + params.ltc_household_flat, params.ltc_cap)

    return NHIBreakdown(
        medical_portion=round_half_up(medical),
        elderly_support_portion=round_half_up(support),
        long_term_care_portion=round_half_up(ltc),
        total=round_half_up(medical + support + ltc),
    )


def calculate_health_insurance_breakdown(
    annual_income: float,
    include_ltc: bool,
    provider: str,
    region: str = DEFAULT_PROVIDER_REGION,
    custom_rates: CustomRates | None = None,
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...] = (),
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> PremiumBreakdown:
    """Annual health insurance premium.

    ``annual_income`` is annual remuneration for employee plans and net
    income for NHI; NHI has no separate bonus premium.
    """
    if annual_income < 0:
        raise ValidationError("Income cannot be negative.")

    if provider == DEPENDENT_COVERAGE_ID:
        return PremiumBreakdown()

    if provider == NATIONAL_HEALTH_INSURANCE_ID:
        total = calculate_nhi_breakdown(annual_income, include_ltc, region, tables).total
        return PremiumBreakdown(total=total, bonus_portion=0)

    smr = find_smr_bracket(tables.health_smr_brackets, annual_income / 12)

    if provider == CUSTOM_PROVIDER_ID:
        if custom_rates is None:
            return PremiumBreakdown()
        rates = RegionalRates(
            health_rate=custom_rates.health_rate / 100,
            ltc_rate=custom_rates.ltc_rate / 100,
        )
    else:
        rates = get_regional_rates(provider, region, tables)

    total = calculate_monthly_employee_premium(smr.smr_amount, rates, include_ltc) * 12
    bonus_portion = 0
    if any(b.amount > 0 for b in bonuses):
        items = calculate_health_bonus_breakdown(bonuses, rates, include_ltc, tables.health_bonus_annual_cap)
        bonus_portion = sum(item.premium for item in items)
        total += bonus_portion

    return PremiumBreakdown(total=total, bonus_portion=bonus_portion)


def calculate_health_insurance_premium(
    annual_income: float,
    include_ltc: bool,
    provider: str,
    region: str = DEFAULT_PROVIDER_REGION,
    custom_rates: CustomRates | None = None,
    bonuses: list[BonusIncome] | tuple[BonusIncome, ...] = (),
    tables: RateTables = DEFAULT_RATE_TABLES,
) -> int:
    return calculate_health_insurance_breakdown(
        annual_income, include_ltc, provider, region, custom_rates, bonuses, tables,
    ).total
