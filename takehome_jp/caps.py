"""Detection of premiums that have hit a statutory ceiling (上限)."""

from dataclasses import dataclass

from takehome_jp.calculator import TakeHomeResults
from takehome_jp.health_insurance import (
    DEPENDENT_COVERAGE_ID,
    NATIONAL_HEALTH_INSURANCE_ID,
)
from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables


@dataclass(frozen=True)
class CapStatus:
    health_insurance_capped: bool = False
    pension_capped: bool = False
    bonus_cap_reached: bool = False
    medical_capped: bool = False
    support_capped: bool = False
    ltc_capped: bool = False


def _nhi_caps(results: TakeHomeResults, tables: RateTables) -> tuple[bool, bool, bool]:
    params = tables.nhi_regions.get(results.region)
    if params is None or results.nhi_breakdown is None:
        return False, False, False
    base = max(0, results.total_net_income - params.standard_deduction)
    medical = base * params.medical_rate + params.medical_per_capita + params.medical_household_flat
    support = base * params.support_rate + params.support_per_capita + params.support_household_flat
    ltc = False
    if results.is_subject_to_ltc and params.ltc_rate and params.ltc_per_capita and params.ltc_cap:
        uncapped = base * params.ltc_rate + params.ltc_per_capita + params.ltc_household_flat
        ltc = uncapped > params.ltc_cap
    return medical > params.medical_cap, support > params.support_cap, ltc


def detect_caps(results: TakeHomeResults, tables: RateTables = DEFAULT_RATE_TABLES) -> CapStatus:
    """Report which premiums are at their ceiling for these results."""
    if results.social_insurance_override is not None or results.annual_income <= 0:
        return CapStatus()

    provider = results.health_insurance_provider
    if provider == DEPENDENT_COVERAGE_ID:
        return CapStatus()

    if provider == NATIONAL_HEALTH_INSURANCE_ID:
        medical, support, ltc = _nhi_caps(results, tables)
        return CapStatus(
            health_insurance_capped=medical or support or ltc,
            medical_capped=medical,
            support_capped=support,
            ltc_capped=ltc,
        )

    health_top = tables.health_smr_brackets[-1]
    pension_top = tables.pension_smr_brackets[-1]

    cumulative = 0
    for bonus in results.bonuses:
        cumulative += bonus.amount // 1000 * 1000

    return CapStatus(
        health_insurance_capped=results.monthly_remuneration >= health_top.min_inclusive,
        pension_capped=results.monthly_remuneration >= pension_top.min_inclusive,
        bonus_cap_reached=cumulative >= tables.health_bonus_annual_cap,
    )


def describe_caps(status: CapStatus) -> list[str]:
    """Human-readable notes for each applied ceiling."""
    notes: list[str] = []
    if status.health_insurance_capped:
        parts = []
        if status.medical_capped:
            parts.append("医療分")
        if status.support_capped:
            parts.append("支援金分")
        if status.ltc_capped:
            parts.append("介護分")
        if parts:
            notes.append(f"国民健康保険料が賦課限度額に到達（{'・'.join(parts)}）")
        else:
            notes.append("健康保険料が標準報酬月額の最高等級に到達")
    if status.pension_capped:
        notes.append("厚生年金保険料が標準報酬月額の最高等級に到達")
    if status.bonus_cap_reached:
        notes.append("標準賞与額が年度累計上限に到達")
    return notes
