"""Take-home pay calculation: income → social insurance → taxes → furusato nozei."""

from dataclasses import dataclass, field

from takehome_jp.dependents import Dependent, DependentDeductionResults, calculate_dependent_deductions
from takehome_jp.furusato import NO_FURUSATO_NOZEI, FurusatoNozeiDetails, calculate_furusato_nozei_details
from takehome_jp.health_insurance import (
    CUSTOM_PROVIDER_ID,
    DEFAULT_PROVIDER,
    DEPENDENT_COVERAGE_ID,
    NATIONAL_HEALTH_INSURANCE_ID,
    CustomRates,
    NHIBreakdown,
    calculate_health_insurance_breakdown,
    calculate_nhi_breakdown,
)
from takehome_jp.income import (
    BonusIncome,
    IncomeStream,
    calculate_income_breakdown,
    calculate_net_employment_income,
    monthly_remuneration,
)
from takehome_jp.pension import calculate_pension_breakdown
from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables
from takehome_jp.residence_tax import (
    NON_TAXABLE_RESIDENCE_TAX_DETAIL,
    ResidenceTaxDetails,
    calculate_residence_basic_deduction,
    calculate_residence_tax,
)
from takehome_jp.social_insurance import calculate_employment_insurance_breakdown
from takehome_jp.tax import (
    calculate_national_basic_deduction,
    calculate_national_income_tax,
    calculate_national_income_tax_base,
    calculate_reconstruction_surtax,
    calculate_taxable_income,
)

DEFAULT_REGION = "Tokyo"


@dataclass(frozen=True)
class TakeHomeInputs:
    income_streams: list[IncomeStream] = field(default_factory=list)
    is_subject_to_ltc: bool = False  # 40-64歳（介護保険第2号被保険者）
    region: str = DEFAULT_REGION
    health_insurance_provider: str = DEFAULT_PROVIDER
    custom_rates: CustomRates | None = None
    dependents: list[Dependent] = field(default_factory=list)
    dc_plan_contributions: int = 0  # iDeCo・企業型DC（年額）
    manual_social_insurance_entry: bool = False
    manual_social_insurance_amount: int = 0


@dataclass(frozen=True)
class TakeHomeResults:
    annual_income: int = 0
    has_employment_income: bool = False
    blue_filer_deduction: int = 0
    national_income_tax: int = 0
    national_income_tax_base: float | None = None
    reconstruction_surtax: float | None = None
    residence_tax: ResidenceTaxDetails = NON_TAXABLE_RESIDENCE_TAX_DETAIL
    health_insurance: int = 0
    health_insurance_on_bonus: int = 0
    pension: int = 0
    pension_on_bonus: int = 0
    employment_insurance: int = 0
    employment_insurance_on_bonus: int = 0
    nhi_breakdown: NHIBreakdown | None = None
    net_employment_income: int | None = None
    total_net_income: int = 0
    commuting_allowance: int = 0
    national_basic_deduction: int = 0
    national_taxable_income: int = 0
    residence_basic_deduction: int = 0
    residence_taxable_income: int = 0
    take_home_income: int = 0
    furusato_nozei: FurusatoNozeiDetails = NO_FURUSATO_NOZEI
    dc_plan_contributions: int = 0
    dependent_deductions: DependentDeductionResults = field(default_factory=DependentDeductionResults)
    social_insurance_override: int | None = None
    # 入力の文脈（上限判定・表示用）
    health_insurance_provider: str = DEFAULT_PROVIDER
    region: str = DEFAULT_REGION
    is_subject_to_ltc: bool = False
    custom_rates: CustomRates | None = None
    salary_income: int = 0
    bonuses: tuple[BonusIncome, ...] = ()
    monthly_remuneration: float = 0

    @property
    def social_insurance_total(self) -> int:
        if self.social_insurance_override is not None:
            return self.social_insurance_override
        return self.health_insurance + self.pension + self.employment_insurance

    @property
    def total_burden(self) -> int:
        """Taxes plus social insurance."""
        return self.national_income_tax + self.residence_tax.total + self.social_insurance_total


def calculate_taxes(inputs: TakeHomeInputs, tables: RateTables = DEFAULT_RATE_TABLES) -> TakeHomeResults:
    """Compute the full take-home breakdown for one tax year."""
    breakdown = calculate_income_breakdown(inputs.income_streams)
    context = dict(
        health_insurance_provider=inputs.health_insurance_provider,
        region=inputs.region,
        is_subject_to_ltc=inputs.is_subject_to_ltc,
        custom_rates=inputs.custom_rates,
        dc_plan_contributions=inputs.dc_plan_contributions,
    )

    if breakdown.total_annual_income <= 0:
        return TakeHomeResults(**context)

    annual_income = breakdown.total_annual_income
    bonuses = breakdown.bonuses
    # 0円の賞与は給与所得の有無に影響しない
    has_employment_income = breakdown.salary_income > 0 or any(b.amount > 0 for b in bonuses)

    net_employment_income = calculate_net_employment_income(breakdown.gross_employment_income)
    net_income = net_employment_income + breakdown.net_business_and_misc_income
    monthly = monthly_remuneration(breakdown)
    provider = inputs.health_insurance_provider

    health = pension = employment = 0
    health_on_bonus = pension_on_bonus = employment_on_bonus = 0
    nhi_breakdown = None

    if inputs.manual_social_insurance_entry:
        social_insurance = inputs.manual_social_insurance_amount
    else:
        if provider == NATIONAL_HEALTH_INSURANCE_ID:
            # 国保は合計所得金額ベース、賞与の別計算なし
            health = calculate_health_insurance_breakdown(
                net_income, inputs.is_subject_to_ltc, provider, inputs.region, tables=tables,
            ).total
            nhi_breakdown = calculate_nhi_breakdown(net_income, inputs.is_subject_to_ltc, inputs.region, tables)
        else:
            result = calculate_health_insurance_breakdown(
                breakdown.salary_income + breakdown.commuting_allowance,
                inputs.is_subject_to_ltc,
                provider,
                inputs.region,
                inputs.custom_rates if provider == CUSTOM_PROVIDER_ID else None,
                bonuses,
                tables,
            )
            health = result.total
            health_on_bonus = result.bonus_portion

        if provider == DEPENDENT_COVERAGE_ID:
            pension = 0
        elif provider == NATIONAL_HEALTH_INSURANCE_ID:
            pension = calculate_pension_breakdown(False, tables=tables).total
        else:
            result = calculate_pension_breakdown(True, monthly, True, bonuses, tables)
            pension = result.total
            pension_on_bonus = result.bonus_portion

        result = calculate_employment_insurance_breakdown(
            breakdown.salary_income, bonuses, has_employment_income, tables,
        )
        employment = result.total
        employment_on_bonus = result.bonus_portion

        social_insurance = health + pension + employment

    dc_deduction = max(0, inputs.dc_plan_contributions or 0)
    dependent_deductions = calculate_dependent_deductions(inputs.dependents, net_income)

    national_basic = calculate_national_basic_deduction(net_income, tables)
    national_base_before_rounding = (
        net_income - social_insurance - dc_deduction - national_basic - dependent_deductions.national.total
    )
    national_taxable = calculate_taxable_income(
        net_income, social_insurance, dc_deduction, national_basic, dependent_deductions.national.total,
    )
    national_income_tax = calculate_national_income_tax(national_taxable, tables)
    tax_base = calculate_national_income_tax_base(national_taxable, tables)
    surtax = calculate_reconstruction_surtax(tax_base, tables)

    residence_basic = calculate_residence_basic_deduction(net_income, tables)
    residence_taxable = calculate_taxable_income(
        net_income, social_insurance, dc_deduction, residence_basic, dependent_deductions.residence.total,
    )
    residence = calculate_residence_tax(net_income, social_insurance + dc_deduction, dependent_deductions,
                                        tables=tables)

    take_home = annual_income - (national_income_tax + residence.total + social_insurance)
    furusato = calculate_furusato_nozei_details(national_base_before_rounding, residence, tables)

    return TakeHomeResults(
        annual_income=annual_income,
        has_employment_income=has_employment_income,
        blue_filer_deduction=breakdown.blue_filer_deduction,
        national_income_tax=national_income_tax,
        national_income_tax_base=tax_base if national_taxable > 0 else None,
        reconstruction_surtax=surtax if national_taxable > 0 else None,
        residence_tax=residence,
        health_insurance=health,
        health_insurance_on_bonus=health_on_bonus,
        pension=pension,
        pension_on_bonus=pension_on_bonus,
        employment_insurance=employment,
        employment_insurance_on_bonus=employment_on_bonus,
        nhi_breakdown=nhi_breakdown,
        net_employment_income=net_employment_income if has_employment_income else None,
        total_net_income=net_income,
        commuting_allowance=breakdown.commuting_allowance,
        national_basic_deduction=national_basic,
        national_taxable_income=national_taxable,
        residence_basic_deduction=residence_basic,
        residence_taxable_income=residence_taxable,
        take_home_income=take_home,
        furusato_nozei=furusato,
        dependent_deductions=dependent_deductions,
        social_insurance_override=(
            inputs.manual_social_insurance_amount if inputs.manual_social_insurance_entry else None
        ),
        salary_income=breakdown.salary_income,
        bonuses=bonuses,
        monthly_remuneration=monthly,
        **context,
    )
