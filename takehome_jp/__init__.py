"""Japanese Take-Home Pay Calculation Package."""

from takehome_jp.errors import ValidationError, NegativeBusinessIncomeError, UnsupportedConfigurationError
from takehome_jp.rates import RateTables, DEFAULT_RATE_TABLES
from takehome_jp.income import (
    SalaryIncome,
    BonusIncome,
    BusinessIncome,
    MiscellaneousIncome,
    CommutingAllowance,
    StockCompensation,
    IncomeStream,
    calculate_income_breakdown,
    calculate_net_employment_income,
    calculate_total_net_income,
)
from takehome_jp.dependents import (
    Dependent,
    DependentIncome,
    DeductionType,
    calculate_dependent_deductions,
)
from takehome_jp.social_insurance import round_social_insurance_premium, calculate_employment_insurance
from takehome_jp.health_insurance import (
    CustomRates,
    NATIONAL_HEALTH_INSURANCE_ID,
    DEPENDENT_COVERAGE_ID,
    CUSTOM_PROVIDER_ID,
    calculate_health_insurance_premium,
    calculate_nhi_breakdown,
    is_dependent_coverage_eligible,
)
from takehome_jp.pension import calculate_pension_premium
from takehome_jp.tax import calculate_national_income_tax
from takehome_jp.residence_tax import NON_TAXABLE_RESIDENCE_TAX_DETAIL, calculate_residence_tax
from takehome_jp.furusato import calculate_furusato_nozei_details
from takehome_jp.calculator import TakeHomeInputs, TakeHomeResults, calculate_taxes
from takehome_jp.caps import CapStatus, detect_caps, describe_caps

__all__ = [
    "ValidationError",
    "NegativeBusinessIncomeError",
    "UnsupportedConfigurationError",
    "RateTables",
    "DEFAULT_RATE_TABLES",
    "SalaryIncome",
    "BonusIncome",
    "BusinessIncome",
    "MiscellaneousIncome",
    "CommutingAllowance",
    "StockCompensation",
    "IncomeStream",
    "calculate_income_breakdown",
    "calculate_net_employment_income",
    "calculate_total_net_income",
    "Dependent",
    "DependentIncome",
    "DeductionType",
    "calculate_dependent_deductions",
    "round_social_insurance_premium",
    "calculate_employment_insurance",
    "CustomRates",
    "NATIONAL_HEALTH_INSURANCE_ID",
    "DEPENDENT_COVERAGE_ID",
    "CUSTOM_PROVIDER_ID",
    "calculate_health_insurance_premium",
    "calculate_nhi_breakdown",
    "is_dependent_coverage_eligible",
    "calculate_pension_premium",
    "calculate_national_income_tax",
    "NON_TAXABLE_RESIDENCE_TAX_DETAIL",
    "calculate_residence_tax",
    "calculate_furusato_nozei_details",
    "TakeHomeInputs",
    "TakeHomeResults",
    "calculate_taxes",
    "CapStatus",
    "detect_caps",
    "describe_caps",
]
