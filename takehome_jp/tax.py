"""National income tax (所得税) and reconstruction surtax."""

import math

from takehome_jp.rates import DEFAULT_RATE_TABLES, RateTables, lookup_step


def calculate_national_basic_deduction(net_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> int:
    """Basic deduction (基礎控除) for national income tax, by total net income.

    令和7年分: 132万以下 95万 / 336万以下 88万 / 489万以下 68万 / 655万以下 63万 /
    2,350万以下 58万, then phased out to zero above 2,500万.
    """
    return lookup_step(tables.national_basic_deductions, net_income)


def calculate_taxable_income(
    net_income: float,
    social_insurance: float,
    dc_contributions: float,
    basic_deduction: float,
    dependent_deductions: float,
) -> int:
    """課税所得: deductions subtracted, rounded down to 1,000 yen, never negative."""
    raw = net_income - social_insurance - dc_contributions - basic_deduction - dependent_deductions
    return max(0, math.floor(raw / 1000) * 1000)


def calculate_national_income_tax_base(taxable_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> float:
    """Tax before surtax using the quick calculation table (速算表)."""
    taxable_income = max(0, taxable_income)
    for upper, rate, deduction in tables.income_tax_brackets:
        if taxable_income <= upper:
            return taxable_income * rate - deduction
    _, rate, deduction = tables.income_tax_brackets[-1]
    return taxable_income * rate - deduction


def calculate_reconstruction_surtax(base_tax: float, tables: RateTables = DEFAULT_RATE_TABLES) -> float:
    """復興特別所得税 (2.1%)."""
    return base_tax * tables.reconstruction_surtax_rate


def calculate_national_income_tax(taxable_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> int:
    """Income tax including surtax, rounded down to 100 yen."""
    base = calculate_national_income_tax_base(taxable_income, tables)
    surtax = calculate_reconstruction_surtax(base, tables)
    return math.floor((base + surtax) / 100) * 100


def marginal_income_tax_rate(taxable_income: float, tables: RateTables = DEFAULT_RATE_TABLES) -> float:
    """Marginal national rate (without surtax) for a taxable income."""
    for upper, rate, _ in tables.income_tax_brackets:
        if taxable_income <= upper:
            return rate
    return tables.income_tax_brackets[-1][1]
