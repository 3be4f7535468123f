"""Income streams, aggregation and net income (所得) calculation."""

import math
from dataclasses import dataclass, field
from typing import Literal, Union

from takehome_jp.errors import NegativeBusinessIncomeError, UnsupportedConfigurationError, ValidationError

SALARY_FREQUENCIES = ("monthly", "annual")
COMMUTING_FREQUENCIES = ("monthly", "3-months", "6-months", "annual")
BLUE_FILER_DEDUCTIONS = (0, 100_000, 550_000, 650_000)  # 青色申告特別控除

# 通勤手当の支給単位 → 年間支給回数
_COMMUTING_PAYMENTS_PER_YEAR = {
    "monthly": 12,
    "3-months": 4,
    "6-months": 2,
    "annual": 1,
}


@dataclass(frozen=True)
class SalaryIncome:
    amount: int
    frequency: str = "annual"
    kind: Literal["salary"] = field(default="salary", init=False)

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError("Salary amount must be non-negative")
        if self.frequency not in SALARY_FREQUENCIES:
            raise ValidationError(f"Unknown salary frequency: {self.frequency}")

    @property
    def annual_amount(self) -> int:
        return self.amount * 12 if self.frequency == "monthly" else self.amount


@dataclass(frozen=True)
class BonusIncome:
    amount: int
    month: int  # 0-11 (1月-12月)
    kind: Literal["bonus"] = field(default="bonus", init=False)

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError("Bonus amount must be non-negative")
        if not 0 <= self.month <= 11:
            raise ValidationError(f"Bonus month must be 0-11, got {self.month}")


@dataclass(frozen=True)
class BusinessIncome:
    amount: int
    blue_filer_deduction: int = 0
    kind: Literal["business"] = field(default="business", init=False)

    def __post_init__(self):
        if self.blue_filer_deduction not in BLUE_FILER_DEDUCTIONS:
            raise ValidationError(f"Unsupported blue filer deduction: {self.blue_filer_deduction}")


@dataclass(frozen=True)
class MiscellaneousIncome:
    amount: int
    kind: Literal["miscellaneous"] = field(default="miscellaneous", init=False)


@dataclass(frozen=True)
class CommutingAllowance:
    amount: int
    frequency: str = "monthly"
    kind: Literal["commutingAllowance"] = field(default="commutingAllowance", init=False)

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError("Commuting allowance must be non-negative")
        if self.frequency not in COMMUTING_FREQUENCIES:
            raise ValidationError(f"Unknown commuting allowance frequency: {self.frequency}")

    @property
    def annual_amount(self) -> int:
        return self.amount * _COMMUTING_PAYMENTS_PER_YEAR[self.frequency]


@dataclass(frozen=True)
class StockCompensation:
    amount: int
    issuer_domicile: str = "foreign"
    kind: Literal["stockCompensation"] = field(default="stockCompensation", init=False)

    def __post_init__(self):
        if self.issuer_domicile == "domestic":
            raise UnsupportedConfigurationError(
                "Stock compensation from a domestic issuer is not supported."
            )
        if self.issuer_domicile != "foreign":
            raise ValidationError(f"Unknown issuer domicile: {self.issuer_domicile}")


IncomeStream = Union[
    SalaryIncome,
    BonusIncome,
    BusinessIncome,
    MiscellaneousIncome,
    CommutingAllowance,
    StockCompensation,
]


@dataclass(frozen=True)
class IncomeBreakdown:
    salary_income: int = 0
    bonuses: tuple[BonusIncome, ...] = ()
    net_business_and_misc_income_before_deduction: int = 0
    net_business_and_misc_income: int = 0
    blue_filer_deduction: int = 0
    commuting_allowance: int = 0  # 年額換算、所得には含めない
    total_annual_income: int = 0

    @property
    def bonus_total(self) -> int:
        return sum(b.amount for b in self.bonuses)

    @property
    def gross_employment_income(self) -> int:
        return self.salary_income + self.bonus_total


def calculate_net_employment_income(gross_employment_income: float) -> int:
    """Apply the employment income deduction (給与所得控除, 令和7年分以降).

    Between 1.9M and 6.6M yen the gross amount is first rounded down to a
    multiple of 4,000 yen, as in the statutory 給与所得の速算表.
    """
    gross = gross_employment_income
    if gross < 651_000:
        return 0
    if gross < 1_900_000:
        return int(gross - 650_000)

    rounded = math.floor(gross / 4000) * 4000
    if gross <= 3_600_000:
        return math.floor(rounded * 0.7) - 80_000
    if gross <= 6_600_000:
        return math.floor(rounded * 0.8) - 440_000
    if gross <= 8_500_000:
        return math.floor(gross * 0.9) - 1_100_000
    return int(gross - 1_950_000)


def calculate_income_breakdown(streams: list[IncomeStream]) -> IncomeBreakdown:
    """Partition income streams into salary, bonus, business/misc and fringe totals.

    Raises:
        ValidationError: a second business stream or negative miscellaneous income.
        NegativeBusinessIncomeError: business income below zero.
    """
    salary = 0
    bonuses: list[BonusIncome] = []
    before_deduction = 0
    net_business_misc = 0
    blue_filer_deduction = 0
    commuting = 0
    seen_business = False

    for stream in streams:
        kind = stream.kind
        if kind == "salary":
            salary += stream.annual_amount
        elif kind == "bonus":
            bonuses.append(stream)
        elif kind == "business":
            if seen_business:
                raise ValidationError("Only one business income stream is allowed.")
            if stream.amount < 0:
                raise NegativeBusinessIncomeError("Business income losses are not currently supported.")
            deduction = min(stream.amount, stream.blue_filer_deduction or 0)
            before_deduction += stream.amount
            net_business_misc += stream.amount - deduction
            blue_filer_deduction = deduction
            seen_business = True
        elif kind == "miscellaneous":
            if stream.amount < 0:
                raise ValidationError("Miscellaneous income cannot be negative.")
            before_deduction += stream.amount
            net_business_misc += stream.amount
        elif kind == "commutingAllowance":
            commuting += stream.annual_amount
        elif kind == "stockCompensation":
            # 外国法人発行分のみ受け付ける。合計所得には含めない
            continue
        else:
            raise ValidationError(f"Unknown income stream kind: {kind}")

    total = salary + sum(b.amount for b in bonuses) + before_deduction
    return IncomeBreakdown(
        salary_income=salary,
        bonuses=tuple(bonuses),
        net_business_and_misc_income_before_deduction=before_deduction,
        net_business_and_misc_income=net_business_misc,
        blue_filer_deduction=blue_filer_deduction,
        commuting_allowance=commuting,
        total_annual_income=total,
    )


def calculate_total_net_income(streams: list[IncomeStream]) -> int:
    """Net employment income plus net business/miscellaneous income (合計所得金額)."""
    breakdown = calculate_income_breakdown(streams)
    net_employment = calculate_net_employment_income(breakdown.gross_employment_income)
    return net_employment + breakdown.net_business_and_misc_income


def monthly_remuneration(breakdown: IncomeBreakdown) -> float:
    """Monthly remuneration (報酬月額) for employee-plan premiums: salary + commuting allowance."""
    return (breakdown.salary_income + breakdown.commuting_allowance) / 12
