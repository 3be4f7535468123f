"""Dependent-related deductions (扶養控除・配偶者控除・障害者控除 等).

National income tax and residence tax use different amounts for the same
dependent, so every calculation yields a pair. The residence tax adjustment
credit additionally needs the statutory "personal deduction difference"
(人的控除額の差, 地方税法第314条の6), which is a fixed table and not the
arithmetic gap between the two amounts.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from takehome_jp.errors import ValidationError
from takehome_jp.income import calculate_net_employment_income

RELATIONSHIPS = ("spouse", "child", "parent", "other")
SPOUSE_AGE_CATEGORIES = ("under70", "70plus")
DEPENDENT_AGE_CATEGORIES = ("under16", "16to18", "19to22", "23to69", "70plus")
DISABILITY_LEVELS = ("none", "regular", "special")

# 扶養控除・配偶者控除の所得要件（令和7年改正: 48万→58万）
DEPENDENT_INCOME_LIMIT = 580_000
SPOUSE_SPECIAL_INCOME_LIMIT = 1_330_000
SPECIFIC_RELATIVE_INCOME_LIMIT = 1_230_000


class DeductionType(StrEnum):
    SPOUSE = "Spouse Deduction"
    SPOUSE_SPECIAL = "Spouse Special Deduction"
    SPECIFIC_RELATIVE = "Specific Relative Special Deduction"
    GENERAL_DEPENDENT = "General Dependent Deduction"
    SPECIAL_DEPENDENT = "Special Dependent Deduction"
    ELDERLY_DEPENDENT = "Elderly Dependent Deduction"
    DISABILITY = "Disability Deduction"
    NOT_ELIGIBLE = "Not Eligible"


@dataclass(frozen=True)
class DependentIncome:
    gross_employment_income: int = 0
    other_net_income: int = 0


@dataclass(frozen=True)
class Dependent:
    relationship: str
    age_category: str
    income: DependentIncome = field(default_factory=DependentIncome)
    disability: str = "none"
    is_cohabiting: bool = True
    name: str = ""

    def __post_init__(self):
        if self.relationship not in RELATIONSHIPS:
            raise ValidationError(f"Unknown relationship: {self.relationship}")
        allowed = SPOUSE_AGE_CATEGORIES if self.relationship == "spouse" else DEPENDENT_AGE_CATEGORIES
        if self.age_category not in allowed:
            raise ValidationError(
                f"Age category {self.age_category!r} is not valid for relationship {self.relationship!r}"
            )
        if self.disability not in DISABILITY_LEVELS:
            raise ValidationError(f"Unknown disability level: {self.disability}")

    @property
    def is_spouse(self) -> bool:
        return self.relationship == "spouse"

    @property
    def is_elderly(self) -> bool:
        return self.age_category == "70plus"


def calculate_dependent_total_net_income(dependent: Dependent) -> int:
    """Dependent's total net income (合計所得金額)."""
    net_employment = calculate_net_employment_income(dependent.income.gross_employment_income)
    return net_employment + dependent.income.other_net_income


# (国税, 住民税)
_DEPENDENT_AMOUNTS = {
    "general": (380_000, 330_000),           # 一般の控除対象扶養親族
    "special": (630_000, 450_000),           # 特定扶養親族（19-22歳）
    "elderly": (480_000, 380_000),           # 老人扶養親族
    "elderly_cohabiting": (580_000, 450_000),  # 同居老親等
}

_DISABILITY_AMOUNTS = {
    "regular": (270_000, 260_000),
    "special": (400_000, 300_000),
    "special_cohabiting": (750_000, 530_000),  # 同居特別障害者
}

# 納税者の合計所得金額の区分上限
_TAXPAYER_BANDS = (9_000_000, 9_500_000, 10_000_000)

# 配偶者控除: 区分ごとの (一般, 老人) × (国税, 住民税)
_SPOUSE_AMOUNTS = (
    ((380_000, 330_000), (480_000, 380_000)),
    ((260_000, 220_000), (320_000, 260_000)),
    ((130_000, 110_000), (160_000, 130_000)),
)

# 配偶者特別控除: 配偶者の合計所得金額の区分上限
_SPOUSE_SPECIAL_BRACKETS = (
    950_000, 1_000_000, 1_050_000, 1_100_000, 1_150_000,
    1_200_000, 1_250_000, 1_300_000, 1_330_000,
)
# 納税者区分ごとの (国税, 住民税) 控除額（万円）
_SPOUSE_SPECIAL_AMOUNTS = (
    ((38, 36, 31, 26, 21, 16, 11, 6, 3), (33, 33, 31, 26, 21, 16, 11, 6, 3)),
    ((26, 24, 21, 18, 14, 11, 8, 4, 2), (22, 22, 21, 18, 14, 11, 8, 4, 2)),
    ((13, 12, 11, 9, 7, 6, 4, 2, 1), (11, 11, 11, 9, 7, 6, 4, 2, 1)),
)

# 特定親族特別控除（19-22歳、合計所得58万超123万以下）
_SPECIFIC_RELATIVE_BRACKETS = (
    850_000, 900_000, 950_000, 1_000_000, 1_050_000,
    1_100_000, 1_150_000, 1_200_000, 1_230_000,
)
_SPECIFIC_RELATIVE_AMOUNTS = (
    (63, 61, 51, 41, 31, 21, 11, 6, 3),
    (45, 45, 45, 41, 31, 21, 11, 6, 3),
)

# 人的控除額の差（地方税法第314条の6）
_STATUTORY_DIFFERENCES = {
    "general": 50_000,
    "special": 180_000,
    "elderly": 100_000,
    "elderly_cohabiting": 130_000,
    "disability_regular": 10_000,
    "disability_special": 100_000,
    "disability_special_cohabiting": 220_000,
}
# 配偶者控除の差: 区分ごとの (一般, 老人)
_SPOUSE_DIFFERENCES = ((50_000, 100_000), (40_000, 60_000), (20_000, 30_000))


@dataclass
class DeductionTotals:
    dependent: int = 0
    spouse: int = 0
    spouse_special: int = 0
    specific_relative: int = 0
    disability: int = 0

    @property
    def total(self) -> int:
        return self.dependent + self.spouse + self.spouse_special + self.specific_relative + self.disability


@dataclass
class DependentDeductionBreakdown:
    dependent: Dependent
    national_amount: int = 0
    residence_amount: int = 0
    deduction_type: str = ""
    notes: list[str] = field(default_factory=list)


@dataclass
class DependentDeductionResults:
    national: DeductionTotals = field(default_factory=DeductionTotals)
    residence: DeductionTotals = field(default_factory=DeductionTotals)
    breakdown: list[DependentDeductionBreakdown] = field(default_factory=list)


def _taxpayer_band(taxpayer_net_income: float) -> int | None:
    for i, upper in enumerate(_TAXPAYER_BANDS):
        if taxpayer_net_income <= upper:
            return i
    return None


def _bracket_index(brackets: tuple[int, ...], amount: float) -> int | None:
    for i, upper in enumerate(brackets):
        if amount <= upper:
            return i
    return None


def _dependent_category(dep: Dependent) -> str | None:
    """Return the 扶養控除 category key, or None for under-16 (年少扶養親族)."""
    if dep.age_category == "under16":
        return None
    if dep.age_category == "19to22":
        return "special"
    if dep.age_category == "70plus":
        if dep.is_cohabiting and dep.relationship in ("parent", "other"):
            return "elderly_cohabiting"
        return "elderly"
    return "general"


def _disability_key(dep: Dependent) -> str | None:
    if dep.disability == "none":
        return None
    if dep.disability == "special":
        return "special_cohabiting" if dep.is_cohabiting else "special"
    return "regular"


def get_spouse_deduction(is_elderly: bool, taxpayer_net_income: float) -> tuple[int, int]:
    """配偶者控除 (national, residence) for the taxpayer's income band."""
    band = _taxpayer_band(taxpayer_net_income)
    if band is None:
        return 0, 0
    return _SPOUSE_AMOUNTS[band][1 if is_elderly else 0]


def get_spouse_special_deduction(spouse_net_income: float, taxpayer_net_income: float) -> tuple[int, int]:
    """配偶者特別控除 (national, residence). Zero outside 58万超133万以下."""
    if spouse_net_income <= DEPENDENT_INCOME_LIMIT or spouse_net_income > SPOUSE_SPECIAL_INCOME_LIMIT:
        return 0, 0
    band = _taxpayer_band(taxpayer_net_income)
    if band is None:
        return 0, 0
    idx = _bracket_index(_SPOUSE_SPECIAL_BRACKETS, spouse_net_income)
    national, residence = _SPOUSE_SPECIAL_AMOUNTS[band]
    return national[idx] * 10_000, residence[idx] * 10_000


def get_specific_relative_deduction(dependent_net_income: float) -> tuple[int, int]:
    """特定親族特別控除 (national, residence). Zero outside 58万超123万以下."""
    if dependent_net_income <= DEPENDENT_INCOME_LIMIT or dependent_net_income > SPECIFIC_RELATIVE_INCOME_LIMIT:
        return 0, 0
    idx = _bracket_index(_SPECIFIC_RELATIVE_BRACKETS, dependent_net_income)
    national, residence = _SPECIFIC_RELATIVE_AMOUNTS
    return national[idx] * 10_000, residence[idx] * 10_000


def calculate_dependent_deductions(
    dependents: list[Dependent],
    taxpayer_net_income: float,
) -> DependentDeductionResults:
    """Evaluate every dependent into national and residence tax deductions.

    Each dependent falls into at most one of spouse, spouse special, specific
    relative special or dependent deduction; a disability deduction is added
    on top of whichever applies.
    """
    results = DependentDeductionResults()

    for dep in dependents:
        row = DependentDeductionBreakdown(dependent=dep)
        net_income = calculate_dependent_total_net_income(dep)

        disability = _disability_key(dep)
        if disability is not None:
            nat, res = _DISABILITY_AMOUNTS[disability]
            results.national.disability += nat
            results.residence.disability += res
            row.national_amount += nat
            row.residence_amount += res
            row.notes.append(f"Disability deduction ({disability})")

        if dep.is_spouse:
            if net_income <= DEPENDENT_INCOME_LIMIT:
                nat, res = get_spouse_deduction(dep.is_elderly, taxpayer_net_income)
                if nat > 0:
                    results.national.spouse += nat
                    results.residence.spouse += res
                    row.national_amount += nat
                    row.residence_amount += res
                    row.deduction_type = DeductionType.SPOUSE
                    row.notes.append("Elderly spouse" if dep.is_elderly else "Spouse deduction")
                else:
                    row.notes.append("Taxpayer income exceeds 10,000,000 yen")
            elif net_income <= SPOUSE_SPECIAL_INCOME_LIMIT:
                nat, res = get_spouse_special_deduction(net_income, taxpayer_net_income)
                if nat > 0:
                    results.national.spouse_special += nat
                    results.residence.spouse_special += res
                    row.national_amount += nat
                    row.residence_amount += res
                    row.deduction_type = DeductionType.SPOUSE_SPECIAL
                    row.notes.append(f"Spouse net income {net_income:,} yen")
                else:
                    row.notes.append("Taxpayer income exceeds 10,000,000 yen")
        elif net_income <= DEPENDENT_INCOME_LIMIT:
            category = _dependent_category(dep)
            if category is not None:
                nat, res = _DEPENDENT_AMOUNTS[category]
                results.national.dependent += nat
                results.residence.dependent += res
                row.national_amount += nat
                row.residence_amount += res
                if category == "special":
                    row.deduction_type = DeductionType.SPECIAL_DEPENDENT
                    row.notes.append("Age 19-22 (special dependent)")
                elif category in ("elderly", "elderly_cohabiting"):
                    row.deduction_type = DeductionType.ELDERLY_DEPENDENT
                    if category == "elderly_cohabiting":
                        row.notes.append("Age 70+ cohabiting parent")
                    else:
                        row.notes.append("Age 70+ elderly dependent")
                else:
                    row.deduction_type = DeductionType.GENERAL_DEPENDENT
                    row.notes.append("General dependent")
            else:
                row.notes.append("Under 16: no dependent deduction")
        elif dep.age_category == "19to22" and net_income <= SPECIFIC_RELATIVE_INCOME_LIMIT:
            nat, res = get_specific_relative_deduction(net_income)
            results.national.specific_relative += nat
            results.residence.specific_relative += res
            row.national_amount += nat
            row.residence_amount += res
            row.deduction_type = DeductionType.SPECIFIC_RELATIVE
            row.notes.append(f"Age 19-22 with net income {net_income:,} yen")

        if not row.deduction_type:
            if disability is not None:
                row.deduction_type = DeductionType.DISABILITY
            else:
                row.deduction_type = DeductionType.NOT_ELIGIBLE
                if not row.notes:
                    row.notes.append("Income exceeds threshold for deductions")

        results.breakdown.append(row)

    return results


def calculate_personal_deduction_difference(
    deductions: DependentDeductionResults,
    taxpayer_net_income: float,
) -> int:
    """Sum of statutory 人的控除額の差 for dependents (excluding the basic deduction part).

    Only the spouse deduction carries a spouse difference; the spouse special
    deduction contributes nothing.
    """
    total = 0
    for row in deductions.breakdown:
        dep = row.dependent
        if dep.is_spouse:
            if row.deduction_type == DeductionType.SPOUSE:
                band = _taxpayer_band(taxpayer_net_income)
                if band is not None:
                    total += _SPOUSE_DIFFERENCES[band][1 if dep.is_elderly else 0]
        else:
            category = _dependent_category(dep)
            if category is not None:
                total += _STATUTORY_DIFFERENCES[category]

        disability = _disability_key(dep)
        if disability is not None:
            total += _STATUTORY_DIFFERENCES[f"disability_{disability}"]
    return total


def count_non_taxable_dependents(deductions: DependentDeductionResults) -> int:
    """Dependents that raise the residence-tax non-taxable ceiling.

    Counts a same-livelihood spouse (同一生計配偶者) and dependents of any age,
    under-16 included, whose net income is within the 58万 limit.
    """
    count = 0
    for row in deductions.breakdown:
        if calculate_dependent_total_net_income(row.dependent) <= DEPENDENT_INCOME_LIMIT:
            count += 1
    return count
