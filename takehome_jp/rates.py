"""Statutory rate and bracket tables (令和7年度).

All tables are bundled into an immutable ``RateTables`` value that calculators
take as a parameter, so another tax year or region set can be swapped in
without touching calculation code.
"""

from dataclasses import dataclass, field

INF = float("inf")

# 所得税累進税率テーブル（国税庁 令和7年分）
# (上限課税所得・円, 税率, 控除額・円)
_INCOME_TAX_BRACKETS: tuple[tuple[float, float, int], ...] = (
    (1_949_000, 0.05, 0),
    (3_299_000, 0.10, 97_500),
    (6_949_000, 0.20, 427_500),
    (8_999_000, 0.23, 636_000),
    (17_999_000, 0.33, 1_536_000),
    (39_999_000, 0.40, 2_796_000),
    (INF, 0.45, 4_796_000),
)

# 所得税 基礎控除（令和7年改正後）: (合計所得金額の上限, 控除額)
_NATIONAL_BASIC_DEDUCTIONS: tuple[tuple[float, int], ...] = (
    (1_320_000, 950_000),
    (3_360_000, 880_000),  # 令和9年分から58万
    (4_890_000, 680_000),  # 令和9年分から58万
    (6_550_000, 630_000),  # 令和9年分から58万
    (23_500_000, 580_000),
    (24_000_000, 480_000),
    (24_500_000, 320_000),
    (25_000_000, 160_000),
    (INF, 0),
)

# 住民税 基礎控除
_RESIDENCE_BASIC_DEDUCTIONS: tuple[tuple[float, int], ...] = (
    (24_000_000, 430_000),
    (24_500_000, 290_000),
    (25_000_000, 150_000),
    (INF, 0),
)


@dataclass(frozen=True)
class SMRBracket:
    """One grade of a Standard Monthly Remuneration table (標準報酬月額)."""

    grade: int
    smr_amount: int
    min_inclusive: float
    max_exclusive: float


# 健康保険 標準報酬月額（全50等級、全保険者共通）
# (等級, 標準報酬月額, 報酬月額 下限以上, 上限未満)
_HEALTH_SMR_ROWS: tuple[tuple[int, int, float, float], ...] = (
    (1, 58_000, 0, 63_000),
    (2, 68_000, 63_000, 73_000),
    (3, 78_000, 73_000, 83_000),
    (4, 88_000, 83_000, 93_000),
    (5, 98_000, 93_000, 101_000),
    (6, 104_000, 101_000, 107_000),
    (7, 110_000, 107_000, 114_000),
    (8, 118_000, 114_000, 122_000),
    (9, 126_000, 122_000, 130_000),
    (10, 134_000, 130_000, 138_000),
    (11, 142_000, 138_000, 146_000),
    (12, 150_000, 146_000, 155_000),
    (13, 160_000, 155_000, 165_000),
    (14, 170_000, 165_000, 175_000),
    (15, 180_000, 175_000, 185_000),
    (16, 190_000, 185_000, 195_000),
    (17, 200_000, 195_000, 210_000),
    (18, 220_000, 210_000, 230_000),
    (19, 240_000, 230_000, 250_000),
    (20, 260_000, 250_000, 270_000),
    (21, 280_000, 270_000, 290_000),
    (22, 300_000, 290_000, 310_000),
    (23, 320_000, 310_000, 330_000),
    (24, 340_000, 330_000, 350_000),
    (25, 360_000, 350_000, 370_000),
    (26, 380_000, 370_000, 395_000),
    (27, 410_000, 395_000, 425_000),
    (28, 440_000, 425_000, 455_000),
    (29, 470_000, 455_000, 485_000),
    (30, 500_000, 485_000, 515_000),
    (31, 530_000, 515_000, 545_000),
    (32, 560_000, 545_000, 575_000),
    (33, 590_000, 575_000, 605_000),
    (34, 620_000, 605_000, 635_000),
    (35, 650_000, 635_000, 665_000),
    (36, 680_000, 665_000, 695_000),
    (37, 710_000, 695_000, 730_000),
    (38, 750_000, 730_000, 770_000),
    (39, 790_000, 770_000, 810_000),
    (40, 830_000, 810_000, 855_000),
    (41, 880_000, 855_000, 905_000),
    (42, 930_000, 905_000, 955_000),
    (43, 980_000, 955_000, 1_005_000),
    (44, 1_030_000, 1_005_000, 1_055_000),
    (45, 1_090_000, 1_055_000, 1_115_000),
    (46, 1_150_000, 1_115_000, 1_175_000),
    (47, 1_210_000, 1_175_000, 1_235_000),
    (48, 1_270_000, 1_235_000, 1_295_000),
    (49, 1_330_000, 1_295_000, 1_355_000),
    (50, 1_390_000, 1_355_000, INF),
)

HEALTH_SMR_BRACKETS: tuple[SMRBracket, ...] = tuple(SMRBracket(*row) for row in _HEALTH_SMR_ROWS)


def _pension_brackets() -> tuple[SMRBracket, ...]:
    """厚生年金 標準報酬月額（全32等級）.

    Grades 1-32 carry the same amounts as health grades 4-35; the first grade
    starts at 0 and the last is unbounded.
    """
    rows = HEALTH_SMR_BRACKETS[3:35]
    brackets = []
    for i, b in enumerate(rows):
        lo = 0 if i == 0 else b.min_inclusive
        hi = INF if i == len(rows) - 1 else b.max_exclusive
        brackets.append(SMRBracket(i + 1, b.smr_amount, lo, hi))
    return tuple(brackets)


PENSION_SMR_BRACKETS: tuple[SMRBracket, ...] = _pension_brackets()


@dataclass(frozen=True)
class RegionalRates:
    """Employee-share premium rates of one provider in one region (decimal)."""

    health_rate: float
    ltc_rate: float
    source: str = ""


@dataclass(frozen=True)
class ProviderDefinition:
    name: str
    effective_date: str
    regions: dict[str, RegionalRates] = field(default_factory=dict)


PROVIDER_DEFINITIONS: dict[str, ProviderDefinition] = {
    "KantoItsKenpo": ProviderDefinition(
        name="関東ITソフトウェア健康保険組合",
        effective_date="2025-03-01",
        regions={
            "DEFAULT": RegionalRates(
                health_rate=0.0475,  # 4.75%
                ltc_rate=0.009,      # 0.9%
                source="https://www.its-kenpo.or.jp/documents/hoken/jimu/hokenryou/2025.3.1ryougaku.pdf",
            ),
        },
    ),
    "KyokaiKenpo": ProviderDefinition(
        name="協会けんぽ",
        effective_date="2025-03-01",
        regions={
            "Tokyo": RegionalRates(
                health_rate=0.04955,  # 4.955%（折半）
                ltc_rate=0.00795,     # 0.795%（折半）
                source="https://www.kyoukaikenpo.or.jp/~/media/Files/shared/hokenryouritu/r7/ippan/13tokyo.pdf",
            ),
        },
    ),
}


@dataclass(frozen=True)
class NHIRegionParams:
    """国民健康保険料の算定パラメータ（年額）.

    Portions: medical (医療分), elderly support (後期高齢者支援金分) and
    long-term care (介護分, ages 40-64 only).
    """

    region_name: str
    medical_rate: float
    support_rate: float
    medical_per_capita: int
    support_per_capita: int
    medical_cap: int
    support_cap: int
    standard_deduction: int
    ltc_rate: float | None = None
    ltc_per_capita: int | None = None
    ltc_cap: int | None = None
    # 平等割（世帯あたり）
    medical_household_flat: int = 0
    support_household_flat: int = 0
    ltc_household_flat: int = 0
    source: str = ""


NHI_REGIONS: dict[str, NHIRegionParams] = {
    "Tokyo": NHIRegionParams(
        region_name="東京都特別区",
        medical_rate=0.0771,
        support_rate=0.0269,
        ltc_rate=0.0225,
        medical_per_capita=47_300,
        support_per_capita=16_800,
        ltc_per_capita=16_600,
        medical_cap=660_000,
        support_cap=260_000,
        ltc_cap=170_000,
        standard_deduction=430_000,
    ),
    "Osaka": NHIRegionParams(
        region_name="大阪市",
        medical_rate=0.0930,
        support_rate=0.0302,
        ltc_rate=0.0256,
        medical_per_capita=34_424,
        support_per_capita=11_034,
        ltc_per_capita=18_784,
        medical_household_flat=33_574,
        support_household_flat=10_761,
        medical_cap=650_000,
        support_cap=240_000,
        ltc_cap=170_000,
        standard_deduction=430_000,
    ),
}


@dataclass(frozen=True)
class RateTables:
    """Every lookup table the engine reads, for one tax year."""

    income_tax_brackets: tuple[tuple[float, float, int], ...] = _INCOME_TAX_BRACKETS
    reconstruction_surtax_rate: float = 0.021  # 復興特別所得税
    national_basic_deductions: tuple[tuple[float, int], ...] = _NATIONAL_BASIC_DEDUCTIONS
    residence_basic_deductions: tuple[tuple[float, int], ...] = _RESIDENCE_BASIC_DEDUCTIONS
    health_smr_brackets: tuple[SMRBracket, ...] = HEALTH_SMR_BRACKETS
    pension_smr_brackets: tuple[SMRBracket, ...] = PENSION_SMR_BRACKETS
    providers: dict[str, ProviderDefinition] = field(default_factory=lambda: dict(PROVIDER_DEFINITIONS))
    nhi_regions: dict[str, NHIRegionParams] = field(default_factory=lambda: dict(NHI_REGIONS))
    health_bonus_annual_cap: int = 5_730_000  # 標準賞与額の年度累計上限
    employees_pension_rate: float = 0.183  # 厚生年金保険料率（労使合計）
    pension_bonus_monthly_cap: int = 1_500_000  # 標準賞与額の月上限
    national_pension_monthly: int = 17_510  # 国民年金保険料（月額）
    employment_insurance_rate: float = 0.0055  # 雇用保険料率（労働者負担）


DEFAULT_RATE_TABLES = RateTables()


def find_smr_bracket(brackets: tuple[SMRBracket, ...], monthly_income: float) -> SMRBracket:
    """Return the bracket with ``min_inclusive <= monthly_income < max_exclusive``."""
    for bracket in brackets:
        if bracket.min_inclusive <= monthly_income < bracket.max_exclusive:
            return bracket
    raise ValueError(f"Monthly income {monthly_income:,.0f} is outside the defined SMR ranges.")


def lookup_step(schedule: tuple[tuple[float, int], ...], amount: float) -> int:
    """Return the value of the first ``(upper, value)`` step with ``amount <= upper``."""
    for upper, value in schedule:
        if amount <= upper:
            return value
    return schedule[-1][1]
