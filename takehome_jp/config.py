"""TOML config loader with CLI > config > default resolution."""

import argparse
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path

from takehome_jp.calculator import TakeHomeInputs
from takehome_jp.dependents import Dependent, DependentIncome
from takehome_jp.errors import ValidationError
from takehome_jp.health_insurance import CUSTOM_PROVIDER_ID, CustomRates
from takehome_jp.income import (
    BonusIncome,
    BusinessIncome,
    CommutingAllowance,
    IncomeStream,
    MiscellaneousIncome,
    SalaryIncome,
    StockCompensation,
)

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULTS = {
    "salary": 5_000_000,
    "salary_frequency": "annual",
    "bonuses": "",
    "business": 0,
    "blue_filer_deduction": 0,
    "miscellaneous": 0,
    "commuting": 0,
    "commuting_frequency": "monthly",
    "stock_compensation": 0,
    "provider": "KyokaiKenpo",
    "region": "Tokyo",
    "ltc": False,
    "health_rate": None,
    "ltc_rate": None,
    "dependents": "",
    "ideco": 0,
    "social_insurance": None,
}


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"設定ファイルの読み込みに失敗: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    # Normalize bonuses: TOML [[month, amount], ...] → "month:amount,..." string
    if "bonuses" in raw:
        v = raw["bonuses"]
        if isinstance(v, list):
            raw["bonuses"] = ",".join(f"{int(pair[0])}:{int(pair[1])}" for pair in v)
    # Normalize dependents: TOML array of tables → "relationship:age:gross:disability:cohabiting:other,..."
    if "dependents" in raw:
        v = raw["dependents"]
        if isinstance(v, list):
            parts = []
            for d in v:
                cohabiting = "1" if d.get("cohabiting", True) else "0"
                parts.append(":".join([
                    str(d["relationship"]),
                    str(d["age"]),
                    str(int(d.get("income", 0))),
                    str(d.get("disability", "none")),
                    cohabiting,
                    str(int(d.get("other", 0))),
                ]))
            raw["dependents"] = ",".join(parts)
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared take-home flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="設定ファイルパス (default: config.toml)")
    parser.add_argument("--salary", type=int, default=None, help=f"給与・円 (default: {d['salary']:,})")
    parser.add_argument("--salary-frequency", type=str, default=None, choices=("monthly", "annual"),
                        help="給与の単位: monthly=月額, annual=年額 (default: annual)")
    parser.add_argument("--bonuses", type=str, default=None, help="賞与（支給月:金額のカンマ区切り、例: 6:500000,12:500000）")
    parser.add_argument("--business", type=int, default=None, help="事業所得（経費控除後、青色申告特別控除前）・円")
    parser.add_argument("--blue-filer-deduction", type=int, default=None, choices=(0, 100_000, 550_000, 650_000),
                        help="青色申告特別控除・円 (default: 0)")
    parser.add_argument("--miscellaneous", type=int, default=None, help="雑所得・円")
    parser.add_argument("--commuting", type=int, default=None, help="通勤手当・円（支給1回あたり）")
    parser.add_argument("--commuting-frequency", type=str, default=None,
                        choices=("monthly", "3-months", "6-months", "annual"),
                        help="通勤手当の支給単位 (default: monthly)")
    parser.add_argument("--stock-compensation", type=int, default=None, help="外国法人発行の株式報酬・円（合計所得に含めない）")
    parser.add_argument("--provider", type=str, default=None,
                        help=f"健康保険: KyokaiKenpo, KantoItsKenpo, Custom, NationalHealthInsurance, DependentCoverage (default: {d['provider']})")
    parser.add_argument("--region", type=str, default=None, help=f"地域 (default: {d['region']})")
    parser.add_argument("--ltc", action="store_true", default=None, help="介護保険第2号被保険者（40-64歳）")
    parser.add_argument("--health-rate", type=float, default=None, help="Custom時の健康保険料率・%%（労働者負担）")
    parser.add_argument("--ltc-rate", type=float, default=None, help="Custom時の介護保険料率・%%（労働者負担）")
    parser.add_argument("--dependents", type=str, default=None,
                        help="扶養親族（続柄:年齢区分[:給与収入[:障害[:同居0/1[:その他の所得]]]] のカンマ区切り、例: spouse:under70:0,child:under16）")
    parser.add_argument("--ideco", type=int, default=None, help="iDeCo・企業型DC掛金（年額・円）")
    parser.add_argument("--social-insurance", type=int, default=None, help="社会保険料を手入力（年額・円、指定時は自動計算しない）")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def parse_bonuses(s: str) -> list[BonusIncome]:
    """Parse "month:amount,..." (month 1-12) → BonusIncome list (month 0-11)."""
    if not s or not str(s).strip():
        return []
    result = []
    for pair in str(s).split(","):
        pair = pair.strip()
        if not pair:
            continue
        parts = pair.split(":")
        if len(parts) != 2:
            raise ValidationError(f"賞与の形式が不正です（支給月:金額）: {pair}")
        month = int(parts[0].strip())
        if not 1 <= month <= 12:
            raise ValidationError(f"賞与の支給月は1-12で指定してください: {month}")
        result.append(BonusIncome(amount=int(parts[1].strip()), month=month - 1))
    return result


def parse_dependents(s: str) -> list[Dependent]:
    """Parse "relationship:age[:gross[:disability[:cohabiting[:other]]]],..." → Dependent list.

    ``other`` is net income other than salary (事業・年金等の所得).
    """
    if not s or not str(s).strip():
        return []
    result = []
    for item in str(s).split(","):
        item = item.strip()
        if not item:
            continue
        parts = [p.strip() for p in item.split(":")]
        if len(parts) < 2:
            raise ValidationError(f"扶養親族の形式が不正です（続柄:年齢区分）: {item}")
        gross = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        disability = parts[3] if len(parts) >= 4 and parts[3] else "none"
        cohabiting = parts[4] != "0" if len(parts) >= 5 and parts[4] else True
        other = int(parts[5]) if len(parts) >= 6 and parts[5] else 0
        result.append(Dependent(
            relationship=parts[0],
            age_category=parts[1],
            income=DependentIncome(gross_employment_income=gross, other_net_income=other),
            disability=disability,
            is_cohabiting=cohabiting,
        ))
    return result


def parse_streams(r: dict) -> list[IncomeStream]:
    """Build income streams from resolved config values. Zero amounts are skipped."""
    streams: list[IncomeStream] = []
    if r["salary"]:
        streams.append(SalaryIncome(amount=int(r["salary"]), frequency=r["salary_frequency"]))
    streams.extend(parse_bonuses(r["bonuses"]))
    if r["business"]:
        streams.append(BusinessIncome(amount=int(r["business"]),
                                      blue_filer_deduction=int(r["blue_filer_deduction"] or 0)))
    if r["miscellaneous"]:
        streams.append(MiscellaneousIncome(amount=int(r["miscellaneous"])))
    if r["commuting"]:
        streams.append(CommutingAllowance(amount=int(r["commuting"]), frequency=r["commuting_frequency"]))
    if r["stock_compensation"]:
        streams.append(StockCompensation(amount=int(r["stock_compensation"])))
    return streams


def build_inputs(r: dict) -> TakeHomeInputs:
    """Build TakeHomeInputs from resolved config dict."""
    custom_rates = None
    if r["provider"] == CUSTOM_PROVIDER_ID and r["health_rate"] is not None:
        custom_rates = CustomRates(health_rate=float(r["health_rate"]), ltc_rate=float(r["ltc_rate"] or 0))
    manual = r["social_insurance"] is not None
    return TakeHomeInputs(
        income_streams=parse_streams(r),
        is_subject_to_ltc=bool(r["ltc"]),
        region=r["region"],
        health_insurance_provider=r["provider"],
        custom_rates=custom_rates,
        dependents=parse_dependents(r["dependents"]),
        dc_plan_contributions=int(r["ideco"] or 0),
        manual_social_insurance_entry=manual,
        manual_social_insurance_amount=int(r["social_insurance"]) if manual else 0,
    )


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
) -> tuple[dict, argparse.Namespace]:
    """Parse CLI args, load config, resolve values.

    Returns (resolved_dict, namespace); the namespace carries extra CLI args
    added via add_args_fn.
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args()
    config = load_config(args.config)
    return resolve(args, config), args
