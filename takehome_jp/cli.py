"""CLI entry point: print the take-home breakdown for one configuration."""

import sys

from takehome_jp.calculator import TakeHomeResults, calculate_taxes
from takehome_jp.caps import describe_caps, detect_caps
from takehome_jp.config import build_inputs, parse_args
from takehome_jp.dependents import DependentDeductionResults
from takehome_jp.health_insurance import DEPENDENT_COVERAGE_ID, NATIONAL_HEALTH_INSURANCE_ID
from takehome_jp.tax import marginal_income_tax_rate

_PROVIDER_LABELS = {
    NATIONAL_HEALTH_INSURANCE_ID: "国民健康保険",
    DEPENDENT_COVERAGE_ID: "被扶養者（保険料なし）",
    "KyokaiKenpo": "協会けんぽ",
    "KantoItsKenpo": "関東ITソフトウェア健保",
    "Custom": "カスタム料率",
}


def fmt_yen(v: float) -> str:
    return f"{v:>14,.0f}円"


def _print_row(label: str, value: float, note: str = ""):
    suffix = f"  {note}" if note else ""
    print(f"  {label:<22}{fmt_yen(value)}{suffix}")


def _print_header(results: TakeHomeResults):
    provider = _PROVIDER_LABELS.get(results.health_insurance_provider, results.health_insurance_provider)
    print("=" * 64)
    print("手取り計算（令和7年分）")
    print(f"  健康保険: {provider} / 地域: {results.region}"
          f"{' / 介護保険第2号' if results.is_subject_to_ltc else ''}")
    print("=" * 64)


def _print_income(results: TakeHomeResults):
    print("\n【収入・所得】")
    _print_row("年収（額面）", results.annual_income)
    if results.salary_income:
        _print_row("給与", results.salary_income)
    bonus_total = sum(b.amount for b in results.bonuses)
    if bonus_total:
        _print_row("賞与", bonus_total, f"{len(results.bonuses)}回")
    if results.commuting_allowance:
        _print_row("通勤手当（非課税）", results.commuting_allowance)
    if results.net_employment_income is not None:
        _print_row("給与所得", results.net_employment_income)
    if results.blue_filer_deduction:
        _print_row("青色申告特別控除", -results.blue_filer_deduction)
    _print_row("合計所得金額", results.total_net_income)


def _print_social_insurance(results: TakeHomeResults):
    print("\n【社会保険料】")
    if results.social_insurance_override is not None:
        _print_row("社会保険料（手入力）", results.social_insurance_override)
        return
    note = f"うち賞与 {results.health_insurance_on_bonus:,}円" if results.health_insurance_on_bonus else ""
    _print_row("健康保険", results.health_insurance, note)
    if results.nhi_breakdown is not None:
        nhi = results.nhi_breakdown
        _print_row("  医療分", nhi.medical_portion)
        _print_row("  支援金分", nhi.elderly_support_portion)
        if nhi.long_term_care_portion:
            _print_row("  介護分", nhi.long_term_care_portion)
    note = f"うち賞与 {results.pension_on_bonus:,}円" if results.pension_on_bonus else ""
    _print_row("年金", results.pension, note)
    note = f"うち賞与 {results.employment_insurance_on_bonus:,}円" if results.employment_insurance_on_bonus else ""
    _print_row("雇用保険", results.employment_insurance, note)
    _print_row("合計", results.social_insurance_total)


def _print_dependents(deductions: DependentDeductionResults):
    if not deductions.breakdown:
        return
    print("\n【扶養控除等】")
    for row in deductions.breakdown:
        dep = row.dependent
        label = dep.name or f"{dep.relationship}({dep.age_category})"
        print(f"  {label:<22}所得税 {row.national_amount:>9,}円 / 住民税 {row.residence_amount:>9,}円"
              f"  {row.deduction_type}")
    _print_row("所得税 控除合計", deductions.national.total)
    _print_row("住民税 控除合計", deductions.residence.total)


def _print_taxes(results: TakeHomeResults):
    print("\n【所得税】")
    _print_row("基礎控除", results.national_basic_deduction)
    if results.dc_plan_contributions:
        _print_row("小規模企業共済等掛金控除", max(0, results.dc_plan_contributions))
    _print_row("課税所得", results.national_taxable_income)
    if results.national_income_tax_base is not None:
        _print_row("基準所得税額", results.national_income_tax_base)
        _print_row("復興特別所得税", results.reconstruction_surtax or 0)
    _print_row("所得税", results.national_income_tax)
    rate = marginal_income_tax_rate(results.national_taxable_income)
    print(f"  {'限界税率（復興税除く）':<22}{rate * 100:>14.0f}%")

    rt = results.residence_tax
    print("\n【住民税】")
    _print_row("基礎控除", results.residence_basic_deduction)
    _print_row("課税標準額", rt.taxable_income)
    if rt.personal_deduction_difference:
        _print_row("人的控除額の差", rt.personal_deduction_difference)
    _print_row("市区町村民税 所得割", rt.city.income_tax)
    _print_row("道府県民税 所得割", rt.prefecture.income_tax)
    _print_row("均等割・森林環境税", rt.per_capita_tax)
    _print_row("住民税", rt.total)


def _print_furusato(results: TakeHomeResults):
    f = results.furusato_nozei
    print("\n【ふるさと納税】")
    if f.limit <= 0:
        print("  控除上限なし")
        return
    _print_row("控除上限額（目安）", f.limit)
    _print_row("所得税の軽減", f.income_tax_reduction)
    _print_row("住民税の軽減", f.residence_tax_reduction)
    _print_row("自己負担", f.out_of_pocket_cost)


def print_report(results: TakeHomeResults):
    _print_header(results)
    _print_income(results)
    _print_social_insurance(results)
    _print_dependents(results.dependent_deductions)
    _print_taxes(results)
    _print_furusato(results)

    print("\n" + "-" * 64)
    _print_row("税・社会保険料 合計", results.total_burden)
    _print_row("手取り（年額）", results.take_home_income)
    _print_row("手取り（月額換算）", results.take_home_income / 12)
    if results.annual_income > 0:
        print(f"  {'手取り率':<22}{results.take_home_income / results.annual_income * 100:>14.1f}%")

    notes = describe_caps(detect_caps(results))
    if notes:
        print("\n【上限到達】")
        for note in notes:
            print(f"  ⚠ {note}")


def main():
    r, _ = parse_args("手取り計算（所得税・住民税・社会保険料・ふるさと納税）")
    try:
        inputs = build_inputs(r)
        results = calculate_taxes(inputs)
    except ValueError as e:
        print(f"入力エラー: {e}", file=sys.stderr)
        raise SystemExit(1)
    print_report(results)


if __name__ == "__main__":
    main()
