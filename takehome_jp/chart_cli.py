"""CLI entry point for chart generation."""

import dataclasses
import sys
from pathlib import Path

from takehome_jp.calculator import TakeHomeInputs, TakeHomeResults, calculate_taxes
from takehome_jp.charts import plot_breakdown, plot_income_sweep
from takehome_jp.config import build_inputs, create_parser, load_config, resolve
from takehome_jp.income import SalaryIncome


def _build_parser():
    parser = create_parser("手取り計算 チャート生成")
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="出力ディレクトリ (default: reports/charts)",
    )
    parser.add_argument(
        "--sweep-min", type=int, default=1_000_000,
        help="年収スイープの下限・円 (default: 1,000,000)",
    )
    parser.add_argument(
        "--sweep-max", type=int, default=20_000_000,
        help="年収スイープの上限・円 (default: 20,000,000)",
    )
    parser.add_argument(
        "--sweep-step", type=int, default=250_000,
        help="年収スイープの刻み・円 (default: 250,000)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="出力ファイル名のサフィックス（例: 5m → breakdown-5m.png）",
    )
    return parser


def sweep_incomes(
    base: TakeHomeInputs,
    incomes: list[int],
) -> list[TakeHomeResults]:
    """Recalculate ``base`` with its annual salary replaced by each income.

    Streams other than salary (bonuses, business income, commuting allowance)
    are kept as-is.
    """
    others = [s for s in base.income_streams if s.kind != "salary"]
    results = []
    for income in incomes:
        inputs = dataclasses.replace(base, income_streams=[SalaryIncome(amount=income), *others])
        results.append(calculate_taxes(inputs))
    return results


def main():
    parser = _build_parser()
    args = parser.parse_args()
    config_file = load_config(args.config)
    r = resolve(args, config_file)

    if args.sweep_step <= 0 or args.sweep_max < args.sweep_min:
        print("スイープ範囲が不正です（--sweep-min ≦ --sweep-max、--sweep-step > 0）", file=sys.stderr)
        raise SystemExit(1)

    try:
        inputs = build_inputs(r)
        results = calculate_taxes(inputs)
        print("内訳チャート...", file=sys.stderr)
        path = plot_breakdown(results, args.output, args.name)
        print(f"  {path}", file=sys.stderr)

        incomes = list(range(args.sweep_min, args.sweep_max + 1, args.sweep_step))
        print(f"年収スイープ（{len(incomes)}点）...", file=sys.stderr)
        sweep = sweep_incomes(inputs, incomes)
    except ValueError as e:
        print(f"入力エラー: {e}", file=sys.stderr)
        raise SystemExit(1)

    path = plot_income_sweep(incomes, sweep, args.output, args.name)
    print(f"  {path}", file=sys.stderr)


if __name__ == "__main__":
    main()
