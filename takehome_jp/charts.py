"""Chart generation for take-home results."""

import platform
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from takehome_jp.calculator import TakeHomeResults

# Component color mapping
COMPONENT_COLORS = {
    "手取り": "#2ca02c",        # green
    "所得税": "#d62728",        # red
    "住民税": "#ff7f0e",        # orange
    "健康保険": "#1f77b4",      # blue
    "年金": "#9467bd",          # purple
    "雇用保険": "#8c564b",      # brown
    "社会保険料": "#1f77b4",    # blue（手入力時）
}

DEFAULT_COLOR = "#7f7f7f"


def _setup_japanese_font():
    """Configure matplotlib to use a Japanese font."""
    system = platform.system()
    if system == "Darwin":
        font_family = "Hiragino Sans"
    elif system == "Linux":
        font_family = "Noto Sans CJK JP"
    else:
        font_family = "sans-serif"
    plt.rcParams["font.family"] = font_family
    plt.rcParams["axes.unicode_minus"] = False


def _format_man_axis(axis):
    """Show yen amounts as 万円."""
    axis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 10000:,.0f}万" if x != 0 else "0")
    )


def breakdown_components(results: TakeHomeResults) -> list[tuple[str, int]]:
    """Split annual income into take-home, taxes and premiums (zero parts dropped)."""
    parts = [("手取り", results.take_home_income), ("所得税", results.national_income_tax),
             ("住民税", results.residence_tax.total)]
    if results.social_insurance_override is not None:
        parts.append(("社会保険料", results.social_insurance_override))
    else:
        parts += [("健康保険", results.health_insurance), ("年金", results.pension),
                  ("雇用保険", results.employment_insurance)]
    return [(label, value) for label, value in parts if value > 0]


def plot_breakdown(results: TakeHomeResults, output_path: Path, name: str = "") -> Path:
    """Generate a horizontal stacked bar of where the gross income goes.

    Args:
        results: calculate_taxes() result.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "5m" → breakdown-5m.png).

    Returns:
        Path to the generated PNG file.
    """
    _setup_japanese_font()

    fig, ax = plt.subplots(figsize=(14, 3.5))

    left = 0
    for label, value in breakdown_components(results):
        color = COMPONENT_COLORS.get(label, DEFAULT_COLOR)
        ax.barh([0], [value], left=left, color=color, label=label, edgecolor="white")
        if results.annual_income > 0 and value / results.annual_income >= 0.04:
            ax.text(left + value / 2, 0, f"{label}\n{value / 10000:,.1f}万",
                    ha="center", va="center", fontsize=9, color="white")
        left += value

    ax.set_yticks([])
    ax.set_xlim(0, max(left, 1))
    _format_man_axis(ax.xaxis)
    ax.set_title(f"年収 {results.annual_income / 10000:,.0f}万円の内訳（手取り {results.take_home_income / 10000:,.1f}万円）")
    ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.25), ncol=6, fontsize=9)
    ax.grid(True, axis="x", alpha=0.3)

    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"breakdown{suffix}.png"
    fig.savefig(filepath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return filepath


def plot_income_sweep(
    incomes: list[int],
    results: list[TakeHomeResults],
    output_path: Path,
    name: str = "",
) -> Path:
    """Generate take-home and burden curves over a range of gross incomes.

    Top panel: take-home and each burden component (万円). Bottom panel:
    take-home ratio and marginal take-home rate between adjacent points.
    """
    _setup_japanese_font()

    fig, (ax_top, ax_bottom) = plt.subplots(2, 1, figsize=(14, 10), sharex=True,
                                            gridspec_kw={"height_ratios": [3, 2]})

    series = {
        "手取り": [r.take_home_income for r in results],
        "所得税": [r.national_income_tax for r in results],
        "住民税": [r.residence_tax.total for r in results],
        "健康保険": [r.health_insurance for r in results],
        "年金": [r.pension for r in results],
        "雇用保険": [r.employment_insurance for r in results],
    }
    for label, values in series.items():
        if not any(values):
            continue
        ax_top.plot(incomes, values, label=label, color=COMPONENT_COLORS.get(label, DEFAULT_COLOR),
                    linewidth=2.5 if label == "手取り" else 1.5)
    ax_top.set_ylabel("年額")
    ax_top.set_title("額面年収と手取り・税・社会保険料")
    ax_top.legend(loc="upper left")
    ax_top.grid(True, alpha=0.3)
    _format_man_axis(ax_top.yaxis)

    ratios = [r.take_home_income / r.annual_income * 100 if r.annual_income > 0 else 0 for r in results]
    ax_bottom.plot(incomes, ratios, label="手取り率", color=COMPONENT_COLORS["手取り"], linewidth=2)
    if len(incomes) > 1:
        mids = []
        marginal = []
        for i in range(1, len(incomes)):
            step = incomes[i] - incomes[i - 1]
            if step <= 0:
                continue
            mids.append((incomes[i] + incomes[i - 1]) / 2)
            marginal.append((results[i].take_home_income - results[i - 1].take_home_income) / step * 100)
        ax_bottom.plot(mids, marginal, label="限界手取り率", color=DEFAULT_COLOR, linewidth=1, linestyle="--")
    ax_bottom.set_xlabel("額面年収")
    ax_bottom.set_ylabel("%")
    ax_bottom.set_ylim(0, 100)
    ax_bottom.legend(loc="lower left")
    ax_bottom.grid(True, alpha=0.3)
    _format_man_axis(ax_bottom.xaxis)

    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"income-sweep{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath
