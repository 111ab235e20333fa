"""Chart rendering for the category-breakdown series."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..constants.categories import CATEGORY_REGISTRY
from ..models.transaction import Transaction
from .budgeting import CategorySlice, category_breakdown


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def build_spending_chart(*, slices: Iterable[CategorySlice]) -> Figure:
    """Create a donut chart from the breakdown series.

    Slices are drawn largest first with their registry colors; the legend
    lists the amount and share of each category.
    """

    ordered = sorted(slices, key=lambda s: s.value, reverse=True)
    fig, ax = plt.subplots(figsize=(9, 6))

    if not ordered:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        plt.tight_layout()
        return fig

    grand_total = sum(s.value for s in ordered)
    wedges, _texts, autotexts = ax.pie(
        [s.value for s in ordered],
        labels=None,
        autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
        wedgeprops=dict(width=0.45, edgecolor="white", linewidth=1.5),
        startangle=90,
        colors=[s.color for s in ordered],
        pctdistance=0.78,
    )
    for autotext in autotexts:
        autotext.set_fontsize(9)
        autotext.set_fontweight("bold")
        autotext.set_color("white")

    ax.text(0, 0.08, "Total Gastos", ha="center", va="center", fontsize=11, color="#666")
    ax.text(
        0, -0.08, f"${grand_total:,.2f}",
        ha="center", va="center", fontsize=18, fontweight="bold", color="#1F2937",
    )

    legend_labels = [
        f"{CATEGORY_REGISTRY[s.category].name}: ${s.value:,.2f} ({s.share:.1f}%)"
        for s in ordered
    ]
    ax.legend(
        wedges,
        legend_labels,
        title="Categorias",
        title_fontsize=11,
        loc="center left",
        bbox_to_anchor=(1.02, 0.5),
        fontsize=9,
        framealpha=0.9,
    )
    ax.axis("equal")
    ax.set_title("Resumo de Gastos", fontsize=16, fontweight="bold", pad=20)

    plt.tight_layout()
    return fig


def export_spending_png(
    *,
    transactions: Iterable[Transaction],
    output_path: Path,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the spending chart to PNG and return the path."""

    fig = build_spending_chart(slices=category_breakdown(transactions))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    plt.close(fig)
    return output_path
