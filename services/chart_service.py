"""Static analytics charts drawn on a headless matplotlib Figure.

Figure is used directly (no pyplot) so nothing here needs a display or
touches matplotlib's global state.
"""
import colorsys
import logging
import re

from matplotlib.figure import Figure

from models.analytics import AnalyticsReport

logger = logging.getLogger(__name__)

INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"
TOP_CATEGORY_SLICES = 8

_HSL_RE = re.compile(r"hsl\(\s*(\d+)\s*,\s*(\d+)%\s*,\s*(\d+)%\s*\)")


def to_mpl_color(color: str) -> str | tuple[float, float, float]:
    """Category colors may be stored as CSS hsl(); matplotlib only knows RGB."""
    match = _HSL_RE.fullmatch(color.strip())
    if not match:
        return color
    hue, sat, light = (int(g) for g in match.groups())
    return colorsys.hls_to_rgb(hue / 360, light / 100, sat / 100)


def _thousands(v, _):
    return f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"


class ChartService:
    def __init__(self, figsize: tuple[float, float] = (10, 4), dpi: int = 100):
        self._figsize = figsize
        self._dpi = dpi

    def build_figure(self, report: AnalyticsReport) -> Figure:
        """Monthly income vs. expenses bars on the left, top-category pie on the right."""
        fig = Figure(figsize=self._figsize, dpi=self._dpi, tight_layout=True)
        bar_ax = fig.add_subplot(1, 2, 1)
        pie_ax = fig.add_subplot(1, 2, 2)
        self._draw_monthly_bars(bar_ax, report)
        self._draw_category_pie(pie_ax, report)
        fig.suptitle(f"{report.year}")
        return fig

    def _draw_monthly_bars(self, ax, report: AnalyticsReport):
        labels = [m.label for m in report.monthly]
        incomes = [m.income for m in report.monthly]
        expenses = [m.expenses for m in report.monthly]
        if not any(incomes) and not any(expenses):
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            return
        x = list(range(len(labels)))
        w = 0.35
        ax.bar([i - w / 2 for i in x], incomes, w, color=INCOME_COLOR, label="Income")
        ax.bar([i + w / 2 for i in x], expenses, w, color=EXPENSE_COLOR, label="Expenses")
        ax.set_xticks(x)
        ax.set_xticklabels(labels, fontsize=8)
        ax.yaxis.set_major_formatter(_thousands)
        ax.legend(fontsize=8)

    def _draw_category_pie(self, ax, report: AnalyticsReport):
        top = [r for r in report.top_categories if r.total_spent > 0][:TOP_CATEGORY_SLICES]
        if not top:
            ax.text(0.5, 0.5, "No expense data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            return
        ax.pie(
            [r.total_spent for r in top],
            labels=[r.category.name for r in top],
            colors=[to_mpl_color(r.category.color) for r in top],
            startangle=90,
            textprops={"fontsize": 8},
        )
        ax.set_aspect("equal")

    def save_png(self, report: AnalyticsReport, path: str) -> str:
        fig = self.build_figure(report)
        fig.savefig(path, format="png")
        logger.info("Wrote %s analytics chart to %s", report.year, path)
        return path
