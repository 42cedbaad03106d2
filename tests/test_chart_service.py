from datetime import datetime

from models.category import Category
from models.expense import Expense
from models.user import User
from services.analytics_service import build_analytics_report
from services.chart_service import ChartService, to_mpl_color


def test_hsl_colors_converted() -> None:
    assert to_mpl_color("#10B981") == "#10B981"
    r, g, b = to_mpl_color("hsl(0, 100%, 50%)")
    assert (round(r, 3), round(g, 3), round(b, 3)) == (1.0, 0.0, 0.0)


def test_figure_has_bar_and_pie(tmp_path) -> None:
    categories = [Category(1, "Food", "hsl(120, 80%, 60%)", 100.0)]
    expenses = [
        Expense(None, 1, 1, 40.0, None, "2024-02-03 10:00:00"),
    ]
    report = build_analytics_report(
        2024, [User(1, "Alice")], categories, expenses, [], datetime(2024, 6, 1)
    )
    fig = ChartService().build_figure(report)
    bar_ax, pie_ax = fig.axes
    assert len(bar_ax.patches) == 24
    assert len(pie_ax.patches) == 1

    out = tmp_path / "chart.png"
    ChartService().save_png(report, str(out))
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_empty_report_draws_placeholders() -> None:
    report = build_analytics_report(2024, [], [], [], [], datetime(2024, 6, 1))
    fig = ChartService().build_figure(report)
    assert [t.get_text() for ax in fig.axes for t in ax.texts] == [
        "No data", "No expense data",
    ]
