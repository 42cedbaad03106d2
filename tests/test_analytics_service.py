from datetime import datetime

import pytest

from models.category import Category
from models.expense import Expense
from models.income import Income
from models.user import User
from services.analytics_service import build_analytics_report, build_monthly_analytics

USERS = [User(1, "Alice", "#3B82F6"), User(2, "Bob", "#EC4899")]
CATEGORIES = [
    Category(1, "Groceries", "#10B981", 300.0),
    Category(2, "Rent", "#F59E0B", None, recurring_only=True),
]


def _expense(category_id, amount, created_at, user_id=1):
    return Expense(
        id=None, user_id=user_id, category_id=category_id, amount=amount,
        note=None, created_at=created_at,
    )


EXPENSES = [
    _expense(1, 350, "2024-01-10 12:00:00"),
    _expense(2, 1000, "2024-01-01 00:00:00", user_id=2),
    _expense(1, 100, "2024-02-14 12:00:00", user_id=2),
    _expense(2, 1000, "2024-02-01 00:00:00", user_id=2),
    _expense(1, 50, "2024-03-02 12:00:00"),
]
INCOMES = [Income(1, 1, 4000.0, None, "2024-01-05 09:00:00")]


def test_twelve_months_with_income_fallback() -> None:
    monthly = build_monthly_analytics(2024, USERS, CATEGORIES, EXPENSES, INCOMES)
    assert len(monthly) == 12
    assert [m.label for m in monthly[:3]] == ["Jan", "Feb", "Mar"]
    # January has its own income row; later months fall back to every row
    assert all(m.income == 4000.0 for m in monthly)
    assert monthly[0].expenses == 1350
    assert monthly[0].user_expenses == {1: 350, 2: 1000}
    assert monthly[5].user_expenses == {1: 0.0, 2: 0.0}
    assert monthly[0].net == 2650


def test_over_budget_keyed_by_category() -> None:
    monthly = build_monthly_analytics(2024, USERS, CATEGORIES, EXPENSES, INCOMES)
    assert monthly[0].over_budget_categories == [1]
    assert monthly[1].over_budget_categories == []
    assert monthly[0].category_expenses[1].amount == 350
    assert monthly[0].category_expenses[1].name == "Groceries"


def test_unknown_category_placeholder() -> None:
    monthly = build_monthly_analytics(
        2024, USERS, CATEGORIES, [_expense(42, 10, "2024-05-05 10:00:00")], []
    )
    spend = monthly[4].category_expenses[42]
    assert spend.name == "Unknown"
    assert spend.color == "#6B7280"


def test_averages_only_count_closed_months_with_expenses() -> None:
    report = build_analytics_report(
        2024, USERS, CATEGORIES, EXPENSES, INCOMES, datetime(2024, 3, 15)
    )
    # January and February are closed; March is in progress
    assert report.average_monthly_expenses == pytest.approx((1350 + 1100) / 2)
    assert report.average_monthly_income == pytest.approx(4000.0)
    assert report.average_monthly_net == pytest.approx(4000.0 - 1225.0)
    assert report.total_net == 48000 - 2500
    assert report.total_expenses == 2500
    assert report.total_income == 48000
    assert report.over_budget_months == 1


def test_rankings_and_percentages() -> None:
    report = build_analytics_report(
        2024, USERS, CATEGORIES, EXPENSES, INCOMES, datetime(2024, 3, 15)
    )
    assert [(r.user.name, r.total_spent) for r in report.top_spenders] == [
        ("Bob", 2100), ("Alice", 400),
    ]
    assert report.top_spenders[0].percentage == pytest.approx(84.0)
    assert [r.category.name for r in report.top_categories] == ["Rent", "Groceries"]
    assert sum(r.percentage for r in report.top_categories) == pytest.approx(100.0)


def test_empty_year_has_zero_percentages() -> None:
    now = datetime(2024, 6, 1, 8, 0, 0)
    report = build_analytics_report(2024, USERS, CATEGORIES, [], [], now)
    assert report.total_expenses == 0
    assert report.average_monthly_expenses == 0
    assert all(r.percentage == 0 for r in report.top_spenders)
    assert report.top_categories == []
    assert report.start_date == "2024-06-01 08:00:00"


def test_start_date_prefers_earliest_expense() -> None:
    report = build_analytics_report(
        2024, USERS, CATEGORIES, EXPENSES, INCOMES, datetime(2024, 3, 15)
    )
    assert report.start_date == "2024-01-01 00:00:00"
    report = build_analytics_report(
        2024, USERS, CATEGORIES, [], INCOMES, datetime(2024, 3, 15)
    )
    assert report.start_date == "2024-01-05 09:00:00"


def test_get_report_reads_through_store(services, alice, groceries) -> None:
    services.expenses.create(alice.id, groceries.id, 500, created_at=datetime(2023, 11, 2, 10))
    services.expenses.create(alice.id, groceries.id, 75, created_at=datetime(2024, 4, 2, 10))
    report = services.analytics.get_report(2024, datetime(2024, 6, 1))
    assert report.total_expenses == 75
    assert report.monthly[3].over_budget_categories == []
    assert report.start_date == "2023-11-02 10:00:00"
