from datetime import date, datetime

import pytest

from services.period_service import (
    PeriodService, period_bounds, to_monthly_amount, to_period_amount,
)
from utils.errors import InvalidAmount, InvalidPeriod


def test_fixed_factors() -> None:
    assert to_period_amount(300.0, "day") == pytest.approx(10.0)
    assert to_period_amount(300.0, "week") == pytest.approx(75.0)
    assert to_period_amount(300.0, "month") == 300.0
    assert to_period_amount(300.0, "year") == 3600.0


def test_missing_budget_stays_missing() -> None:
    for period in ("day", "week", "month", "year"):
        assert to_period_amount(None, period) is None
        assert to_monthly_amount(None, period) is None


def test_unknown_period_rejected() -> None:
    with pytest.raises(InvalidPeriod):
        to_period_amount(100.0, "fortnight")
    with pytest.raises(InvalidPeriod):
        period_bounds("quarter", date(2024, 1, 1))


def test_monthly_amount_inverts_period_amount() -> None:
    for period in ("day", "week", "month", "year"):
        assert to_monthly_amount(to_period_amount(480.0, period), period) == pytest.approx(480.0)


def test_week_runs_sunday_to_saturday() -> None:
    # 2024-03-13 is a Wednesday
    start, end = period_bounds("week", date(2024, 3, 13))
    assert start == datetime(2024, 3, 10, 0, 0, 0)
    assert end.date() == date(2024, 3, 16)
    # a Sunday starts its own week
    start, _ = period_bounds("week", date(2024, 3, 10))
    assert start.date() == date(2024, 3, 10)


def test_month_and_year_bounds() -> None:
    start, end = period_bounds("month", datetime(2024, 2, 10, 15, 30))
    assert start == datetime(2024, 2, 1)
    assert end.date() == date(2024, 2, 29)
    start, end = period_bounds("year", date(2023, 6, 1))
    assert start == datetime(2023, 1, 1)
    assert end.date() == date(2023, 12, 31)


def test_day_bounds_cover_whole_day() -> None:
    start, end = period_bounds("day", date(2024, 5, 5))
    assert start == datetime(2024, 5, 5)
    assert end.date() == date(2024, 5, 5)
    assert end.hour == 23 and end.minute == 59


def test_update_budget_stores_monthly_figure(daos, groceries) -> None:
    svc = PeriodService(daos.categories)
    updated = svc.update_budget(groceries.id, 100.0, "week")
    assert updated.monthly_budget == pytest.approx(400.0)
    assert svc.budget_for_period(updated, "day") == pytest.approx(400.0 / 30)


def test_update_budget_clears_and_validates(daos, groceries) -> None:
    svc = PeriodService(daos.categories)
    assert svc.update_budget(groceries.id, None, "month").monthly_budget is None
    assert svc.update_budget(groceries.id, 0, "month").monthly_budget == 0
    with pytest.raises(InvalidAmount):
        svc.update_budget(groceries.id, -5, "month")
