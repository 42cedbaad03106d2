"""Monthly-figure normalization for day/week/month/year views.

Budgets and income are stored as monthly amounts. Every other period is
derived with fixed factors: day = monthly / 30, week = monthly / 4,
year = monthly * 12. No calendar-aware day counts.
"""
from datetime import date, datetime, timedelta

from database.category_dao import CategoryDAO
from models.category import Category
from utils.constants import (
    DAYS_PER_MONTH, MONTHS_PER_YEAR, PERIODS, WEEKS_PER_MONTH,
)
from utils.date_helpers import end_of_day, month_bounds, start_of_day, week_start
from utils.errors import InvalidPeriod
from utils.validation import parse_amount


def validate_period(period: str) -> str:
    if period not in PERIODS:
        raise InvalidPeriod(f"Unknown period '{period}'. Use one of {', '.join(PERIODS)}.")
    return period


def to_period_amount(monthly_amount: float | None, period: str) -> float | None:
    """Monthly figure -> figure for period. None (no budget) stays None."""
    validate_period(period)
    if monthly_amount is None:
        return None
    if period == "day":
        return monthly_amount / DAYS_PER_MONTH
    if period == "week":
        return monthly_amount / WEEKS_PER_MONTH
    if period == "year":
        return monthly_amount * MONTHS_PER_YEAR
    return monthly_amount


def to_monthly_amount(period_amount: float | None, period: str) -> float | None:
    """Inverse of to_period_amount, used when a budget is edited in a non-month view."""
    validate_period(period)
    if period_amount is None:
        return None
    if period == "day":
        return period_amount * DAYS_PER_MONTH
    if period == "week":
        return period_amount * WEEKS_PER_MONTH
    if period == "year":
        return period_amount / MONTHS_PER_YEAR
    return period_amount


def period_bounds(period: str, ref: date) -> tuple[datetime, datetime]:
    """Inclusive (start, end) of the period containing ref. Weeks run Sunday-Saturday."""
    validate_period(period)
    if isinstance(ref, datetime):
        ref = ref.date()
    if period == "day":
        return start_of_day(ref), end_of_day(ref)
    if period == "week":
        first = week_start(ref)
        return start_of_day(first), end_of_day(first + timedelta(days=6))
    if period == "year":
        return start_of_day(date(ref.year, 1, 1)), end_of_day(date(ref.year, 12, 31))
    return month_bounds(ref.year, ref.month)


class PeriodService:
    """Budget editing in whichever period the viewer is looking at."""

    def __init__(self, category_dao: CategoryDAO):
        self._category_dao = category_dao

    def budget_for_period(self, category: Category, period: str) -> float | None:
        return to_period_amount(category.monthly_budget, period)

    def update_budget(
        self, category_id: int, amount: float | None, period: str
    ) -> Category | None:
        """Store a budget typed while viewing period. None clears the budget."""
        if amount is not None:
            amount = parse_amount(amount, allow_zero=True)
        monthly = to_monthly_amount(amount, period)
        return self._category_dao.set_budget(category_id, monthly)
