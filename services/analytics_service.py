"""Year-at-a-glance analytics: twelve monthly rows plus the roll-ups the
analytics view shows (totals, averages, top spenders, top categories)."""
import logging
from datetime import datetime

from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.user_dao import UserDAO
from models.analytics import (
    AnalyticsReport, CategoryRanking, CategorySpend, MonthlyAnalytics, UserRanking,
)
from models.category import Category
from models.expense import Expense
from models.income import Income
from models.user import User
from services.period_service import to_period_amount
from services.summary_service import incomes_for_range
from utils.constants import UNKNOWN_CATEGORY_COLOR, UNKNOWN_CATEGORY_NAME
from utils.date_helpers import (
    format_timestamp, month_bounds, month_key, now as current_time,
    parse_timestamp, short_month_name,
)

logger = logging.getLogger(__name__)


def _in_range(expenses: list[Expense], start: datetime, end: datetime) -> list[Expense]:
    in_range = []
    for expense in expenses:
        created = parse_timestamp(expense.created_at)
        if created is not None and start <= created <= end:
            in_range.append(expense)
    return in_range


def _category_spend(
    expenses: list[Expense], categories_by_id: dict[int, Category]
) -> dict[int, CategorySpend]:
    spend: dict[int, CategorySpend] = {}
    for expense in expenses:
        entry = spend.get(expense.category_id)
        if entry is None:
            category = categories_by_id.get(expense.category_id)
            entry = CategorySpend(
                category_id=expense.category_id,
                name=category.name if category else UNKNOWN_CATEGORY_NAME,
                color=category.color if category else UNKNOWN_CATEGORY_COLOR,
            )
            spend[expense.category_id] = entry
        entry.amount += expense.amount
    return spend


def _over_budget(
    spend: dict[int, CategorySpend], categories_by_id: dict[int, Category]
) -> list[int]:
    over = []
    for category_id, entry in spend.items():
        category = categories_by_id.get(category_id)
        if category is None or not category.monthly_budget:
            continue
        if entry.amount > to_period_amount(category.monthly_budget, "month"):
            over.append(category_id)
    return over


def build_monthly_analytics(
    year: int,
    users: list[User],
    categories: list[Category],
    expenses: list[Expense],
    incomes: list[Income],
) -> list[MonthlyAnalytics]:
    categories_by_id = {c.id: c for c in categories}
    monthly = []
    for month in range(1, 13):
        start, end = month_bounds(year, month)
        month_expenses = _in_range(expenses, start, end)
        month_incomes = incomes_for_range(incomes, start, end)

        user_expenses = {u.id: 0.0 for u in users}
        for expense in month_expenses:
            if expense.user_id in user_expenses:
                user_expenses[expense.user_id] += expense.amount

        spend = _category_spend(month_expenses, categories_by_id)
        monthly.append(MonthlyAnalytics(
            year=year,
            month=month,
            label=short_month_name(month),
            income=sum(i.amount for i in month_incomes),
            expenses=sum(e.amount for e in month_expenses),
            user_expenses=user_expenses,
            category_expenses=spend,
            over_budget_categories=_over_budget(spend, categories_by_id),
        ))
    return monthly


def _percentage(part: float, total: float) -> float:
    return part / total * 100 if total > 0 else 0.0


def _start_date(expenses: list[Expense], incomes: list[Income], now: datetime) -> str:
    for rows in (expenses, incomes):
        stamps = [r.created_at for r in rows if parse_timestamp(r.created_at)]
        if stamps:
            return min(stamps, key=parse_timestamp)
    return format_timestamp(now)


def build_analytics_report(
    year: int,
    users: list[User],
    categories: list[Category],
    expenses: list[Expense],
    incomes: list[Income],
    now: datetime,
) -> AnalyticsReport:
    """Roll the year up.

    Averages only count months that have expenses and are already over
    (strictly before now's month); the month in progress would drag them down.
    Percentages are shares of the year's total expenses, 0 when nothing was spent.
    """
    monthly = build_monthly_analytics(year, users, categories, expenses, incomes)
    total_income = sum(m.income for m in monthly)
    total_expenses = sum(m.expenses for m in monthly)

    closed = [
        m for m in monthly
        if m.expenses > 0 and (m.year, m.month) < month_key(now)
    ]
    avg_income = sum(m.income for m in closed) / len(closed) if closed else 0.0
    avg_expenses = sum(m.expenses for m in closed) / len(closed) if closed else 0.0

    top_spenders = []
    for user in users:
        spent = sum(m.user_expenses.get(user.id, 0.0) for m in monthly)
        top_spenders.append(UserRanking(user, spent, _percentage(spent, total_expenses)))
    top_spenders.sort(key=lambda r: r.total_spent, reverse=True)

    categories_by_id = {c.id: c for c in categories}
    category_totals: dict[int, float] = {}
    for m in monthly:
        for category_id, entry in m.category_expenses.items():
            if category_id in categories_by_id:
                category_totals[category_id] = category_totals.get(category_id, 0.0) + entry.amount
    top_categories = [
        CategoryRanking(categories_by_id[cid], spent, _percentage(spent, total_expenses))
        for cid, spent in category_totals.items()
    ]
    top_categories.sort(key=lambda r: r.total_spent, reverse=True)

    return AnalyticsReport(
        year=year,
        monthly=monthly,
        total_income=total_income,
        total_expenses=total_expenses,
        average_monthly_income=avg_income,
        average_monthly_expenses=avg_expenses,
        top_spenders=top_spenders,
        top_categories=top_categories,
        over_budget_months=sum(1 for m in monthly if m.over_budget_categories),
        start_date=_start_date(expenses, incomes, now),
    )


class AnalyticsService:
    def __init__(
        self,
        user_dao: UserDAO,
        category_dao: CategoryDAO,
        expense_dao: ExpenseDAO,
        income_dao: IncomeDAO,
    ):
        self._user_dao = user_dao
        self._category_dao = category_dao
        self._expense_dao = expense_dao
        self._income_dao = income_dao

    def get_report(self, year: int | None = None, now: datetime | None = None) -> AnalyticsReport:
        ref = now or current_time()
        year = year or ref.year
        start, _ = month_bounds(year, 1)
        _, end = month_bounds(year, 12)
        expenses = self._expense_dao.get_in_range(format_timestamp(start), format_timestamp(end))
        report = build_analytics_report(
            year,
            self._user_dao.get_all(),
            self._category_dao.get_all(),
            expenses,
            self._income_dao.get_all(),
            ref,
        )
        earliest = self._expense_dao.get_earliest_created_at() or self._income_dao.get_earliest_created_at()
        if earliest:
            report.start_date = earliest
        logger.debug(
            "Analytics %s: income %.2f, expenses %.2f over %d month(s)",
            year, report.total_income, report.total_expenses, len(report.monthly),
        )
        return report
