"""Per-category spend vs. budget for a reporting period, plus period totals.

Categories that share a name (case-insensitive) across the normal, recurring
and large-expense flows are reported as one bucket. The bucket takes its
color and budget from the first category encountered in the input order.
"""
import logging
from datetime import date, datetime

from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.user_dao import UserDAO
from models.category import Category
from models.expense import Expense
from models.income import Income
from models.summary import (
    CategorySummary, CategorySummaryResult, PeriodTotals, UserExpense,
)
from models.user import User
from services.period_service import period_bounds, to_period_amount, validate_period
from utils.constants import UNKNOWN_COLOR, UNKNOWN_USER_NAME
from utils.date_helpers import format_timestamp, parse_timestamp, today
from utils.errors import AmbiguousCategoryMerge

logger = logging.getLogger(__name__)


def group_categories(categories: list[Category]) -> dict[str, list[Category]]:
    """Lower-cased name -> categories, both in first-encountered order."""
    groups: dict[str, list[Category]] = {}
    for category in categories:
        groups.setdefault(category.name.lower(), []).append(category)
    return groups


def _merge_diagnostic(group: list[Category]) -> AmbiguousCategoryMerge | None:
    primary = group[0]
    budgets = [c.monthly_budget for c in group]
    diverging = any(
        b is not None and b != primary.monthly_budget for b in budgets[1:]
    )
    if not diverging:
        return None
    return AmbiguousCategoryMerge(
        name=primary.name,
        category_ids=[c.id for c in group],
        budgets=budgets,
        chosen_budget=primary.monthly_budget,
    )


def user_breakdown(expenses: list[Expense], users: list[User]) -> list[UserExpense]:
    """Spend per user, largest first."""
    totals: dict[int, float] = {}
    for expense in expenses:
        totals[expense.user_id] = totals.get(expense.user_id, 0.0) + expense.amount
    by_id = {u.id: u for u in users}
    breakdown = []
    for user_id, amount in totals.items():
        user = by_id.get(user_id)
        breakdown.append(UserExpense(
            user_id=user_id,
            user_name=user.name if user else UNKNOWN_USER_NAME,
            user_color=user.color if user else UNKNOWN_COLOR,
            amount=amount,
        ))
    breakdown.sort(key=lambda ue: ue.amount, reverse=True)
    return breakdown


def summarize_categories(
    categories: list[Category],
    expenses: list[Expense],
    users: list[User],
    period: str,
) -> CategorySummaryResult:
    """Expenses must already be filtered to the reporting period."""
    validate_period(period)
    summaries: list[CategorySummary] = []
    diagnostics: list[AmbiguousCategoryMerge] = []

    for group in group_categories(categories).values():
        primary = group[0]
        ids = [c.id for c in group]
        id_set = set(ids)
        in_bucket = [e for e in expenses if e.category_id in id_set]
        spent = sum(e.amount for e in in_bucket)

        diagnostic = _merge_diagnostic(group)
        if diagnostic is not None:
            logger.warning("%s", diagnostic)
            diagnostics.append(diagnostic)

        budget = to_period_amount(primary.monthly_budget, period)
        remaining = None
        percentage_left = None
        if budget is not None:
            remaining = budget - spent
            percentage_left = max(0.0, remaining / budget * 100) if budget else 0.0

        summaries.append(CategorySummary(
            category=primary,
            category_ids=ids,
            spent=spent,
            budget=budget,
            remaining=remaining,
            percentage_left=percentage_left,
            user_expenses=user_breakdown(in_bucket, users),
        ))

    summaries = [s for s in summaries if s.spent > 0 or s.budget]
    summaries.sort(key=lambda s: (s.spent, s.budget or 0.0), reverse=True)
    return CategorySummaryResult(summaries=summaries, diagnostics=diagnostics)


def incomes_for_range(incomes: list[Income], start: datetime, end: datetime) -> list[Income]:
    """Income recorded inside [start, end]; when there is none, every entry.

    Income is a standing monthly figure, not a transaction scoped to the month
    it was entered in.
    """
    in_range = []
    for income in incomes:
        created = parse_timestamp(income.created_at)
        if created is not None and start <= created <= end:
            in_range.append(income)
    return in_range or list(incomes)


def period_totals(
    categories: list[Category],
    expenses: list[Expense],
    incomes: list[Income],
    period: str,
) -> PeriodTotals:
    """Totals for the period; incomes must already be resolved with incomes_for_range."""
    validate_period(period)
    return PeriodTotals(
        period=period,
        total_expenses=sum(e.amount for e in expenses),
        total_budgeted=sum(
            to_period_amount(c.monthly_budget or 0.0, period) for c in categories
        ),
        total_income=sum(to_period_amount(i.amount, period) for i in incomes),
    )


class SummaryService:
    def __init__(
        self,
        category_dao: CategoryDAO,
        expense_dao: ExpenseDAO,
        income_dao: IncomeDAO,
        user_dao: UserDAO,
    ):
        self._category_dao = category_dao
        self._expense_dao = expense_dao
        self._income_dao = income_dao
        self._user_dao = user_dao

    def get_summary(
        self, period: str, ref: date | None = None
    ) -> tuple[CategorySummaryResult, PeriodTotals]:
        """Category summaries and totals for the period containing ref (default today)."""
        start, end = period_bounds(period, ref or today())
        categories = self._category_dao.get_all()
        expenses = self._expense_dao.get_in_range(
            format_timestamp(start), format_timestamp(end)
        )
        incomes = incomes_for_range(self._income_dao.get_all(), start, end)
        result = summarize_categories(
            categories, expenses, self._user_dao.get_all(), period
        )
        return result, period_totals(categories, expenses, incomes, period)
