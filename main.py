import argparse
import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.large_expense_dao import LargeExpenseDAO
from database.recurring_dao import RecurringDAO
from database.user_dao import UserDAO

from services.analytics_service import AnalyticsService
from services.chart_service import ChartService
from services.large_expense_service import LargeExpenseService
from services.period_service import validate_period
from services.recurring_service import RecurringService
from services.summary_service import SummaryService

from utils.app_config import get_log_level, resolve_db_path
from utils.constants import APP_NAME, DEFAULT_PERIOD, PERIODS
from utils.currency import format_currency, format_percent
from utils.date_helpers import now as current_time

logger = logging.getLogger(__name__)


def run_startup_passes(recurring_svc: RecurringService,
                       large_svc: LargeExpenseService, now=None):
    """Materialize due installments, then purge expired large expenses."""
    ref = now or current_time()
    result = recurring_svc.apply_due(ref)
    result.extend(large_svc.apply_due(ref))
    purged = large_svc.purge_expired(ref)
    logger.info(
        "Startup: %d installment(s) created, %d skipped, %d failed, %d large expense(s) purged",
        len(result.created), len(result.skipped), len(result.failures), len(purged),
    )
    return result, purged


def print_summary(summary_svc: SummaryService, period: str, symbol: str):
    result, totals = summary_svc.get_summary(period)
    print(f"{APP_NAME} ({period})")
    for s in result.summaries:
        budget = format_currency(s.budget, symbol)
        line = f"  {s.category.name:<20} {format_currency(s.spent, symbol):>12} / {budget:>12}"
        if s.budget is not None:
            line += f"  {format_percent(s.percentage_left)} left"
        if s.is_over_budget:
            line += "  OVER"
        print(line)
    print(f"  {'Income':<20} {format_currency(totals.total_income, symbol):>12}")
    print(f"  {'Expenses':<20} {format_currency(totals.total_expenses, symbol):>12}")
    print(f"  {'Net':<20} {format_currency(totals.net, symbol):>12}")


def main(argv=None):
    parser = argparse.ArgumentParser(description=f"{APP_NAME}: startup passes and summary.")
    parser.add_argument("--db", help="Database file (overrides config and environment)")
    parser.add_argument("--period", choices=PERIODS, help="Summary period")
    parser.add_argument("--chart", metavar="PNG", help="Write the yearly analytics chart here")
    parser.add_argument("--year", type=int, help="Analytics year (default: current)")
    args = parser.parse_args(argv)

    # ── Bootstrap: logging and DB location from pre-DB config ────────────────
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(args.db or resolve_db_path())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    user_dao = UserDAO(db)
    category_dao = CategoryDAO(db)
    expense_dao = ExpenseDAO(db)
    income_dao = IncomeDAO(db)
    recurring_dao = RecurringDAO(db)
    large_dao = LargeExpenseDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    recurring_svc = RecurringService(db, recurring_dao, expense_dao)
    large_svc = LargeExpenseService(db, large_dao, expense_dao)
    summary_svc = SummaryService(category_dao, expense_dao, income_dao, user_dao)
    analytics_svc = AnalyticsService(user_dao, category_dao, expense_dao, income_dao)

    try:
        result, _ = run_startup_passes(recurring_svc, large_svc)
        for failure in result.failures:
            logger.error("%s", failure)

        period = validate_period(args.period or db.get_setting("default_period", DEFAULT_PERIOD))
        print_summary(summary_svc, period, db.get_setting("currency_symbol", "$"))

        if args.chart:
            report = analytics_svc.get_report(args.year)
            ChartService().save_png(report, args.chart)
    finally:
        db.close()
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
