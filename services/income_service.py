"""Income is entered per bi-weekly paycheck and stored as a monthly figure
(two pay periods per month)."""
import logging
from datetime import datetime

from database.income_dao import IncomeDAO
from models.income import Income
from services.summary_service import incomes_for_range
from utils.constants import INCOME_PAY_PERIODS_PER_MONTH, RECENT_INCOME_LIMIT
from utils.date_helpers import format_timestamp, month_bounds, now as current_time
from utils.validation import clean_note, parse_amount

logger = logging.getLogger(__name__)


def default_income_note(bi_weekly_amount: float) -> str:
    return f"Bi-weekly: ${bi_weekly_amount:.2f}"


class IncomeService:
    def __init__(self, income_dao: IncomeDAO):
        self._dao = income_dao

    def add(
        self,
        user_id: int,
        bi_weekly_amount,
        note: str | None = None,
        created_at: datetime | None = None,
    ) -> Income:
        amount = parse_amount(bi_weekly_amount)
        income = self._dao.create(
            user_id,
            amount * INCOME_PAY_PERIODS_PER_MONTH,
            clean_note(note) or default_income_note(amount),
            format_timestamp(created_at or current_time()),
        )
        logger.info("Recorded income %s: %.2f per month", income.id, income.amount)
        return income

    def edit(self, income_id: int, bi_weekly_amount, note: str | None = None) -> Income | None:
        amount = parse_amount(bi_weekly_amount)
        return self._dao.update(
            income_id,
            amount * INCOME_PAY_PERIODS_PER_MONTH,
            clean_note(note) or default_income_note(amount),
        )

    def delete(self, income_id: int):
        self._dao.delete(income_id)

    def recent(self, limit: int = RECENT_INCOME_LIMIT) -> list[Income]:
        return self._dao.get_recent(limit)

    def monthly_total(self, now: datetime | None = None) -> float:
        """Income for now's month, falling back to every entry when the month has none."""
        ref = now or current_time()
        start, end = month_bounds(ref.year, ref.month)
        return sum(i.amount for i in incomes_for_range(self._dao.get_all(), start, end))
