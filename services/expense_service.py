import logging
from datetime import date, datetime

from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO
from models.expense import Expense
from services.period_service import period_bounds
from utils.date_helpers import format_timestamp, now as current_time
from utils.validation import clean_note, parse_amount

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(self, expense_dao: ExpenseDAO, category_dao: CategoryDAO):
        self._dao = expense_dao
        self._category_dao = category_dao

    def get_for_period(self, period: str, ref: date | None = None) -> list[Expense]:
        start, end = period_bounds(period, ref or current_time())
        return self._dao.get_in_range(format_timestamp(start), format_timestamp(end))

    def get_in_range(self, start: datetime, end: datetime) -> list[Expense]:
        return self._dao.get_in_range(format_timestamp(start), format_timestamp(end))

    def create(
        self,
        user_id: int,
        category_id: int,
        amount,
        note: str | None = None,
        created_at: datetime | None = None,
    ) -> Expense:
        amount = parse_amount(amount)
        self._require_category(category_id)
        expense = Expense(
            id=None,
            user_id=user_id,
            category_id=category_id,
            amount=amount,
            note=clean_note(note),
            created_at=format_timestamp(created_at or current_time()),
        )
        created = self._dao.create(expense)
        logger.debug("Added expense %s: %.2f in category %s", created.id, amount, category_id)
        return created

    def update(
        self,
        expense_id: int,
        user_id: int,
        category_id: int,
        amount,
        note: str | None = None,
    ) -> Expense | None:
        amount = parse_amount(amount)
        self._require_category(category_id)
        return self._dao.update(expense_id, user_id, category_id, amount, clean_note(note))

    def delete(self, expense_id: int):
        self._dao.delete(expense_id)

    def _require_category(self, category_id: int):
        if self._category_dao.get_by_id(category_id) is None:
            raise ValueError(f"Category {category_id} does not exist.")
