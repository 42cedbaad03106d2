import logging
from datetime import datetime

from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from database.recurring_dao import RecurringDAO
from models.generation import GenerationResult, Installment
from models.recurring_expense import RecurringExpense
from services.installments import build_installment, is_due, persist_installments
from utils.constants import (
    RECURRING_NOTE_SUFFIX, RECURRING_SENTINEL_NOTE, SOURCE_RECURRING,
)
from utils.date_helpers import format_timestamp, now as current_time
from utils.validation import clean_note, parse_amount, parse_day_of_month

logger = logging.getLogger(__name__)


def recurring_note(note: str | None) -> str:
    note = clean_note(note)
    return f"{note} {RECURRING_NOTE_SUFFIX}" if note else RECURRING_SENTINEL_NOTE


def materialize_recurring(
    definitions: list[RecurringExpense], now: datetime
) -> list[Installment]:
    """Proposals for every active definition due in now's month. No I/O."""
    proposals = []
    for d in definitions:
        if not d.is_active:
            continue
        if not is_due(d.day_of_month, d.last_generated_date, now):
            continue
        proposals.append(build_installment(
            definition_id=d.id,
            user_id=d.user_id,
            category_id=d.category_id,
            amount=d.amount,
            note=recurring_note(d.note),
            day_of_month=d.day_of_month,
            source_type=SOURCE_RECURRING,
            now=now,
        ))
    return proposals


class RecurringService:
    def __init__(self, db: DatabaseManager, recurring_dao: RecurringDAO,
                 expense_dao: ExpenseDAO):
        self._db = db
        self._dao = recurring_dao
        self._expense_dao = expense_dao

    def get_all(self) -> list[RecurringExpense]:
        return self._dao.get_all()

    def get_active(self) -> list[RecurringExpense]:
        return self._dao.get_active()

    def get_by_id(self, definition_id: int) -> RecurringExpense | None:
        return self._dao.get_by_id(definition_id)

    def create(
        self,
        user_id: int,
        category_id: int,
        amount,
        day_of_month,
        note: str | None = None,
        created_at: datetime | None = None,
    ) -> RecurringExpense:
        amount = parse_amount(amount)
        day = parse_day_of_month(day_of_month)
        return self._dao.create(
            user_id=user_id,
            category_id=category_id,
            amount=amount,
            day_of_month=day,
            note=clean_note(note),
            created_at=format_timestamp(created_at) if created_at else None,
        )

    def update(
        self,
        definition_id: int,
        amount,
        day_of_month,
        note: str | None = None,
    ) -> RecurringExpense | None:
        """Rewrite the schedule; this month's installment is dropped and regenerated
        on the next pass with the new amount and day."""
        amount = parse_amount(amount)
        day = parse_day_of_month(day_of_month)
        conn = self._db.get_connection()
        try:
            self._dao.update(definition_id, amount, day, clean_note(note), commit=False)
            removed = self._expense_dao.delete_by_source(
                SOURCE_RECURRING, definition_id, commit=False
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        logger.info(
            "Updated recurring definition %s, removed %d generated expense(s)",
            definition_id, removed,
        )
        return self._dao.get_by_id(definition_id)

    def deactivate(self, definition_id: int) -> int:
        """Soft delete. Returns the number of generated expenses removed."""
        conn = self._db.get_connection()
        try:
            self._dao.set_active(definition_id, False, commit=False)
            removed = self._expense_dao.delete_by_source(
                SOURCE_RECURRING, definition_id, commit=False
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        logger.info(
            "Deactivated recurring definition %s, removed %d generated expense(s)",
            definition_id, removed,
        )
        return removed

    def due_now(self, now: datetime | None = None) -> list[Installment]:
        return materialize_recurring(self._dao.get_active(), now or current_time())

    def apply_due(self, now: datetime | None = None) -> GenerationResult:
        """Materialize this month's installment for every due definition."""
        ref = now or current_time()
        proposals = materialize_recurring(self._dao.get_active(), ref)
        return persist_installments(
            self._db, self._expense_dao, self._dao.update_last_generated,
            proposals, SOURCE_RECURRING,
        )
