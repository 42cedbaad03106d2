import logging
import math
from datetime import datetime

from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from database.large_expense_dao import LargeExpenseDAO
from models.generation import GenerationResult, Installment
from models.large_expense import LargeExpense
from services.installments import build_installment, is_due, persist_installments
from utils.constants import (
    LARGE_EXPENSE_MONTHS, LARGE_NOTE_SUFFIX, LARGE_SENTINEL_NOTE, SOURCE_LARGE,
)
from utils.date_helpers import (
    add_months, format_timestamp, months_between, now as current_time,
    parse_timestamp,
)
from utils.validation import clean_note, parse_amount, parse_day_of_month

logger = logging.getLogger(__name__)


def monthly_installment(total_amount: float) -> int:
    """12-month amortization, rounded up to a whole currency unit."""
    return math.ceil(total_amount / LARGE_EXPENSE_MONTHS)


def large_note(note: str | None) -> str:
    note = clean_note(note)
    return f"{note} {LARGE_NOTE_SUFFIX}" if note else LARGE_SENTINEL_NOTE


def within_amortization_window(definition: LargeExpense, now: datetime) -> bool:
    """True while now falls in one of the 12 months starting at the creation month."""
    created = parse_timestamp(definition.created_at)
    if created is None:
        return True
    elapsed = months_between(created.date(), now.date())
    return 0 <= elapsed < LARGE_EXPENSE_MONTHS


def materialize_large(
    definitions: list[LargeExpense], now: datetime
) -> list[Installment]:
    """Proposals for every active definition due in now's month. No I/O."""
    proposals = []
    for d in definitions:
        if not d.is_active or not within_amortization_window(d, now):
            continue
        if not is_due(d.day_of_month, d.last_generated_date, now):
            continue
        proposals.append(build_installment(
            definition_id=d.id,
            user_id=d.user_id,
            category_id=d.category_id,
            amount=d.monthly_amount,
            note=large_note(d.note),
            day_of_month=d.day_of_month,
            source_type=SOURCE_LARGE,
            now=now,
        ))
    return proposals


class LargeExpenseService:
    def __init__(self, db: DatabaseManager, large_dao: LargeExpenseDAO,
                 expense_dao: ExpenseDAO):
        self._db = db
        self._dao = large_dao
        self._expense_dao = expense_dao

    def get_all(self) -> list[LargeExpense]:
        return self._dao.get_all()

    def get_active(self) -> list[LargeExpense]:
        return self._dao.get_active()

    def get_by_id(self, definition_id: int) -> LargeExpense | None:
        return self._dao.get_by_id(definition_id)

    def create(
        self,
        user_id: int,
        category_id: int,
        total_amount,
        day_of_month=1,
        note: str | None = None,
        created_at: datetime | None = None,
    ) -> LargeExpense:
        total = parse_amount(total_amount)
        day = parse_day_of_month(day_of_month)
        return self._dao.create(
            user_id=user_id,
            category_id=category_id,
            total_amount=total,
            monthly_amount=monthly_installment(total),
            day_of_month=day,
            note=clean_note(note),
            created_at=format_timestamp(created_at) if created_at else None,
        )

    def update(
        self,
        definition_id: int,
        total_amount,
        day_of_month,
        note: str | None = None,
    ) -> LargeExpense | None:
        """Recompute the monthly portion and drop every installment already
        generated, so the next pass regenerates with the corrected amount."""
        total = parse_amount(total_amount)
        day = parse_day_of_month(day_of_month)
        conn = self._db.get_connection()
        try:
            self._dao.update(
                definition_id, total, monthly_installment(total), day,
                clean_note(note), commit=False,
            )
            removed = self._expense_dao.delete_by_source(
                SOURCE_LARGE, definition_id, commit=False
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        logger.info(
            "Updated large expense %s, removed %d installment(s)", definition_id, removed
        )
        return self._dao.get_by_id(definition_id)

    def deactivate(self, definition_id: int) -> int:
        """Soft delete. Returns the number of installments removed."""
        conn = self._db.get_connection()
        try:
            self._dao.set_active(definition_id, False, commit=False)
            removed = self._expense_dao.delete_by_source(
                SOURCE_LARGE, definition_id, commit=False
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        logger.info(
            "Deactivated large expense %s, removed %d installment(s)", definition_id, removed
        )
        return removed

    def due_now(self, now: datetime | None = None) -> list[Installment]:
        return materialize_large(self._dao.get_active(), now or current_time())

    def apply_due(self, now: datetime | None = None) -> GenerationResult:
        ref = now or current_time()
        proposals = materialize_large(self._dao.get_active(), ref)
        return persist_installments(
            self._db, self._expense_dao, self._dao.update_last_generated,
            proposals, SOURCE_LARGE,
        )

    def purge_expired(self, now: datetime | None = None) -> list[int]:
        """Housekeeping: delete definitions created more than 12 months before now.

        Installments already recorded stay as ordinary expenses; only their
        link to the definition is dropped. Returns the purged ids.
        """
        ref = now or current_time()
        cutoff = format_timestamp(add_months(ref, -LARGE_EXPENSE_MONTHS))
        purged = []
        conn = self._db.get_connection()
        for definition in self._dao.get_created_before(cutoff):
            try:
                self._expense_dao.detach_source(SOURCE_LARGE, definition.id, commit=False)
                self._dao.delete(definition.id, commit=False)
                conn.commit()
            except Exception:
                conn.rollback()
                logger.exception("Could not purge large expense %s", definition.id)
                continue
            purged.append(definition.id)
            logger.info(
                "Purged large expense %s created %s", definition.id, definition.created_at
            )
        return purged
