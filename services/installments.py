"""Shared due-date rules and the per-definition write loop used by the
recurring and large-expense materializers.

A definition produces at most one Expense per calendar month: it is due when
today has reached this month's target day (clamped to the month's length) and
its last_generated_date falls in a strictly earlier month.
"""
import logging
import sqlite3
from datetime import date, datetime, time
from typing import Callable

from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from models.expense import Expense
from models.generation import GenerationResult, Installment
from utils.date_helpers import (
    clamp_day_to_month, format_date, format_month, format_timestamp,
    month_key, parse_date,
)
from utils.errors import GenerationFailure

logger = logging.getLogger(__name__)


def target_date(day_of_month: int, ref: date) -> date:
    """This month's generation day for ref, clamped (day 31 in a 30-day month -> 30)."""
    return date(ref.year, ref.month, clamp_day_to_month(ref.year, ref.month, day_of_month))


def is_due(day_of_month: int, last_generated_date: str | None, now: datetime) -> bool:
    if now.date() < target_date(day_of_month, now):
        return False
    last = parse_date(last_generated_date) if last_generated_date else None
    if last is None:
        return True
    return month_key(last) < month_key(now)


def build_installment(
    definition_id: int,
    user_id: int,
    category_id: int,
    amount: float,
    note: str,
    day_of_month: int,
    source_type: str,
    now: datetime,
) -> Installment:
    due_on = target_date(day_of_month, now)
    expense = Expense(
        id=None,
        user_id=user_id,
        category_id=category_id,
        amount=amount,
        note=note,
        created_at=format_timestamp(datetime.combine(due_on, time.min)),
        source_type=source_type,
        source_definition_id=definition_id,
        installment_month=format_month(due_on),
    )
    return Installment(
        definition_id=definition_id,
        expense=expense,
        last_generated_date=format_date(now),
    )


def _is_duplicate_installment(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(exc)


def persist_installments(
    db: DatabaseManager,
    expense_dao: ExpenseDAO,
    mark_generated: Callable[..., None],
    installments: list[Installment],
    source_type: str,
) -> GenerationResult:
    """Write each installment and its last_generated_date in one transaction.

    One definition failing is logged and collected; the rest still run.
    """
    result = GenerationResult()
    conn = db.get_connection()
    for inst in installments:
        try:
            created = expense_dao.create(inst.expense, commit=False)
            mark_generated(inst.definition_id, inst.last_generated_date, commit=False)
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if _is_duplicate_installment(exc):
                # Another pass already materialized this month.
                logger.warning(
                    "%s definition %s already materialized for %s",
                    source_type, inst.definition_id, inst.expense.installment_month,
                )
                try:
                    mark_generated(inst.definition_id, inst.last_generated_date, commit=True)
                except Exception as mark_exc:
                    conn.rollback()
                    result.failures.append(
                        GenerationFailure(inst.definition_id, source_type, mark_exc)
                    )
                    logger.exception(
                        "Could not record generation date for %s definition %s",
                        source_type, inst.definition_id,
                    )
                    continue
                result.skipped.append(inst.definition_id)
                continue
            result.failures.append(GenerationFailure(inst.definition_id, source_type, exc))
            logger.error(
                "Could not materialize %s definition %s: %s",
                source_type, inst.definition_id, exc,
            )
            continue
        except Exception as exc:
            conn.rollback()
            result.failures.append(GenerationFailure(inst.definition_id, source_type, exc))
            logger.exception(
                "Could not materialize %s definition %s", source_type, inst.definition_id
            )
            continue
        result.created.append(created)
        logger.info(
            "Materialized %s definition %s: %.2f on %s",
            source_type, inst.definition_id, created.amount, created.created_at,
        )
    return result
