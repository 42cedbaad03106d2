import sqlite3
from datetime import datetime

import pytest

from models.recurring_expense import RecurringExpense
from services.installments import is_due, target_date
from services.recurring_service import materialize_recurring, recurring_note
from utils.constants import RECURRING_SENTINEL_NOTE, SOURCE_RECURRING
from utils.errors import InvalidAmount, InvalidDayOfMonth


def _definition(**overrides) -> RecurringExpense:
    fields = dict(
        id=1, user_id=1, category_id=1, amount=1200.0, day_of_month=1,
        note="Rent", is_active=True, last_generated_date=None,
    )
    fields.update(overrides)
    return RecurringExpense(**fields)


def test_target_day_is_clamped_to_month_length() -> None:
    assert target_date(31, datetime(2024, 4, 10)).day == 30
    assert target_date(31, datetime(2023, 2, 10)).day == 28
    assert target_date(31, datetime(2024, 2, 10)).day == 29
    assert target_date(15, datetime(2024, 2, 10)).day == 15


def test_not_due_before_target_day() -> None:
    assert not is_due(15, None, datetime(2024, 3, 14, 23, 59))
    assert is_due(15, None, datetime(2024, 3, 15, 0, 1))


def test_day_31_fires_on_last_day_of_short_month() -> None:
    assert is_due(31, None, datetime(2024, 4, 30, 9, 0))
    assert not is_due(31, None, datetime(2024, 4, 29, 9, 0))


def test_not_due_twice_in_same_month() -> None:
    assert not is_due(1, "2024-03-01", datetime(2024, 3, 20))
    assert is_due(1, "2024-02-01", datetime(2024, 3, 20))


def test_materialize_builds_installment_on_target_day() -> None:
    proposals = materialize_recurring([_definition(day_of_month=31)], datetime(2024, 4, 30, 9, 15))
    assert len(proposals) == 1
    expense = proposals[0].expense
    assert expense.created_at == "2024-04-30 00:00:00"
    assert expense.installment_month == "2024-04"
    assert expense.source_type == SOURCE_RECURRING
    assert expense.source_definition_id == 1
    assert expense.note == "Rent (Auto-generated)"
    assert proposals[0].last_generated_date == "2024-04-30"


def test_materialize_skips_inactive() -> None:
    assert materialize_recurring([_definition(is_active=False)], datetime(2024, 4, 30)) == []


def test_blank_note_uses_sentinel() -> None:
    assert recurring_note(None) == RECURRING_SENTINEL_NOTE
    assert recurring_note("   ") == RECURRING_SENTINEL_NOTE


def test_apply_due_is_idempotent_within_month(services, daos, alice, rent) -> None:
    defn = services.recurring.create(alice.id, rent.id, 1200, 1, "Rent")
    first = services.recurring.apply_due(datetime(2024, 3, 5, 8, 0))
    second = services.recurring.apply_due(datetime(2024, 3, 25, 8, 0))
    assert len(first.created) == 1
    assert second.created == [] and second.ok
    rows = daos.expenses.get_by_source(SOURCE_RECURRING, defn.id)
    assert len(rows) == 1
    assert daos.recurring.get_by_id(defn.id).last_generated_date == "2024-03-05"


def test_apply_due_generates_again_next_month(services, daos, alice, rent) -> None:
    defn = services.recurring.create(alice.id, rent.id, 1200, 1)
    services.recurring.apply_due(datetime(2024, 3, 5))
    result = services.recurring.apply_due(datetime(2024, 4, 2))
    assert [e.installment_month for e in result.created] == ["2024-04"]
    assert len(daos.expenses.get_by_source(SOURCE_RECURRING, defn.id)) == 2


def test_duplicate_installment_is_skipped_and_marked(services, daos, alice, rent) -> None:
    defn = services.recurring.create(alice.id, rent.id, 50, 1)
    services.recurring.apply_due(datetime(2024, 3, 5))
    # lose the bookkeeping so the definition looks due again
    daos.recurring.update_last_generated(defn.id, None)
    result = services.recurring.apply_due(datetime(2024, 3, 6))
    assert result.created == []
    assert result.skipped == [defn.id]
    assert result.ok
    assert len(daos.expenses.get_by_source(SOURCE_RECURRING, defn.id)) == 1
    assert daos.recurring.get_by_id(defn.id).last_generated_date == "2024-03-06"


def test_one_failing_definition_does_not_block_others(
    services, daos, alice, rent, monkeypatch
) -> None:
    ok_defn = services.recurring.create(alice.id, rent.id, 100, 1, "Water")
    bad_defn = services.recurring.create(alice.id, rent.id, 200, 1, "Power")
    real_create = daos.expenses.create

    def flaky_create(expense, commit=True):
        if expense.source_definition_id == bad_defn.id:
            raise sqlite3.OperationalError("disk I/O error")
        return real_create(expense, commit=commit)

    monkeypatch.setattr(daos.expenses, "create", flaky_create)
    result = services.recurring.apply_due(datetime(2024, 3, 5))

    assert [e.source_definition_id for e in result.created] == [ok_defn.id]
    assert [f.definition_id for f in result.failures] == [bad_defn.id]
    assert not result.ok
    # failed definition is left due for the next pass
    assert daos.recurring.get_by_id(bad_defn.id).last_generated_date is None
    assert daos.recurring.get_by_id(ok_defn.id).last_generated_date == "2024-03-05"


def test_update_removes_generated_and_regenerates(services, daos, alice, rent) -> None:
    defn = services.recurring.create(alice.id, rent.id, 1200, 1, "Rent")
    services.recurring.apply_due(datetime(2024, 3, 5))
    updated = services.recurring.update(defn.id, 1300, 3, "Rent")
    assert updated.amount == 1300
    assert updated.last_generated_date is None
    assert daos.expenses.get_by_source(SOURCE_RECURRING, defn.id) == []

    result = services.recurring.apply_due(datetime(2024, 3, 5))
    assert [e.amount for e in result.created] == [1300]
    assert result.created[0].created_at == "2024-03-03 00:00:00"


def test_deactivate_removes_generated_and_stops(services, daos, alice, rent) -> None:
    defn = services.recurring.create(alice.id, rent.id, 1200, 1)
    services.recurring.apply_due(datetime(2024, 3, 5))
    assert services.recurring.deactivate(defn.id) == 1
    assert daos.expenses.get_by_source(SOURCE_RECURRING, defn.id) == []
    assert services.recurring.apply_due(datetime(2024, 4, 5)).created == []
    assert services.recurring.get_active() == []


def test_create_validates_input(services, alice, rent) -> None:
    with pytest.raises(InvalidAmount):
        services.recurring.create(alice.id, rent.id, 0, 1)
    with pytest.raises(InvalidDayOfMonth):
        services.recurring.create(alice.id, rent.id, 10, 32)
    with pytest.raises(InvalidDayOfMonth):
        services.recurring.create(alice.id, rent.id, 10, 0)
