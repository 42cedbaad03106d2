import sqlite3

import pytest

from database.db_manager import DatabaseManager
from models.category import Category
from models.expense import Expense


def test_defaults_seeded_and_settings_persist(tmp_path) -> None:
    path = str(tmp_path / "nested" / "budget.db")
    db = DatabaseManager.open(path)
    assert db.get_setting("default_period") == "month"
    assert db.get_setting("currency_symbol") == "$"
    db.set_setting("default_period", "week")
    db.close()

    db = DatabaseManager.open(path)
    assert db.get_setting("default_period") == "week"
    assert db.get_setting("missing", "fallback") == "fallback"
    db.close()


def test_open_migrates_older_schema(tmp_path) -> None:
    path = str(tmp_path / "old.db")
    conn = sqlite3.connect(path)
    conn.executescript("""
        CREATE TABLE categories (id INTEGER PRIMARY KEY, name TEXT NOT NULL,
            color TEXT NOT NULL DEFAULT '#888888', budget REAL,
            is_recurring_only INTEGER NOT NULL DEFAULT 0,
            is_large_expense_only INTEGER NOT NULL DEFAULT 0);
        CREATE TABLE large_expenses (id INTEGER PRIMARY KEY, user_id INTEGER NOT NULL,
            category_id INTEGER NOT NULL, total_amount REAL NOT NULL,
            monthly_amount REAL NOT NULL, note TEXT, day_of_month INTEGER NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL, updated_at TEXT NOT NULL);
    """)
    conn.close()

    db = DatabaseManager.open(path)
    conn = db.get_connection()
    cols = {r[1] for r in conn.execute("PRAGMA table_info(categories)")}
    assert "linked_to_normal" in cols
    cols = {r[1] for r in conn.execute("PRAGMA table_info(large_expenses)")}
    assert "last_generated_date" in cols
    db.close()


def test_one_installment_per_month_enforced(daos, alice, rent) -> None:
    def installment():
        return Expense(
            id=None, user_id=alice.id, category_id=rent.id, amount=10.0, note=None,
            created_at="2024-03-01 00:00:00", source_type="recurring",
            source_definition_id=1, installment_month="2024-03",
        )

    daos.expenses.create(installment())
    with pytest.raises(sqlite3.IntegrityError):
        daos.expenses.create(installment())


def test_category_flow_flags() -> None:
    assert Category(1, "Food").is_normal
    rent = Category(2, "Rent", recurring_only=True)
    assert rent.flow == "recurring" and not rent.is_normal
    rent.linked_to_normal = True
    assert rent.is_normal
    assert Category(3, "Sofa", large_expense_only=True).flow == "large"
