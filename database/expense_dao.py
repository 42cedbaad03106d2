from typing import Optional
from database.db_manager import DatabaseManager
from models.expense import Expense


class ExpenseDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Expense:
        return Expense(
            id=row["id"],
            user_id=row["user_id"],
            category_id=row["category_id"],
            amount=row["amount"],
            note=row["note"],
            created_at=row["created_at"],
            source_type=row["source_type"],
            source_definition_id=row["source_definition_id"],
            installment_month=row["installment_month"],
        )

    def get_all(self) -> list[Expense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM expenses ORDER BY created_at ASC, id ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM expenses WHERE id = ?", (expense_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_in_range(self, start: str, end: str) -> list[Expense]:
        """Expenses with start <= created_at <= end (timestamp strings)."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM expenses
               WHERE created_at >= ? AND created_at <= ?
               ORDER BY created_at ASC, id ASC""",
            (start, end),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_source(self, source_type: str, definition_id: int) -> list[Expense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM expenses
               WHERE source_type = ? AND source_definition_id = ?
               ORDER BY created_at ASC, id ASC""",
            (source_type, definition_id),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_earliest_created_at(self) -> Optional[str]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT MIN(created_at) AS earliest FROM expenses").fetchone()
        return row["earliest"] if row else None

    def has_any_for_category(self, category_id: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT 1 FROM expenses WHERE category_id = ? LIMIT 1", (category_id,)
        ).fetchone()
        return row is not None

    def create(self, expense: Expense, commit: bool = True) -> Expense:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO expenses
               (user_id, category_id, amount, note, created_at,
                source_type, source_definition_id, installment_month)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                expense.user_id, expense.category_id, expense.amount,
                expense.note, expense.created_at, expense.source_type,
                expense.source_definition_id, expense.installment_month,
            ),
        )
        if commit:
            conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        expense_id: int,
        user_id: int,
        category_id: int,
        amount: float,
        note: str | None,
    ) -> Optional[Expense]:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE expenses
               SET user_id=?, category_id=?, amount=?, note=?
               WHERE id=?""",
            (user_id, category_id, amount, note, expense_id),
        )
        conn.commit()
        return self.get_by_id(expense_id)

    def delete(self, expense_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
        conn.commit()

    def delete_by_source(self, source_type: str, definition_id: int,
                         commit: bool = True) -> int:
        """Hard-delete every installment materialized from one definition."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM expenses WHERE source_type = ? AND source_definition_id = ?",
            (source_type, definition_id),
        )
        if commit:
            conn.commit()
        return cursor.rowcount

    def detach_source(self, source_type: str, definition_id: int,
                      commit: bool = True) -> int:
        """Keep the installments as history but drop their link to the definition."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE expenses SET source_definition_id = NULL
               WHERE source_type = ? AND source_definition_id = ?""",
            (source_type, definition_id),
        )
        if commit:
            conn.commit()
        return cursor.rowcount
