from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring_expense import RecurringExpense


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringExpense:
        return RecurringExpense(
            id=row["id"],
            user_id=row["user_id"],
            category_id=row["category_id"],
            amount=row["amount"],
            day_of_month=row["day_of_month"],
            note=row["note"],
            is_active=bool(row["is_active"]),
            last_generated_date=row["last_generated_date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            user_name=row["user_name"] if "user_name" in row.keys() else "",
            category_name=row["category_name"] if "category_name" in row.keys() else "",
        )

    def _select(self) -> str:
        return """
            SELECT r.*,
                   u.name AS user_name,
                   c.name AS category_name
            FROM recurring_expenses r
            JOIN users u ON r.user_id = u.id
            JOIN categories c ON r.category_id = c.id
        """

    def get_all(self) -> list[RecurringExpense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " ORDER BY r.day_of_month, r.id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[RecurringExpense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE r.is_active = 1 ORDER BY r.day_of_month, r.id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, definition_id: int) -> Optional[RecurringExpense]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE r.id = ?", (definition_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def has_active_for_category(self, category_id: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT 1 FROM recurring_expenses WHERE category_id = ? AND is_active = 1 LIMIT 1",
            (category_id,),
        ).fetchone()
        return row is not None

    def create(
        self,
        user_id: int,
        category_id: int,
        amount: float,
        day_of_month: int,
        note: str | None = None,
        created_at: str | None = None,
    ) -> RecurringExpense:
        conn = self._db.get_connection()
        if created_at:
            cursor = conn.execute(
                """INSERT INTO recurring_expenses
                   (user_id, category_id, amount, note, day_of_month,
                    created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (user_id, category_id, amount, note, day_of_month,
                 created_at, created_at),
            )
        else:
            cursor = conn.execute(
                """INSERT INTO recurring_expenses
                   (user_id, category_id, amount, note, day_of_month)
                   VALUES (?, ?, ?, ?, ?)""",
                (user_id, category_id, amount, note, day_of_month),
            )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        definition_id: int,
        amount: float,
        day_of_month: int,
        note: str | None,
        commit: bool = True,
    ):
        """Rewrite the schedule and reset last_generated_date so the month regenerates."""
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_expenses SET
               amount=?, note=?, day_of_month=?, last_generated_date=NULL,
               updated_at=datetime('now', 'localtime')
               WHERE id=?""",
            (amount, note, day_of_month, definition_id),
        )
        if commit:
            conn.commit()

    def set_active(self, definition_id: int, is_active: bool, commit: bool = True):
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_expenses
               SET is_active = ?, updated_at = datetime('now', 'localtime')
               WHERE id = ?""",
            (1 if is_active else 0, definition_id),
        )
        if commit:
            conn.commit()

    def update_last_generated(self, definition_id: int, date_str: str,
                              commit: bool = True):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_expenses SET last_generated_date = ? WHERE id = ?",
            (date_str, definition_id),
        )
        if commit:
            conn.commit()

    def delete(self, definition_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_expenses WHERE id = ?", (definition_id,))
        conn.commit()
