from typing import Optional
from database.db_manager import DatabaseManager
from models.large_expense import LargeExpense


class LargeExpenseDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> LargeExpense:
        return LargeExpense(
            id=row["id"],
            user_id=row["user_id"],
            category_id=row["category_id"],
            total_amount=row["total_amount"],
            monthly_amount=row["monthly_amount"],
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
            SELECT l.*,
                   u.name AS user_name,
                   c.name AS category_name
            FROM large_expenses l
            JOIN users u ON l.user_id = u.id
            JOIN categories c ON l.category_id = c.id
        """

    def get_all(self) -> list[LargeExpense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " ORDER BY l.created_at DESC, l.id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[LargeExpense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE l.is_active = 1 ORDER BY l.created_at DESC, l.id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, definition_id: int) -> Optional[LargeExpense]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE l.id = ?", (definition_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_created_before(self, cutoff: str) -> list[LargeExpense]:
        """Every definition (active or not) created strictly before cutoff."""
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE l.created_at < ? ORDER BY l.created_at, l.id",
            (cutoff,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def has_active_for_category(self, category_id: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT 1 FROM large_expenses WHERE category_id = ? AND is_active = 1 LIMIT 1",
            (category_id,),
        ).fetchone()
        return row is not None

    def create(
        self,
        user_id: int,
        category_id: int,
        total_amount: float,
        monthly_amount: float,
        day_of_month: int,
        note: str | None = None,
        created_at: str | None = None,
    ) -> LargeExpense:
        conn = self._db.get_connection()
        if created_at:
            cursor = conn.execute(
                """INSERT INTO large_expenses
                   (user_id, category_id, total_amount, monthly_amount, note,
                    day_of_month, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (user_id, category_id, total_amount, monthly_amount, note,
                 day_of_month, created_at, created_at),
            )
        else:
            cursor = conn.execute(
                """INSERT INTO large_expenses
                   (user_id, category_id, total_amount, monthly_amount, note,
                    day_of_month)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (user_id, category_id, total_amount, monthly_amount, note,
                 day_of_month),
            )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        definition_id: int,
        total_amount: float,
        monthly_amount: float,
        day_of_month: int,
        note: str | None,
        commit: bool = True,
    ):
        """Rewrite the amortization and reset last_generated_date so the month regenerates."""
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE large_expenses SET
               total_amount=?, monthly_amount=?, note=?, day_of_month=?,
               last_generated_date=NULL,
               updated_at=datetime('now', 'localtime')
               WHERE id=?""",
            (total_amount, monthly_amount, note, day_of_month, definition_id),
        )
        if commit:
            conn.commit()

    def set_active(self, definition_id: int, is_active: bool, commit: bool = True):
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE large_expenses
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
            "UPDATE large_expenses SET last_generated_date = ? WHERE id = ?",
            (date_str, definition_id),
        )
        if commit:
            conn.commit()

    def delete(self, definition_id: int, commit: bool = True):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM large_expenses WHERE id = ?", (definition_id,))
        if commit:
            conn.commit()
