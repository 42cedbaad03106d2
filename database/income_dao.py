from typing import Optional
from database.db_manager import DatabaseManager
from models.income import Income


class IncomeDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Income:
        return Income(
            id=row["id"],
            user_id=row["user_id"],
            amount=row["amount"],
            note=row["note"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Income]:
        """Newest first."""
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM income ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_recent(self, limit: int) -> list[Income]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM income ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, income_id: int) -> Optional[Income]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM income WHERE id = ?", (income_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def get_earliest_created_at(self) -> Optional[str]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT MIN(created_at) AS earliest FROM income").fetchone()
        return row["earliest"] if row else None

    def create(self, user_id: int, amount: float, note: str | None,
               created_at: str) -> Income:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO income(user_id, amount, note, created_at) VALUES (?, ?, ?, ?)",
            (user_id, amount, note, created_at),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(self, income_id: int, amount: float, note: str | None) -> Optional[Income]:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE income SET amount = ?, note = ? WHERE id = ?",
            (amount, note, income_id),
        )
        conn.commit()
        return self.get_by_id(income_id)

    def delete(self, income_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM income WHERE id = ?", (income_id,))
        conn.commit()
