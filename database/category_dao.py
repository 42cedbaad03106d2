from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category
from utils.constants import FLOW_LARGE, FLOW_NORMAL, FLOW_RECURRING


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            color=row["color"],
            monthly_budget=row["budget"],
            recurring_only=bool(row["is_recurring_only"]),
            large_expense_only=bool(row["is_large_expense_only"]),
            linked_to_normal=bool(row["linked_to_normal"]),
        )

    def get_all(self) -> list[Category]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT * FROM categories ORDER BY name, id"
            ).fetchall()
            self._all_cache = [self._row_to_model(r) for r in rows]
        return list(self._all_cache)

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_flow(self, flow: str) -> list[Category]:
        """flow: 'normal', 'recurring' or 'large'. Normal includes linked categories."""
        conn = self._db.get_connection()
        if flow == FLOW_RECURRING:
            where = "is_recurring_only = 1"
        elif flow == FLOW_LARGE:
            where = "is_large_expense_only = 1"
        elif flow == FLOW_NORMAL:
            where = ("(is_recurring_only = 0 AND is_large_expense_only = 0)"
                     " OR linked_to_normal = 1")
        else:
            raise ValueError(f"Unknown category flow: {flow}")
        rows = conn.execute(
            f"SELECT * FROM categories WHERE {where} ORDER BY name, id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(
        self,
        name: str,
        color: str = "#888888",
        monthly_budget: float | None = None,
        recurring_only: bool = False,
        large_expense_only: bool = False,
    ) -> Category:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO categories
               (name, color, budget, is_recurring_only, is_large_expense_only)
               VALUES (?, ?, ?, ?, ?)""",
            (name, color, monthly_budget,
             1 if recurring_only else 0, 1 if large_expense_only else 0),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(cursor.lastrowid)

    def update(self, category_id: int, name: str, color: str) -> Optional[Category]:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE categories SET name=?, color=? WHERE id=?",
            (name, color, category_id),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(category_id)

    def set_budget(self, category_id: int, monthly_budget: float | None) -> Optional[Category]:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE categories SET budget = ? WHERE id = ?",
            (monthly_budget, category_id),
        )
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(category_id)

    def set_linked_to_normal(self, category_id: int, linked: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE categories SET linked_to_normal = ? WHERE id = ?",
            (1 if linked else 0, category_id),
        )
        conn.commit()
        self._invalidate_cache()

    def delete(self, category_id: int):
        """Delete the category and its expenses in one transaction."""
        conn = self._db.get_connection()
        try:
            conn.execute("DELETE FROM expenses WHERE category_id = ?", (category_id,))
            conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._invalidate_cache()
