import logging
import os
import sqlite3

from utils.constants import DB_FILE, DEFAULT_PERIOD

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()
        logger.debug("Database ready at %s", self.db_path)

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(categories)").fetchall()}
        if "linked_to_normal" not in cols:
            conn.execute(
                "ALTER TABLE categories ADD COLUMN linked_to_normal INTEGER NOT NULL DEFAULT 0"
            )
        cols = {row[1] for row in conn.execute("PRAGMA table_info(large_expenses)").fetchall()}
        if "last_generated_date" not in cols:
            conn.execute("ALTER TABLE large_expenses ADD COLUMN last_generated_date TEXT")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id     INTEGER PRIMARY KEY AUTOINCREMENT,
                name   TEXT NOT NULL,
                color  TEXT NOT NULL DEFAULT '#888888'
            );

            CREATE TABLE IF NOT EXISTS categories (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                name                TEXT NOT NULL,
                color               TEXT NOT NULL DEFAULT '#888888',
                budget              REAL CHECK(budget IS NULL OR budget >= 0),
                is_recurring_only   INTEGER NOT NULL DEFAULT 0,
                is_large_expense_only INTEGER NOT NULL DEFAULT 0,
                linked_to_normal    INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS recurring_expenses (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id             INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                category_id         INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
                amount              REAL NOT NULL CHECK(amount > 0),
                note                TEXT,
                day_of_month        INTEGER NOT NULL CHECK(day_of_month BETWEEN 1 AND 31),
                is_active           INTEGER NOT NULL DEFAULT 1,
                last_generated_date TEXT,
                created_at          TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
                updated_at          TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
            );

            CREATE TABLE IF NOT EXISTS large_expenses (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id             INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                category_id         INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
                total_amount        REAL NOT NULL CHECK(total_amount > 0),
                monthly_amount      REAL NOT NULL CHECK(monthly_amount > 0),
                note                TEXT,
                day_of_month        INTEGER NOT NULL CHECK(day_of_month BETWEEN 1 AND 31),
                is_active           INTEGER NOT NULL DEFAULT 1,
                last_generated_date TEXT,
                created_at          TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
                updated_at          TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
            );

            CREATE TABLE IF NOT EXISTS expenses (
                id                   INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id              INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                category_id          INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
                amount               REAL NOT NULL CHECK(amount > 0),
                note                 TEXT,
                created_at           TEXT NOT NULL DEFAULT (datetime('now', 'localtime')),
                source_type          TEXT CHECK(source_type IN ('recurring','large')),
                source_definition_id INTEGER,
                installment_month    TEXT
            );

            CREATE TABLE IF NOT EXISTS income (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                amount      REAL NOT NULL CHECK(amount > 0),
                note        TEXT,
                created_at  TEXT NOT NULL DEFAULT (datetime('now', 'localtime'))
            );

            CREATE INDEX IF NOT EXISTS idx_expenses_created_at  ON expenses(created_at);
            CREATE INDEX IF NOT EXISTS idx_expenses_category_id ON expenses(category_id);
            CREATE INDEX IF NOT EXISTS idx_income_created_at    ON income(created_at);

            -- at most one materialized installment per definition per month
            CREATE UNIQUE INDEX IF NOT EXISTS idx_expenses_installment
                ON expenses(source_type, source_definition_id, installment_month)
                WHERE source_type IS NOT NULL;

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("currency_symbol", "$"),
            ("default_period", DEFAULT_PERIOD),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_path: str) -> "DatabaseManager":
        """Startup factory: creates the parent folder if needed, then initializes."""
        folder = os.path.dirname(db_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
