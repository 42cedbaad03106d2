import main
from database.db_manager import DatabaseManager
from database.category_dao import CategoryDAO
from database.large_expense_dao import LargeExpenseDAO
from database.recurring_dao import RecurringDAO
from database.user_dao import UserDAO
from utils import app_config


def test_startup_passes_and_summary(tmp_path, capsys) -> None:
    db_path = str(tmp_path / "family.db")
    db = DatabaseManager.open(db_path)
    user = UserDAO(db).create("Alice")
    rent = CategoryDAO(db).create("Rent", monthly_budget=1500.0, recurring_only=True)
    RecurringDAO(db).create(user.id, rent.id, 1200.0, 1, "Rent")
    LargeExpenseDAO(db).create(
        user.id, rent.id, 1200.0, 100.0, 1, created_at="2000-01-01 00:00:00"
    )
    db.close()

    chart = tmp_path / "chart.png"
    assert main.main(["--db", db_path, "--period", "month", "--chart", str(chart)]) == 0

    out = capsys.readouterr().out
    assert "Rent" in out
    assert "$1,200.00" in out
    assert chart.exists()

    db = DatabaseManager.open(db_path)
    assert LargeExpenseDAO(db).get_all() == []
    db.close()


def test_numeric_log_level_in_config(tmp_path, monkeypatch) -> None:
    cfg = tmp_path / "config.json"
    app_config.save_config({"log_level": 10}, cfg)
    monkeypatch.setattr(main, "get_log_level", lambda: app_config.get_log_level(cfg))
    assert main.main(["--db", str(tmp_path / "family.db")]) == 0
