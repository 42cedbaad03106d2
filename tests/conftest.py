from types import SimpleNamespace

import pytest

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.large_expense_dao import LargeExpenseDAO
from database.recurring_dao import RecurringDAO
from database.user_dao import UserDAO
from services.analytics_service import AnalyticsService
from services.category_service import CategoryService
from services.expense_service import ExpenseService
from services.income_service import IncomeService
from services.large_expense_service import LargeExpenseService
from services.recurring_service import RecurringService
from services.summary_service import SummaryService
from services.user_service import UserService


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager.open(str(tmp_path / "budget.db"))
    yield manager
    manager.close()


@pytest.fixture
def daos(db):
    return SimpleNamespace(
        users=UserDAO(db),
        categories=CategoryDAO(db),
        expenses=ExpenseDAO(db),
        income=IncomeDAO(db),
        recurring=RecurringDAO(db),
        large=LargeExpenseDAO(db),
    )


@pytest.fixture
def services(db, daos):
    return SimpleNamespace(
        recurring=RecurringService(db, daos.recurring, daos.expenses),
        large=LargeExpenseService(db, daos.large, daos.expenses),
        summary=SummaryService(daos.categories, daos.expenses, daos.income, daos.users),
        analytics=AnalyticsService(daos.users, daos.categories, daos.expenses, daos.income),
        categories=CategoryService(daos.categories, daos.expenses, daos.recurring, daos.large),
        expenses=ExpenseService(daos.expenses, daos.categories),
        income=IncomeService(daos.income),
        users=UserService(daos.users),
    )


@pytest.fixture
def alice(daos):
    return daos.users.create("Alice", "#3B82F6")


@pytest.fixture
def bob(daos):
    return daos.users.create("Bob", "#EC4899")


@pytest.fixture
def groceries(daos):
    return daos.categories.create("Groceries", "#10B981", 400.0)


@pytest.fixture
def rent(daos):
    return daos.categories.create("Rent", "#F59E0B", None, recurring_only=True)


@pytest.fixture
def furniture(daos):
    return daos.categories.create("Furniture", "#8B5CF6", None, large_expense_only=True)