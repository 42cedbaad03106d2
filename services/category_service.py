import logging

from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO
from database.large_expense_dao import LargeExpenseDAO
from database.recurring_dao import RecurringDAO
from models.category import Category
from utils.colors import pick_color
from utils.constants import FLOW_LARGE, FLOW_NORMAL, FLOW_RECURRING, FLOWS
from utils.validation import parse_amount

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(
        self,
        category_dao: CategoryDAO,
        expense_dao: ExpenseDAO,
        recurring_dao: RecurringDAO,
        large_dao: LargeExpenseDAO,
    ):
        self._dao = category_dao
        self._expense_dao = expense_dao
        self._recurring_dao = recurring_dao
        self._large_dao = large_dao

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_flow(self, flow: str) -> list[Category]:
        return self._dao.get_by_flow(flow)

    def _find_in_flow(self, name: str, flow: str) -> Category | None:
        for category in self._dao.get_by_flow(flow):
            if category.name.lower() == name.lower():
                return category
        return None

    def create(
        self,
        name: str,
        flow: str = FLOW_NORMAL,
        monthly_budget: float | None = None,
    ) -> Category:
        """New category with an unused palette color.

        Names are unique per flow only: a recurring 'Rent' and a normal 'Rent'
        can coexist and are merged in the summaries.
        """
        if flow not in FLOWS:
            raise ValueError(f"Unknown category flow: {flow}")
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        if self._find_in_flow(name, flow) is not None:
            raise ValueError(f"A category named '{name}' already exists.")
        if monthly_budget is not None:
            monthly_budget = parse_amount(monthly_budget, allow_zero=True)
        color = pick_color([c.color for c in self._dao.get_all()])
        category = self._dao.create(
            name,
            color,
            monthly_budget,
            recurring_only=flow == FLOW_RECURRING,
            large_expense_only=flow == FLOW_LARGE,
        )
        logger.info("Created %s category %s '%s'", flow, category.id, category.name)
        return category

    def find_or_create(self, name: str, flow: str) -> Category:
        """Category picked by typing a name in a definition form."""
        existing = self._find_in_flow(name.strip(), flow)
        if existing is not None:
            return existing
        return self.create(name, flow)

    def rename(self, category_id: int, name: str) -> Category | None:
        category = self._dao.get_by_id(category_id)
        if category is None:
            return None
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty.")
        clash = self._find_in_flow(name, category.flow)
        if clash is not None and clash.id != category_id:
            raise ValueError(f"A category named '{name}' already exists.")
        return self._dao.update(category_id, name, category.color)

    def link_to_normal(self, category_id: int, linked: bool = True):
        """Offer a recurring or large-expense category in the everyday picker too."""
        self._dao.set_linked_to_normal(category_id, linked)

    def is_deletable(self, category_id: int) -> bool:
        return not (
            self._expense_dao.has_any_for_category(category_id)
            or self._recurring_dao.has_active_for_category(category_id)
            or self._large_dao.has_active_for_category(category_id)
        )

    def delete(self, category_id: int):
        """Delete the category together with every expense filed under it."""
        if (self._recurring_dao.has_active_for_category(category_id)
                or self._large_dao.has_active_for_category(category_id)):
            raise ValueError("Category is still used by an active recurring or large expense.")
        self._dao.delete(category_id)
        logger.info("Deleted category %s", category_id)
