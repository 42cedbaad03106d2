from dataclasses import dataclass, field

from models.category import Category
from models.user import User


@dataclass
class CategorySpend:
    category_id: int
    name: str
    color: str
    amount: float = 0.0


@dataclass
class MonthlyAnalytics:
    year: int
    month: int                  # 1-12
    label: str                  # 'Jan'
    income: float
    expenses: float
    user_expenses: dict[int, float] = field(default_factory=dict)
    category_expenses: dict[int, CategorySpend] = field(default_factory=dict)
    over_budget_categories: list[int] = field(default_factory=list)

    @property
    def net(self) -> float:
        return self.income - self.expenses


@dataclass
class UserRanking:
    user: User
    total_spent: float
    percentage: float


@dataclass
class CategoryRanking:
    category: Category
    total_spent: float
    percentage: float


@dataclass
class AnalyticsReport:
    year: int
    monthly: list[MonthlyAnalytics]
    total_income: float
    total_expenses: float
    average_monthly_income: float
    average_monthly_expenses: float
    top_spenders: list[UserRanking]
    top_categories: list[CategoryRanking]
    over_budget_months: int
    start_date: str

    @property
    def total_net(self) -> float:
        return self.total_income - self.total_expenses

    @property
    def average_monthly_net(self) -> float:
        return self.average_monthly_income - self.average_monthly_expenses
