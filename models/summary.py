from dataclasses import dataclass, field
from typing import Optional

from models.category import Category
from utils.errors import AmbiguousCategoryMerge


@dataclass
class UserExpense:
    user_id: int
    user_name: str
    user_color: str
    amount: float


@dataclass
class CategorySummary:
    category: Category                  # first-encountered category of the bucket
    category_ids: list[int]
    spent: float
    budget: Optional[float] = None      # normalized to the requested period
    remaining: Optional[float] = None
    percentage_left: Optional[float] = None
    user_expenses: list[UserExpense] = field(default_factory=list)

    @property
    def is_over_budget(self) -> bool:
        return self.remaining is not None and self.remaining < 0


@dataclass
class CategorySummaryResult:
    summaries: list[CategorySummary]
    diagnostics: list[AmbiguousCategoryMerge] = field(default_factory=list)


@dataclass
class PeriodTotals:
    period: str
    total_expenses: float
    total_budgeted: float
    total_income: float

    @property
    def net(self) -> float:
        return self.total_income - self.total_expenses

    @property
    def anticipated_net(self) -> float:
        return self.total_income - self.total_budgeted
