from dataclasses import dataclass
from typing import Optional

from utils.constants import FLOW_LARGE, FLOW_NORMAL, FLOW_RECURRING


@dataclass
class Category:
    id: int
    name: str
    color: str = "#888888"
    monthly_budget: Optional[float] = None   # always per month; None = no budget
    recurring_only: bool = False
    large_expense_only: bool = False
    linked_to_normal: bool = False

    @property
    def flow(self) -> str:
        if self.recurring_only:
            return FLOW_RECURRING
        if self.large_expense_only:
            return FLOW_LARGE
        return FLOW_NORMAL

    @property
    def is_normal(self) -> bool:
        """Shown in the everyday expense picker."""
        return self.flow == FLOW_NORMAL or self.linked_to_normal
