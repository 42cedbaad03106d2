from dataclasses import dataclass
from typing import Optional


@dataclass
class Expense:
    id: Optional[int]           # None until the store assigns one
    user_id: int
    category_id: int
    amount: float
    note: Optional[str]
    created_at: str             # 'YYYY-MM-DD HH:MM:SS'
    source_type: Optional[str] = None            # 'recurring' | 'large' | None
    source_definition_id: Optional[int] = None
    installment_month: Optional[str] = None      # 'YYYY-MM'

    @property
    def is_installment(self) -> bool:
        return self.source_type is not None
