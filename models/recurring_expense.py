from dataclasses import dataclass
from typing import Optional


@dataclass
class RecurringExpense:
    id: int
    user_id: int
    category_id: int
    amount: float               # per month
    day_of_month: int           # 1-31, clamped to month end when generating
    note: Optional[str] = None
    is_active: bool = True
    last_generated_date: Optional[str] = None   # 'YYYY-MM-DD'
    created_at: str = ""
    updated_at: str = ""
    user_name: str = ""
    category_name: str = ""
