from dataclasses import dataclass
from typing import Optional


@dataclass
class LargeExpense:
    id: int
    user_id: int
    category_id: int
    total_amount: float
    monthly_amount: float       # ceil(total_amount / 12)
    day_of_month: int
    note: Optional[str] = None
    is_active: bool = True
    last_generated_date: Optional[str] = None   # 'YYYY-MM-DD'
    created_at: str = ""
    updated_at: str = ""
    user_name: str = ""
    category_name: str = ""
