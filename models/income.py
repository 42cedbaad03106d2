from dataclasses import dataclass
from typing import Optional


@dataclass
class Income:
    id: int
    user_id: int
    amount: float               # monthly equivalent
    note: Optional[str]
    created_at: str             # 'YYYY-MM-DD HH:MM:SS'
