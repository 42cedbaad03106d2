from dataclasses import dataclass, field

from models.expense import Expense
from utils.errors import GenerationFailure


@dataclass
class Installment:
    """A proposed write: one materialized Expense plus the definition's new
    last_generated_date."""
    definition_id: int
    expense: Expense
    last_generated_date: str    # 'YYYY-MM-DD'


@dataclass
class GenerationResult:
    created: list[Expense] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)    # already materialized elsewhere
    failures: list[GenerationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def extend(self, other: "GenerationResult"):
        self.created.extend(other.created)
        self.skipped.extend(other.skipped)
        self.failures.extend(other.failures)
