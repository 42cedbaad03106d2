"""Error types raised (or, for batch passes, collected) by the services.

All of them are ValueError subclasses so callers that already catch
ValueError around form input keep working.
"""


class InvalidAmount(ValueError):
    """Non-positive or non-numeric amount on a create/update path."""


class InvalidDayOfMonth(ValueError):
    """Day of month outside 1-31."""


class InvalidPeriod(ValueError):
    """Period not one of day/week/month/year."""


class GenerationFailure(ValueError):
    """One definition could not be materialized. Collected, never raised by the pass."""

    def __init__(self, definition_id: int, source_type: str, cause: Exception):
        super().__init__(
            f"Could not materialize {source_type} definition {definition_id}: {cause}"
        )
        self.definition_id = definition_id
        self.source_type = source_type
        self.cause = cause


class AmbiguousCategoryMerge(ValueError):
    """Categories sharing a name carry different budgets; the first one wins."""

    def __init__(self, name: str, category_ids: list[int], budgets: list[float | None],
                 chosen_budget: float | None):
        super().__init__(
            f"Categories {category_ids} named '{name}' have diverging budgets "
            f"{budgets}; using {chosen_budget}"
        )
        self.name = name
        self.category_ids = category_ids
        self.budgets = budgets
        self.chosen_budget = chosen_budget
