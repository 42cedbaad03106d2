import math

from utils.constants import MAX_DAY_OF_MONTH, MIN_DAY_OF_MONTH
from utils.errors import InvalidAmount, InvalidDayOfMonth


def parse_amount(value, allow_zero: bool = False) -> float:
    """Coerce form input to a finite float, rejecting non-positive values.

    bool is rejected even though it is an int subclass.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Amount must be a number, got {value!r}.")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidAmount(f"Amount must be a number, got {value!r}.") from None
    if not math.isfinite(amount):
        raise InvalidAmount(f"Amount must be finite, got {value!r}.")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidAmount("Amount must be greater than 0.")
    return amount


def parse_day_of_month(value) -> int:
    if isinstance(value, bool):
        raise InvalidDayOfMonth(f"Day of month must be a whole number, got {value!r}.")
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise InvalidDayOfMonth(
            f"Day of month must be a whole number, got {value!r}."
        ) from None
    if isinstance(value, float) and value != day:
        raise InvalidDayOfMonth(f"Day of month must be a whole number, got {value!r}.")
    if not MIN_DAY_OF_MONTH <= day <= MAX_DAY_OF_MONTH:
        raise InvalidDayOfMonth(
            f"Day of month must be between {MIN_DAY_OF_MONTH} and {MAX_DAY_OF_MONTH}."
        )
    return day


def clean_note(note: str | None) -> str | None:
    if note is None:
        return None
    note = note.strip()
    return note or None
