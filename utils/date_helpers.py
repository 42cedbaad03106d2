from datetime import date, datetime, time, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT, TIMESTAMP_FORMAT


def now() -> datetime:
    return datetime.now().replace(microsecond=0)


def today() -> date:
    return date.today()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str[:10], fmt).date()
        except ValueError:
            continue
    return None


def parse_timestamp(ts_str: str) -> datetime | None:
    """Parse a stored 'YYYY-MM-DD HH:MM:SS' (or ISO 8601) timestamp.

    A bare date is accepted and read as midnight. Returns None on failure.
    """
    if not ts_str:
        return None
    try:
        parsed = datetime.fromisoformat(ts_str)
    except ValueError:
        d = parse_date(ts_str)
        return datetime.combine(d, time.min) if d else None
    # Stored timestamps are naive local time.
    return parsed.replace(tzinfo=None)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def month_key(d: date) -> tuple[int, int]:
    return (d.year, d.month)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return (first instant, last instant) of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return (
        start_of_day(date(year, month, 1)),
        end_of_day(date(year, month, last_day)),
    )


def week_start(d: date) -> date:
    """Sunday on or before d."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def short_month_name(month: int) -> str:
    return calendar.month_abbr[month]
