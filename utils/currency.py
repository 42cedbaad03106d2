def format_currency(amount: float | None, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56'. None renders as '—'."""
    if amount is None:
        return "—"
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_percent(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{value:.0f}%"
