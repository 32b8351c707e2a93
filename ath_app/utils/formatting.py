"""Display formatting helpers for prices and percentages."""

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
}


def format_currency(value: float, currency: str = "USD") -> str:
    """
    Format a price with its currency symbol and two decimals.

    Unknown currencies are prefixed with their ISO code.
    """
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(value: float) -> str:
    """Format a percentage with an explicit sign, e.g. +1.25% or -3.40%."""
    return f"{'+' if value >= 0 else ''}{value:.2f}%"
