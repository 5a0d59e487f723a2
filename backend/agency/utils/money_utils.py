"""
Money formatting utilities.

Amounts are rounded half-up to two decimal places and rendered with a currency
symbol and the grouping/decimal separators of the configured number locale
(``tr-TR`` renders 1234.5 as ``1.234,50``).
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

# Get structured logger for this module
logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

CURRENCY_SYMBOLS = {
    "TRY": "₺",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}
DEFAULT_SYMBOL = "₺"

# locale -> (thousands separator, decimal separator)
NUMBER_FORMATS = {
    "tr-TR": (".", ","),
    "de-DE": (".", ","),
    "en-US": (",", "."),
    "en-GB": (",", "."),
}


def to_decimal(value) -> Decimal:
    """
    Coerce a numeric form value to Decimal.

    None, empty strings and unparsable values become zero, mirroring how the
    dashboard treats blank inputs.
    """
    if value is None or value == "":
        return ZERO
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        result = None

    if result is None or not result.is_finite():
        logger.debug(
            "Non-numeric amount coerced to zero",
            extra={
                "value": repr(value),
                "action": "amount_coerced_to_zero",
                "component": "to_decimal",
            },
        )
        return ZERO
    return result


def round_money(amount) -> Decimal:
    """Round an amount half-up to two decimal places."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def currency_symbol(currency, symbol=None) -> str:
    """Return the explicit symbol if given, else the symbol for the ISO code."""
    if symbol:
        return symbol
    return CURRENCY_SYMBOLS.get((currency or "").upper(), DEFAULT_SYMBOL)


def format_number(amount, locale=None) -> str:
    """Render an amount with two decimals and locale separators, no symbol."""
    locale = locale or getattr(settings, "AGENCY_NUMBER_LOCALE", "tr-TR")
    thousands, decimal_sep = NUMBER_FORMATS.get(locale, NUMBER_FORMATS["tr-TR"])

    value = abs(round_money(amount))
    grouped = f"{value:,.2f}"
    return grouped.replace(",", "\0").replace(".", decimal_sep).replace("\0", thousands)


def format_money(amount, symbol=DEFAULT_SYMBOL, locale=None) -> str:
    """
    Render an amount as display money, e.g. ``₺1.234,50``.

    The sign goes in front of the symbol (``-₺250,00``).

    Args:
        amount: Decimal, int, float or numeric string
        symbol: Currency symbol prefix
        locale: Number locale key from NUMBER_FORMATS (defaults to settings)

    Returns:
        Formatted string with exactly two decimal places
    """
    sign = "-" if round_money(amount) < 0 else ""
    return f"{sign}{symbol}{format_number(amount, locale)}"
