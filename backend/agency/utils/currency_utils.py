"""
Currency conversion utilities for agency reporting.

Amounts in foreign currencies are converted into the configured base currency
using the latest stored exchange rate on or before the reporting date. When the
rate table has no such record, the configured fallback rates are used.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Optional

from django.conf import settings
from django.utils import timezone

from ..models import ExchangeRate
from .money_utils import round_money, to_decimal

# Get structured logger for this module
logger = logging.getLogger(__name__)


class CurrencyConversionError(Exception):
    """Custom exception for currency conversion failures."""

    def __init__(self, message: str, currency: str = None, on_date: date = None):
        self.message = message
        self.currency = currency
        self.on_date = on_date
        super().__init__(self.message)


def base_currency() -> str:
    return getattr(settings, "AGENCY_BASE_CURRENCY", "TRY").upper()


def get_latest_rates(
    currencies: Iterable[str], on_date: Optional[date] = None
) -> Dict[str, Decimal]:
    """
    Resolve one rate to the base currency per requested currency.

    The closest stored rate on or before ``on_date`` wins; otherwise the
    configured fallback rate is used. The base currency always maps to 1.

    Args:
        currencies: Currency codes to resolve
        on_date: Reporting date (defaults to today)

    Returns:
        Dictionary mapping upper-cased currency codes to Decimal rates

    Raises:
        CurrencyConversionError: If a currency has neither a stored nor a
            fallback rate
    """
    on_date = on_date or timezone.localdate()
    base = base_currency()
    fallback_rates = getattr(settings, "AGENCY_FALLBACK_RATES", {})

    requested = sorted({(code or base).upper() for code in currencies})
    rates = {base: Decimal("1")}
    foreign = [code for code in requested if code != base]

    if foreign:
        qs = ExchangeRate.objects.filter(
            currency__in=foreign, date__lte=on_date
        ).order_by("currency", "-date")

        # Ordered newest first, so the first record per currency is the closest
        for record in qs:
            rates.setdefault(record.currency.upper(), Decimal(record.rate_to_base))

    missing = []
    for code in foreign:
        if code in rates:
            continue
        if code in fallback_rates:
            rates[code] = to_decimal(fallback_rates[code])
            logger.info(
                "Using fallback exchange rate",
                extra={
                    "currency": code,
                    "rate": float(rates[code]),
                    "on_date": on_date.isoformat(),
                    "action": "fallback_rate_used",
                    "component": "get_latest_rates",
                },
            )
        else:
            missing.append(code)

    if missing:
        logger.error(
            "Missing exchange rates for required currencies",
            extra={
                "missing_currencies": missing,
                "on_date": on_date.isoformat(),
                "available_currencies": list(rates.keys()),
                "action": "exchange_rates_missing",
                "component": "get_latest_rates",
                "severity": "high",
            },
        )
        raise CurrencyConversionError(
            f"No exchange rates found for currencies: {', '.join(missing)} "
            f"on or before {on_date}",
            currency=missing[0],
            on_date=on_date,
        )

    return rates


def convert_to_base(amount, currency: str, rates: Dict[str, Decimal]) -> Decimal:
    """
    Convert an amount into the base currency, rounded half-up to cents.

    Raises:
        CurrencyConversionError: If ``rates`` has no entry for ``currency``
    """
    code = (currency or base_currency()).upper()
    if code == base_currency():
        return round_money(amount)

    if code not in rates:
        logger.error(
            "Currency not found in rates dictionary",
            extra={
                "currency": code,
                "available_currencies": list(rates.keys()),
                "action": "currency_not_found_in_rates",
                "component": "convert_to_base",
                "severity": "high",
            },
        )
        raise CurrencyConversionError(
            f"No exchange rate available for currency: {code}", currency=code
        )

    return round_money(to_decimal(amount) * rates[code])
