"""
Account ledger derivations.

An account's totals are never stored: they are re-derived from its
append-only transaction log on every read.
"""

import logging
from collections.abc import Mapping

from .money_utils import ZERO, to_decimal

# Get structured logger for this module
logger = logging.getLogger(__name__)

DEBT = "Debt"
PAYMENT = "Payment"


def entry_value(entry, field, default=None):
    """Read a field from a model instance or a plain mapping."""
    if isinstance(entry, Mapping):
        return entry.get(field, default)
    return getattr(entry, field, default)


def compute_ledger_totals(transactions) -> dict:
    """
    Derive debt, paid and balance totals from a transaction log.

    Args:
        transactions: Iterable of Transaction instances or mappings with
            ``type`` and ``amount``

    Returns:
        dict with Decimal ``total_debt``, ``total_paid`` and ``balance``
        (``balance = total_debt - total_paid``); all zero for an empty log
    """
    total_debt = ZERO
    total_paid = ZERO
    entry_count = 0

    for entry in transactions:
        entry_count += 1
        entry_type = entry_value(entry, "type")
        amount = to_decimal(entry_value(entry, "amount"))

        if entry_type == DEBT:
            total_debt += amount
        elif entry_type == PAYMENT:
            total_paid += amount

    logger.debug(
        "Ledger totals derived",
        extra={
            "entry_count": entry_count,
            "total_debt": float(total_debt),
            "total_paid": float(total_paid),
            "action": "ledger_totals_derived",
            "component": "compute_ledger_totals",
        },
    )

    return {
        "total_debt": total_debt,
        "total_paid": total_paid,
        "balance": total_debt - total_paid,
    }


def append_transaction(transactions, entry) -> list:
    """Return a new log with ``entry`` appended; the input is left untouched."""
    return [*transactions, entry]
