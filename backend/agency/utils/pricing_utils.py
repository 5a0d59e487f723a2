"""
Pricing engine for proposals and invoice-like documents.

A document is priced in exactly one of two modes:

* per-item: the subtotal is the sum of line totals. A line is either
  unit-priced (quantity x unit price) or manual (its stored total is used
  verbatim). Lines without an explicit pricing kind fall back to the legacy
  convention where ``unit_price == 0`` marks a manual line.
* direct-total: the subtotal is the document's ``total_amount``; line items
  are descriptive only.

Tax is ``subtotal x tax_rate / 100`` when ``show_tax`` is on and is otherwise
dropped entirely. Results are rounded half-up to two decimal places.
"""

import logging
from decimal import Decimal

from django.conf import settings

from .ledger_utils import entry_value
from .money_utils import ZERO, round_money, to_decimal

# Get structured logger for this module
logger = logging.getLogger(__name__)

PER_ITEM = "per_item"
DIRECT_TOTAL = "direct_total"

UNIT = "unit"
MANUAL = "manual"

HUNDRED = Decimal("100")


def pricing_mode(document) -> str:
    """Return DIRECT_TOTAL when the document uses a direct total, else PER_ITEM."""
    return DIRECT_TOTAL if bool(entry_value(document, "use_direct_total")) else PER_ITEM


def line_pricing(item) -> str:
    """
    Resolve whether a line is unit-priced or manual.

    An explicit ``pricing`` value wins; otherwise a zero unit price marks a
    manual line.
    """
    explicit = entry_value(item, "pricing")
    if explicit in (UNIT, MANUAL):
        return explicit
    return MANUAL if to_decimal(entry_value(item, "unit_price")) == ZERO else UNIT


def line_total(item):
    """Return the arithmetic total of one line (unrounded Decimal)."""
    if line_pricing(item) == MANUAL:
        return to_decimal(entry_value(item, "total"))
    quantity = to_decimal(entry_value(item, "quantity"))
    unit_price = to_decimal(entry_value(item, "unit_price"))
    return quantity * unit_price


def resolve_tax_rate(document):
    """Return the document's tax rate, or the configured default when unset."""
    tax_rate = entry_value(document, "tax_rate")
    if tax_rate is None or tax_rate == "":
        return to_decimal(getattr(settings, "AGENCY_DEFAULT_TAX_RATE", 20))
    return to_decimal(tax_rate)


def compute_subtotal(document, items):
    """Unrounded subtotal under the document's pricing mode."""
    if pricing_mode(document) == DIRECT_TOTAL:
        return to_decimal(entry_value(document, "total_amount"))
    return sum((line_total(item) for item in items), ZERO)


def compute_pricing(document, items) -> dict:
    """
    Compute subtotal, tax and total for a priced document.

    Args:
        document: Proposal instance or mapping with ``use_direct_total``,
            ``total_amount``, ``tax_rate`` and ``show_tax``
        items: Iterable of line items (instances or mappings)

    Returns:
        dict with ``mode``, ``subtotal``, ``tax``, ``total``, ``tax_rate``
        and ``show_tax``; money values are Decimals rounded to cents
    """
    items = list(items)
    mode = pricing_mode(document)
    show_tax = entry_value(document, "show_tax")
    show_tax = True if show_tax is None else bool(show_tax)
    tax_rate = resolve_tax_rate(document)

    subtotal_raw = compute_subtotal(document, items)
    tax_raw = subtotal_raw * tax_rate / HUNDRED if show_tax else ZERO

    subtotal = round_money(subtotal_raw)
    tax = round_money(tax_raw)
    total = subtotal + tax if show_tax else subtotal

    logger.debug(
        "Document pricing computed",
        extra={
            "mode": mode,
            "item_count": len(items),
            "subtotal": float(subtotal),
            "tax": float(tax),
            "total": float(total),
            "show_tax": show_tax,
            "action": "pricing_computed",
            "component": "compute_pricing",
        },
    )

    return {
        "mode": mode,
        "subtotal": subtotal,
        "tax": tax,
        "total": total,
        "tax_rate": tax_rate,
        "show_tax": show_tax,
    }


def show_unit_column(document, items) -> bool:
    """Unit prices are shown unless the document is direct-total or every line is manual."""
    if pricing_mode(document) == DIRECT_TOTAL:
        return False
    items = list(items)
    return not (items and all(line_pricing(item) == MANUAL for item in items))
