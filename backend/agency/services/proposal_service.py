"""
Service for priced proposals.

ProposalService creates and updates proposals together with their line items
and builds the quote payload consumed by printable renderers. Subtotal, tax
and total are always computed by the pricing engine; the only persisted
derivation is ``total_amount`` mirroring the per-item subtotal.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction

from ..models import LineItem, Proposal
from ..utils import pricing_utils
from ..utils.money_utils import currency_symbol, format_money, round_money

# Get structured logger for this module
logger = logging.getLogger(__name__)

LINE_ITEM_FIELDS = ("description", "quantity", "unit_price", "total", "pricing")


class ProposalService:
    """
    Service for proposal operations.

    Switching between per-item and direct-total pricing never rewrites line
    items: in direct-total mode they stay descriptive only.
    """

    @staticmethod
    def _validate_currency(currency):
        valid_currencies = dict(Proposal._meta.get_field("currency").choices)
        if currency not in valid_currencies:
            raise ValidationError(
                f"Invalid currency: {currency}. "
                f"Must be one of: {', '.join(valid_currencies.keys())}"
            )

    @staticmethod
    @db_transaction.atomic
    def create_proposal(data):
        """
        Create a proposal with its line items.

        Args:
            data: Proposal field values; ``items`` (optional) is a list of
                line item dicts

        Returns:
            Proposal: Saved instance with items attached

        Raises:
            ValidationError: If the currency is unknown or a field is invalid
        """
        data = dict(data)
        items = data.pop("items", None) or []
        ProposalService._validate_currency(data.get("currency", "TRY"))

        proposal = Proposal(**data)
        proposal.full_clean(exclude=["currency_symbol"])
        proposal.save()

        ProposalService.save_items(proposal, items)
        ProposalService.sync_total_amount(proposal)

        logger.info(
            "Proposal created",
            extra={
                "proposal_id": proposal.id,
                "mode": pricing_utils.pricing_mode(proposal),
                "item_count": len(items),
                "currency": proposal.currency,
                "action": "proposal_created",
                "component": "ProposalService",
            },
        )
        return proposal

    @staticmethod
    @db_transaction.atomic
    def update_proposal(proposal, data):
        """
        Update proposal fields and, when ``items`` is supplied, replace items.

        Replacing items re-syncs ``total_amount`` in per-item mode. A currency
        change without an explicit symbol re-resolves the symbol.
        """
        data = dict(data)
        items = data.pop("items", None)

        if "currency" in data:
            ProposalService._validate_currency(data["currency"])
            if data["currency"] != proposal.currency and not data.get("currency_symbol"):
                data["currency_symbol"] = currency_symbol(data["currency"])

        previous_mode = pricing_utils.pricing_mode(proposal)
        for field, value in data.items():
            setattr(proposal, field, value)

        proposal.full_clean(exclude=["currency_symbol"])
        proposal.save()

        # Only item edits rewrite total_amount; a mode switch keeps the direct total
        if items is not None:
            ProposalService.save_items(proposal, items)
            ProposalService.sync_total_amount(proposal)

        mode = pricing_utils.pricing_mode(proposal)
        logger.info(
            "Proposal updated",
            extra={
                "proposal_id": proposal.id,
                "updated_fields": list(data.keys()),
                "items_replaced": items is not None,
                "previous_mode": previous_mode,
                "mode": mode,
                "action": "proposal_updated",
                "component": "ProposalService",
            },
        )
        return proposal

    @staticmethod
    def save_items(proposal, items):
        """Replace the proposal's line items, keeping the given order."""
        proposal.items.all().delete()

        created = []
        for position, item in enumerate(items):
            line = LineItem(
                proposal=proposal,
                position=position,
                **{field: item[field] for field in LINE_ITEM_FIELDS if item.get(field) is not None},
            )
            line.full_clean(exclude=["proposal"])
            line.save()
            created.append(line)

        logger.debug(
            "Proposal items replaced",
            extra={
                "proposal_id": proposal.id,
                "item_count": len(created),
                "action": "proposal_items_saved",
                "component": "ProposalService",
            },
        )
        return created

    @staticmethod
    def sync_total_amount(proposal):
        """
        Persist the computed subtotal as ``total_amount`` in per-item mode.

        In direct-total mode ``total_amount`` is operator-entered and left
        untouched.
        """
        if pricing_utils.pricing_mode(proposal) == pricing_utils.DIRECT_TOTAL:
            return proposal.total_amount

        # Read items from the table; a prefetched relation may predate save_items
        subtotal = round_money(
            pricing_utils.compute_subtotal(proposal, LineItem.objects.filter(proposal=proposal))
        )
        if proposal.total_amount != subtotal:
            proposal.total_amount = subtotal
            proposal.save(update_fields=["total_amount", "updated_at"])
        return subtotal

    @staticmethod
    def build_quote(proposal):
        """
        Build the renderer payload for a printable proposal.

        Returns:
            dict: Document header, per-line rows, computed numbers, formatted
            strings and column visibility hints
        """
        items = list(proposal.items.all())
        pricing = pricing_utils.compute_pricing(proposal, items)
        symbol = currency_symbol(proposal.currency, proposal.currency_symbol)
        per_item = pricing["mode"] == pricing_utils.PER_ITEM

        rows = []
        for item in items:
            line_total = round_money(pricing_utils.line_total(item))
            rows.append(
                {
                    "position": item.position,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "pricing": pricing_utils.line_pricing(item),
                    "total": line_total,
                    "formatted_unit_price": format_money(item.unit_price, symbol),
                    "formatted_total": format_money(line_total, symbol),
                }
            )

        quote = {
            "id": proposal.id,
            "title": proposal.title,
            "client_name": proposal.client_name,
            "date": proposal.date,
            "valid_until": proposal.valid_until,
            "currency": proposal.currency,
            "currency_symbol": symbol,
            "mode": pricing["mode"],
            "items": rows,
            "subtotal": pricing["subtotal"],
            "tax_rate": pricing["tax_rate"],
            "tax": pricing["tax"],
            "total": pricing["total"],
            "show_tax": pricing["show_tax"],
            "show_unit_column": pricing_utils.show_unit_column(proposal, items),
            "show_line_totals": per_item,
            "formatted": {
                "subtotal": format_money(pricing["subtotal"], symbol),
                "tax": format_money(pricing["tax"], symbol),
                "total": format_money(pricing["total"], symbol),
            },
            "notes": proposal.notes,
        }

        logger.debug(
            "Proposal quote built",
            extra={
                "proposal_id": proposal.id,
                "mode": pricing["mode"],
                "item_count": len(rows),
                "action": "proposal_quote_built",
                "component": "ProposalService",
            },
        )
        return quote
