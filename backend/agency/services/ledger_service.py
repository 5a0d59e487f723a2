"""
Service for client accounts and their append-only ledger.

This module provides the LedgerService class: account creation and removal,
and appending Debt/Payment entries with boundary validation. Account totals
are always re-derived from the transaction log and never stored.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction
from django.utils import timezone

from ..models import Account, Transaction
from ..utils.ledger_utils import compute_ledger_totals

# Get structured logger for this module
logger = logging.getLogger(__name__)


class LedgerService:
    """
    Service for account and ledger operations.

    Entries are inserted inside an atomic block and the account's totals are
    re-derived from the full log after every append.
    """

    @staticmethod
    def _parse_amount(value):
        """Parse a non-negative amount; anything else is a validation error."""
        if value is None or value == "":
            raise ValidationError("Amount is required.")
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Invalid amount: {value}")

        if not amount.is_finite():
            raise ValidationError(f"Invalid amount: {value}")
        if amount < 0:
            raise ValidationError("Amount must not be negative.")
        return amount

    @staticmethod
    @db_transaction.atomic
    def create_account(data):
        """
        Create a client account.

        Args:
            data: dict with ``name``, ``company`` and optional ``email``,
                ``username`` and ``password``

        Returns:
            Account: Saved instance with a hashed password when one was given

        Raises:
            ValidationError: If the account data is invalid
        """
        password = data.get("password")
        account = Account(
            name=(data.get("name") or "").strip(),
            company=(data.get("company") or "").strip(),
            email=(data.get("email") or "").strip().lower(),
            username=(data.get("username") or "").strip() or None,
        )
        if password:
            account.set_password(password)

        account.full_clean()
        account.save()

        logger.info(
            "Account created",
            extra={
                "account_id": account.id,
                "company": account.company,
                "has_credentials": bool(password),
                "action": "account_created",
                "component": "LedgerService",
            },
        )
        return account

    @staticmethod
    @db_transaction.atomic
    def add_transaction(account, data):
        """
        Append a Debt or Payment entry to an account's ledger.

        Args:
            account: Account instance
            data: dict with ``type``, ``amount`` and optional ``description``
                and ``date``

        Returns:
            dict: ``transaction`` (the new entry) and ``totals`` re-derived
            from the log

        Raises:
            ValidationError: If the amount is missing or negative, the type is
                unknown or the account is archived
        """
        entry_type = data.get("type")
        valid_types = dict(Transaction.TRANSACTION_TYPES)
        if entry_type not in valid_types:
            logger.warning(
                "Invalid ledger entry type",
                extra={
                    "account_id": account.id,
                    "requested_type": entry_type,
                    "action": "ledger_entry_validation_failed",
                    "component": "LedgerService",
                    "severity": "medium",
                },
            )
            raise ValidationError(
                f"Invalid transaction type: {entry_type}. "
                f"Must be one of: {', '.join(valid_types.keys())}"
            )

        amount = LedgerService._parse_amount(data.get("amount"))

        if account.is_archived:
            logger.warning(
                "Ledger append rejected for archived account",
                extra={
                    "account_id": account.id,
                    "action": "ledger_entry_archived_account",
                    "component": "LedgerService",
                    "severity": "medium",
                },
            )
            raise ValidationError("Cannot add transactions to an archived account.")

        entry = Transaction.objects.create(
            account=account,
            type=entry_type,
            amount=amount,
            description=(data.get("description") or "").strip(),
            date=data.get("date") or timezone.localdate(),
        )
        totals = LedgerService.account_totals(account)

        logger.info(
            "Ledger entry appended",
            extra={
                "account_id": account.id,
                "transaction_id": entry.id,
                "type": entry_type,
                "amount": float(amount),
                "balance": float(totals["balance"]),
                "action": "ledger_entry_appended",
                "component": "LedgerService",
            },
        )
        return {"transaction": entry, "totals": totals}

    @staticmethod
    def account_totals(account):
        """Re-derive debt, paid and balance from the account's full log."""
        # Query the table directly; a prefetched relation may predate the append
        return compute_ledger_totals(Transaction.objects.filter(account=account))

    @staticmethod
    @db_transaction.atomic
    def delete_account(account):
        """
        Remove an account.

        Accounts still linked to projects are archived so the projects keep
        their reference; otherwise the account and its ledger are deleted.

        Returns:
            dict: ``{"action": "archived"}`` or ``{"action": "deleted"}``
        """
        account_id = account.id
        linked_projects = account.projects.count()

        if linked_projects:
            account.status = Account.ARCHIVED
            account.save(update_fields=["status", "updated_at"])
            logger.info(
                "Account archived instead of deleted",
                extra={
                    "account_id": account_id,
                    "linked_projects": linked_projects,
                    "action": "account_archived",
                    "component": "LedgerService",
                },
            )
            return {"action": "archived"}

        entry_count = account.transactions.count()
        account.delete()
        logger.info(
            "Account deleted with its ledger",
            extra={
                "account_id": account_id,
                "deleted_entries": entry_count,
                "action": "account_deleted",
                "component": "LedgerService",
            },
        )
        return {"action": "deleted"}
