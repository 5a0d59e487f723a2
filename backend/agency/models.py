"""
Database models for the agency ledger.

This module defines client accounts and their append-only transaction log,
projects and tasks, priced proposals with line items, invoices, expenses and
the exchange rate table used for reporting.
"""

import logging

from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from .utils import ledger_utils, pricing_utils, progress_utils
from .utils.money_utils import currency_symbol, round_money

# Get structured logger for this module
logger = logging.getLogger(__name__)

CURRENCY_CHOICES = [
    ("TRY", "Turkish Lira"),
    ("USD", "US Dollar"),
    ("EUR", "Euro"),
    ("GBP", "British Pound"),
]


# -------------------------------------------------------------------
# ACCOUNTS & LEDGER
# -------------------------------------------------------------------
# Client billing accounts and their append-only transaction log


class Account(models.Model):
    """
    Client/billing account.

    Debt, paid and balance totals are derived from the transaction log on
    every read and are never stored.
    """

    ACTIVE = "Active"
    ARCHIVED = "Archived"
    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (ARCHIVED, "Archived"),
    ]

    name = models.CharField(max_length=150)
    company = models.CharField(max_length=150)
    email = models.EmailField(blank=True)
    username = models.CharField(max_length=150, unique=True, null=True, blank=True)
    password_hash = models.CharField(max_length=128, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["status"], name="agency_acco_status_1c7e0b_idx"),
        ]

    def __str__(self):
        """String representation of Account."""
        return f"{self.name} ({self.company})"

    def clean(self):
        """Validate account data."""
        super().clean()

        if not self.name or len(self.name.strip()) < 2:
            raise ValidationError("Account name must be at least 2 characters long.")

        if self.email:
            self.email = self.email.strip().lower()

    def set_password(self, raw_password):
        """Store a hash of the client panel password."""
        self.password_hash = make_password(raw_password)

    def check_password(self, raw_password):
        """Check a client panel password against the stored hash."""
        if not self.password_hash:
            return False
        return check_password(raw_password, self.password_hash)

    @property
    def is_archived(self):
        return self.status == self.ARCHIVED

    @property
    def ledger(self):
        """Totals re-derived from the transaction log."""
        return ledger_utils.compute_ledger_totals(self.transactions.all())

    @property
    def total_debt(self):
        return self.ledger["total_debt"]

    @property
    def total_paid(self):
        return self.ledger["total_paid"]

    @property
    def balance(self):
        return self.ledger["balance"]


class Transaction(models.Model):
    """
    Immutable ledger entry.

    Entries are append-only: an existing row can't be saved again or deleted
    on its own. They disappear only when their account is hard-deleted.
    """

    DEBT = ledger_utils.DEBT
    PAYMENT = ledger_utils.PAYMENT
    TRANSACTION_TYPES = [
        (DEBT, "Debt"),
        (PAYMENT, "Payment"),
    ]

    account = models.ForeignKey(
        Account, on_delete=models.CASCADE, related_name="transactions"
    )
    type = models.CharField(max_length=10, choices=TRANSACTION_TYPES)
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(0)]
    )
    description = models.CharField(max_length=255, blank=True)
    date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        # Insertion order is the chronological order of the ledger
        ordering = ["id"]
        indexes = [
            models.Index(fields=["account", "type"], name="agency_tran_account_5e1a7c_idx"),
        ]

    def save(self, *args, **kwargs):
        """Insert the entry; updating an existing entry is rejected."""
        if not self._state.adding:
            logger.warning(
                "Attempt to modify an existing ledger entry",
                extra={
                    "transaction_id": self.pk,
                    "account_id": self.account_id,
                    "action": "ledger_entry_update_rejected",
                    "component": "Transaction",
                    "severity": "high",
                },
            )
            raise ValidationError("Ledger entries are append-only and cannot be edited.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        logger.warning(
            "Attempt to delete a single ledger entry",
            extra={
                "transaction_id": self.pk,
                "account_id": self.account_id,
                "action": "ledger_entry_delete_rejected",
                "component": "Transaction",
                "severity": "high",
            },
        )
        raise ValidationError("Ledger entries are append-only and cannot be deleted.")

    def __str__(self):
        """String representation of Transaction."""
        return f"{self.account_id} | {self.type} | {self.amount}"


# -------------------------------------------------------------------
# PROJECTS & TASKS
# -------------------------------------------------------------------


class Project(models.Model):
    """
    Unit of agency work.

    When the project has tasks, progress follows the share of tasks marked
    Done; without tasks it is set directly by an admin.
    """

    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    COMPLETED = "Completed"
    STATUS_CHOICES = [
        (PLANNING, "Planning"),
        (IN_PROGRESS, "In Progress"),
        (REVIEW, "Review"),
        (COMPLETED, "Completed"),
    ]

    title = models.CharField(max_length=200)
    client = models.CharField(max_length=200)
    category = models.CharField(max_length=100, blank=True)
    year = models.CharField(max_length=10, blank=True)
    description = models.TextField(blank=True)
    linked_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="projects",
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PLANNING)
    progress = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    files = models.JSONField(default=list, blank=True)
    team = models.JSONField(default=list, blank=True)
    gallery = models.JSONField(default=list, blank=True)
    # Identity of records reconciled from client-held lists
    sync_key = models.CharField(max_length=255, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="agency_proj_status_8f2d4a_idx"),
            models.Index(fields=["title", "client"], name="agency_proj_title_3b9c61_idx"),
        ]

    def __str__(self):
        """String representation of Project."""
        return f"{self.title} ({self.client})"

    @property
    def derived_progress(self):
        """Progress implied by the task list, or None when there are no tasks."""
        return progress_utils.derive_progress(self.tasks.all())


class Task(models.Model):
    TODO = progress_utils.TODO
    IN_PROGRESS = progress_utils.IN_PROGRESS
    DONE = progress_utils.DONE
    STATUS_CHOICES = [
        (TODO, "To Do"),
        (IN_PROGRESS, "In Progress"),
        (DONE, "Done"),
    ]
    PRIORITY_CHOICES = [
        ("Low", "Low"),
        ("Medium", "Medium"),
        ("High", "High"),
    ]

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="tasks")
    title = models.CharField(max_length=200)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=TODO)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="Medium")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.title} [{self.status}]"


# -------------------------------------------------------------------
# PROPOSALS
# -------------------------------------------------------------------
# Priced documents: per-item or direct-total pricing with optional tax


class Proposal(models.Model):
    """
    Priced proposal sent to a client.

    Subtotal, tax and total are computed by the pricing engine on read.
    ``total_amount`` is the operator-entered total in direct-total mode and
    mirrors the computed subtotal in per-item mode.
    """

    DRAFT = "Draft"
    SENT = "Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    STATUS_CHOICES = [
        (DRAFT, "Draft"),
        (SENT, "Sent"),
        (ACCEPTED, "Accepted"),
        (REJECTED, "Rejected"),
    ]

    title = models.CharField(max_length=200)
    client_name = models.CharField(max_length=200)
    account = models.ForeignKey(
        Account,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="proposals",
    )
    date = models.DateField(default=timezone.localdate)
    valid_until = models.DateField(null=True, blank=True)
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="TRY")
    currency_symbol = models.CharField(max_length=5, blank=True)
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=20,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    show_tax = models.BooleanField(default=True)
    use_direct_total = models.BooleanField(default=False)
    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=DRAFT)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def save(self, *args, **kwargs):
        """Resolve the display symbol from the currency when none is set."""
        if not self.currency_symbol:
            self.currency_symbol = currency_symbol(self.currency)
        super().save(*args, **kwargs)

    def __str__(self):
        """String representation of Proposal."""
        return f"{self.title} - {self.client_name} [{self.status}]"

    @property
    def pricing_mode(self):
        return pricing_utils.pricing_mode(self)

    @property
    def pricing(self):
        """Subtotal/tax/total re-derived from the current items and flags."""
        return pricing_utils.compute_pricing(self, self.items.all())


class LineItem(models.Model):
    """
    One row of a proposal.

    ``pricing`` selects unit pricing or a manually entered total. When left
    blank, a zero unit price marks the line as manual.
    """

    PRICING_CHOICES = [
        (pricing_utils.UNIT, "Quantity x unit price"),
        (pricing_utils.MANUAL, "Manual total"),
    ]

    proposal = models.ForeignKey(Proposal, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField(default=0)
    description = models.CharField(max_length=255, blank=True)
    quantity = models.DecimalField(
        max_digits=12, decimal_places=2, default=1, validators=[MinValueValidator(0)]
    )
    unit_price = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    total = models.DecimalField(
        max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    pricing = models.CharField(max_length=10, choices=PRICING_CHOICES, blank=True)

    class Meta:
        ordering = ["position", "id"]

    def save(self, *args, **kwargs):
        """Keep the stored total of unit-priced lines equal to quantity x unit price."""
        if pricing_utils.line_pricing(self) == pricing_utils.UNIT:
            self.total = round_money(pricing_utils.line_total(self))
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.description or 'Item'} x{self.quantity}"


# -------------------------------------------------------------------
# INVOICES & EXPENSES
# -------------------------------------------------------------------


class Invoice(models.Model):
    PAID = "Paid"
    PENDING = "Pending"
    OVERDUE = "Overdue"
    STATUS_CHOICES = [
        (PAID, "Paid"),
        (PENDING, "Pending"),
        (OVERDUE, "Overdue"),
    ]

    client = models.CharField(max_length=200)
    account = models.ForeignKey(
        Account,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices",
    )
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(0)]
    )
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="TRY")
    date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"{self.client} | {self.amount} {self.currency} [{self.status}]"


class Expense(models.Model):
    CATEGORY_CHOICES = [
        ("Software", "Software"),
        ("Rent", "Rent"),
        ("Salaries", "Salaries"),
        ("Marketing", "Marketing"),
        ("Misc", "Misc"),
    ]

    title = models.CharField(max_length=200)
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(0)]
    )
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="TRY")
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default="Misc")
    date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"{self.title} | {self.amount} {self.currency}"


# -------------------------------------------------------------------
# EXCHANGE RATES
# -------------------------------------------------------------------


class ExchangeRate(models.Model):
    """
    Historical exchange rate into the base currency.

    ``rate_to_base`` is the number of base-currency units for one unit of
    ``currency`` on ``date``.
    """

    currency = models.CharField(max_length=3)
    rate_to_base = models.DecimalField(max_digits=20, decimal_places=6)
    date = models.DateField()

    class Meta:
        unique_together = ("currency", "date")
        ordering = ["-date"]
        verbose_name_plural = "Exchange rates"

    def __str__(self):
        """String representation of ExchangeRate."""
        return f"{self.currency} - {self.rate_to_base} ({self.date})"

    def clean(self):
        """Validate exchange rate data."""
        super().clean()

        if self.rate_to_base is not None and self.rate_to_base <= 0:
            logger.warning(
                "Invalid exchange rate - must be positive",
                extra={
                    "currency": self.currency,
                    "rate": float(self.rate_to_base),
                    "action": "exchange_rate_validation_failed",
                    "component": "ExchangeRate",
                    "severity": "medium",
                },
            )
            raise ValidationError("Exchange rate must be positive")

        if not self.currency or len(self.currency) != 3:
            raise ValidationError("Currency code must be 3 characters long")
