"""
Serializers for the agency ledger API.

Model serializers validate input at the HTTP boundary and delegate writes to
the service layer; derived values (ledger totals, proposal pricing) are added
on every read and never accepted as input.

Architecture Pattern:
Serializer (Validation) → Services → Database
         ↓
ServiceExceptionHandlerMixin (Unified Error Handling)
"""

import logging

from django.conf import settings
from rest_framework import serializers

from .mixins.service_exception_handler import ServiceExceptionHandlerMixin
from .models import (CURRENCY_CHOICES, Account, ExchangeRate, Expense, Invoice,
                     LineItem, Project, Proposal, Task, Transaction)
from .services.ledger_service import LedgerService
from .services.project_service import ProjectService
from .services.proposal_service import ProposalService
from .utils import pricing_utils
from .utils.money_utils import currency_symbol, format_money, round_money

logger = logging.getLogger(__name__)

MONEY_FIELD = {"max_digits": 16, "decimal_places": 2}


def money_strings(values):
    """Render a dict of Decimal amounts as 2-place strings."""
    return {key: str(round_money(value)) for key, value in values.items()}


# -------------------------------------------------------------------
# ACCOUNT & LEDGER SERIALIZERS
# -------------------------------------------------------------------


class TransactionSerializer(serializers.ModelSerializer):
    """Ledger entry; entries are created through LedgerService only."""

    class Meta:
        model = Transaction
        fields = ["id", "account", "type", "amount", "description", "date", "created_at"]
        read_only_fields = ["id", "account", "created_at"]


class AccountSerializer(ServiceExceptionHandlerMixin, serializers.ModelSerializer):
    """
    Client account with ledger totals.

    ``total_debt``, ``total_paid`` and ``balance`` are re-derived from the
    transaction log on every read. The panel password is write-only and
    stored hashed.
    """

    password = serializers.CharField(
        write_only=True, required=False, allow_blank=True, min_length=6
    )

    class Meta:
        model = Account
        fields = [
            "id",
            "name",
            "company",
            "email",
            "username",
            "password",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "created_at", "updated_at"]

    def validate_email(self, value):
        return value.strip().lower()

    def validate_username(self, value):
        # Blank usernames are stored as NULL so they never collide
        return (value or "").strip() or None

    def create(self, validated_data):
        return self.handle_service_call(LedgerService.create_account, validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        if password:
            instance.set_password(password)
        return super().update(instance, validated_data)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        totals = instance.ledger
        data.update(money_strings(totals))
        data["formatted_balance"] = format_money(totals["balance"])
        return data


class LedgerEntryInputSerializer(serializers.Serializer):
    """Boundary validation for a new ledger entry."""

    type = serializers.ChoiceField(choices=Transaction.TRANSACTION_TYPES)
    amount = serializers.DecimalField(min_value=0, **MONEY_FIELD)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    date = serializers.DateField(required=False)


# -------------------------------------------------------------------
# PROJECT SERIALIZERS
# -------------------------------------------------------------------


class TaskSerializer(serializers.ModelSerializer):
    class Meta:
        model = Task
        fields = ["id", "project", "title", "status", "priority", "created_at"]
        read_only_fields = ["id", "project", "created_at"]


class ProjectSerializer(ServiceExceptionHandlerMixin, serializers.ModelSerializer):
    """
    Project with its tasks.

    Tasks are managed through the task endpoints; ``progress`` written here is
    the admin-set value that holds until the next task change.
    """

    tasks = TaskSerializer(many=True, read_only=True)
    linked_account = serializers.PrimaryKeyRelatedField(
        queryset=Account.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "client",
            "category",
            "year",
            "description",
            "linked_account",
            "status",
            "progress",
            "files",
            "team",
            "gallery",
            "tasks",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_linked_account(self, value):
        if value is not None and value.is_archived:
            raise serializers.ValidationError("Cannot link an archived account.")
        return value

    def create(self, validated_data):
        progress = validated_data.pop("progress", None)
        project = super().create(validated_data)
        if progress is not None:
            self.handle_service_call(ProjectService.set_progress, project, progress)
        return project

    def update(self, instance, validated_data):
        progress = validated_data.pop("progress", None)
        project = super().update(instance, validated_data)
        if progress is not None:
            self.handle_service_call(ProjectService.set_progress, project, progress)
        return project


class ProjectSyncSerializer(serializers.Serializer):
    """Payload of a reconciliation batch: a non-empty list of project dicts."""

    projects = serializers.ListField(child=serializers.DictField(), allow_empty=False)


# -------------------------------------------------------------------
# PROPOSAL SERIALIZERS
# -------------------------------------------------------------------


class LineItemSerializer(serializers.ModelSerializer):
    """
    One proposal line.

    ``total`` is stored verbatim for manual lines and recomputed from
    quantity x unit price for unit-priced lines.
    """

    class Meta:
        model = LineItem
        fields = ["id", "position", "description", "quantity", "unit_price", "total", "pricing"]
        read_only_fields = ["id", "position"]
        extra_kwargs = {
            "total": {"required": False},
            "pricing": {"required": False},
        }


class ProposalSerializer(ServiceExceptionHandlerMixin, serializers.ModelSerializer):
    """
    Proposal with nested line items and derived pricing.

    The ``pricing`` block is re-computed on every read; writes go through
    ProposalService which replaces items when ``items`` is supplied.
    """

    items = LineItemSerializer(many=True, required=False)
    tax_rate = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=100,
        required=False,
        allow_null=True,
    )
    account = serializers.PrimaryKeyRelatedField(
        queryset=Account.objects.all(), required=False, allow_null=True
    )
    pricing = serializers.SerializerMethodField()

    class Meta:
        model = Proposal
        fields = [
            "id",
            "title",
            "client_name",
            "account",
            "date",
            "valid_until",
            "currency",
            "currency_symbol",
            "tax_rate",
            "show_tax",
            "use_direct_total",
            "total_amount",
            "status",
            "notes",
            "items",
            "pricing",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"currency_symbol": {"required": False}}

    def validate_tax_rate(self, value):
        """A missing rate falls back to the configured default."""
        if value is None:
            return getattr(settings, "AGENCY_DEFAULT_TAX_RATE", 20)
        return value

    def get_pricing(self, obj):
        items = list(obj.items.all())
        pricing = pricing_utils.compute_pricing(obj, items)
        symbol = currency_symbol(obj.currency, obj.currency_symbol)
        return {
            "mode": pricing["mode"],
            "subtotal": str(pricing["subtotal"]),
            "tax": str(pricing["tax"]),
            "total": str(pricing["total"]),
            "tax_rate": str(pricing["tax_rate"]),
            "show_tax": pricing["show_tax"],
            "show_unit_column": pricing_utils.show_unit_column(obj, items),
            "formatted": {
                "subtotal": format_money(pricing["subtotal"], symbol),
                "tax": format_money(pricing["tax"], symbol),
                "total": format_money(pricing["total"], symbol),
            },
        }

    def create(self, validated_data):
        return self.handle_service_call(ProposalService.create_proposal, validated_data)

    def update(self, instance, validated_data):
        return self.handle_service_call(
            ProposalService.update_proposal, instance, validated_data
        )


class QuoteLineSerializer(serializers.Serializer):
    position = serializers.IntegerField()
    description = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2)
    unit_price = serializers.DecimalField(**MONEY_FIELD)
    pricing = serializers.CharField()
    total = serializers.DecimalField(**MONEY_FIELD)
    formatted_unit_price = serializers.CharField()
    formatted_total = serializers.CharField()


class QuoteSerializer(serializers.Serializer):
    """Read-only renderer contract built by ProposalService.build_quote."""

    id = serializers.IntegerField()
    title = serializers.CharField()
    client_name = serializers.CharField()
    date = serializers.DateField()
    valid_until = serializers.DateField(allow_null=True)
    currency = serializers.CharField()
    currency_symbol = serializers.CharField()
    mode = serializers.CharField()
    items = QuoteLineSerializer(many=True)
    subtotal = serializers.DecimalField(**MONEY_FIELD)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    tax = serializers.DecimalField(**MONEY_FIELD)
    total = serializers.DecimalField(**MONEY_FIELD)
    show_tax = serializers.BooleanField()
    show_unit_column = serializers.BooleanField()
    show_line_totals = serializers.BooleanField()
    formatted = serializers.DictField(child=serializers.CharField())
    notes = serializers.CharField(allow_blank=True)


# -------------------------------------------------------------------
# INVOICE & EXPENSE SERIALIZERS
# -------------------------------------------------------------------


class InvoiceSerializer(serializers.ModelSerializer):
    formatted_amount = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            "id",
            "client",
            "account",
            "amount",
            "currency",
            "date",
            "status",
            "formatted_amount",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_formatted_amount(self, obj):
        return format_money(obj.amount, currency_symbol(obj.currency))


class ExpenseSerializer(serializers.ModelSerializer):
    formatted_amount = serializers.SerializerMethodField()

    class Meta:
        model = Expense
        fields = [
            "id",
            "title",
            "amount",
            "currency",
            "category",
            "date",
            "formatted_amount",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_formatted_amount(self, obj):
        return format_money(obj.amount, currency_symbol(obj.currency))


# -------------------------------------------------------------------
# EXCHANGE RATE SERIALIZER
# -------------------------------------------------------------------


class ExchangeRateSerializer(serializers.ModelSerializer):
    """
    Exchange rate into the base currency.

    Features:
    - Currency code validation
    - Rate value validation
    """

    class Meta:
        model = ExchangeRate
        fields = ["id", "currency", "rate_to_base", "date"]

    def validate_currency(self, value):
        """Validate currency code; the base currency has no rate."""
        value = value.upper()
        base = getattr(settings, "AGENCY_BASE_CURRENCY", "TRY").upper()
        valid_currencies = [code for code, _ in CURRENCY_CHOICES if code != base]

        if value not in valid_currencies:
            logger.warning(
                "Invalid exchange rate currency",
                extra={
                    "provided_currency": value,
                    "valid_currencies": valid_currencies,
                    "action": "exchange_rate_currency_validation_failed",
                    "component": "ExchangeRateSerializer",
                    "severity": "medium",
                },
            )
            raise serializers.ValidationError(
                f"Invalid currency. Choose from: {', '.join(valid_currencies)}"
            )

        return value

    def validate_rate_to_base(self, value):
        """Validate exchange rate value."""
        if value <= 0:
            logger.warning(
                "Invalid exchange rate value",
                extra={
                    "provided_rate": value,
                    "action": "exchange_rate_validation_failed",
                    "component": "ExchangeRateSerializer",
                    "severity": "medium",
                },
            )
            raise serializers.ValidationError("Exchange rate must be positive")

        return value


# -------------------------------------------------------------------
# DASHBOARD SERIALIZERS
# -------------------------------------------------------------------


class RecentActivitySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    type = serializers.CharField()
    amount = serializers.DecimalField(**MONEY_FIELD)
    formatted_amount = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    date = serializers.DateField()
    account_id = serializers.IntegerField()
    account_name = serializers.CharField()


class DashboardSummarySerializer(serializers.Serializer):
    base_currency = serializers.CharField()
    currency_symbol = serializers.CharField()
    revenue = serializers.DecimalField(**MONEY_FIELD)
    expenses = serializers.DecimalField(**MONEY_FIELD)
    net_profit = serializers.DecimalField(**MONEY_FIELD)
    pending_invoices = serializers.DecimalField(**MONEY_FIELD)
    outstanding_balance = serializers.DecimalField(**MONEY_FIELD)
    total_accounts = serializers.IntegerField()
    total_projects = serializers.IntegerField()
    active_projects = serializers.IntegerField()
    rates = serializers.DictField(
        child=serializers.DecimalField(max_digits=20, decimal_places=6)
    )
    formatted = serializers.DictField(child=serializers.CharField())
    recent_activity = RecentActivitySerializer(many=True)
