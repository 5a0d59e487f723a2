from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from .models import (Account, ExchangeRate, Expense, Invoice, LineItem,
                     Project, Proposal, Task, Transaction)
from .services.ledger_service import LedgerService


class TransactionInline(admin.TabularInline):
    model = Transaction
    extra = 0
    can_delete = False
    readonly_fields = ["type", "amount", "description", "date", "created_at"]

    def has_change_permission(self, request, obj=None):
        # Ledger entries are append-only
        return False


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ["name", "company", "email", "status", "balance"]
    list_filter = ["status"]
    search_fields = ["name", "company", "email"]
    exclude = ["password_hash"]
    inlines = [TransactionInline]

    def delete_model(self, request, obj):
        result = LedgerService.delete_account(obj)
        if result["action"] == "archived":
            messages.warning(request, "Account has linked projects and was archived.")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ["account", "type", "amount", "date"]
    list_filter = ["type"]

    def save_model(self, request, obj, form, change):
        if change:
            messages.error(request, "Ledger entries are append-only.")
            return
        try:
            super().save_model(request, obj, form, change)
        except ValidationError as e:
            messages.error(request, "; ".join(e.messages))

    def has_delete_permission(self, request, obj=None):
        return False


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["title", "client", "status", "progress"]
    list_filter = ["status"]
    search_fields = ["title", "client"]
    readonly_fields = ["sync_key"]
    inlines = [TaskInline]


class LineItemInline(admin.TabularInline):
    model = LineItem
    extra = 0


@admin.register(Proposal)
class ProposalAdmin(admin.ModelAdmin):
    list_display = ["title", "client_name", "currency", "status", "use_direct_total"]
    list_filter = ["status", "currency"]
    inlines = [LineItemInline]


admin.site.register(Invoice)
admin.site.register(Expense)
admin.site.register(ExchangeRate)
