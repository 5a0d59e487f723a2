"""
Finance summary for the admin dashboard.

Revenue comes from paid invoices, expenses from the expense book; both are
converted into the base currency with the latest known exchange rates.
Outstanding balances are derived from the ledgers of active accounts.
"""

import logging

from django.utils import timezone

from ..models import Account, Expense, Invoice, Project, Transaction
from ..utils.currency_utils import base_currency, convert_to_base, get_latest_rates
from ..utils.ledger_utils import compute_ledger_totals
from ..utils.money_utils import ZERO, currency_symbol, format_money

# Get structured logger for this module
logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5


class ReportingService:
    """Service building the dashboard finance summary."""

    @staticmethod
    def _sum_in_base(records, rates):
        return sum(
            (convert_to_base(record.amount, record.currency, rates) for record in records),
            ZERO,
        )

    @staticmethod
    def dashboard_summary(on_date=None):
        """
        Build the dashboard finance summary.

        Args:
            on_date: Date used for exchange rate lookup (defaults to today)

        Returns:
            dict: Base-currency totals with formatted strings, counts and
            recent ledger activity

        Raises:
            CurrencyConversionError: If a used currency has no rate at all
        """
        on_date = on_date or timezone.localdate()
        base = base_currency()
        symbol = currency_symbol(base)

        invoices = list(Invoice.objects.all())
        expenses = list(Expense.objects.all())
        currencies = {record.currency for record in invoices + expenses}
        rates = get_latest_rates(currencies, on_date)

        paid = [invoice for invoice in invoices if invoice.status == Invoice.PAID]
        open_invoices = [invoice for invoice in invoices if invoice.status != Invoice.PAID]

        revenue = ReportingService._sum_in_base(paid, rates)
        pending_invoices = ReportingService._sum_in_base(open_invoices, rates)
        total_expenses = ReportingService._sum_in_base(expenses, rates)
        net_profit = revenue - total_expenses

        ledger = compute_ledger_totals(
            Transaction.objects.filter(account__status=Account.ACTIVE)
        )

        recent = Transaction.objects.select_related("account").order_by("-id")[
            :RECENT_ACTIVITY_LIMIT
        ]
        recent_activity = [
            {
                "id": entry.id,
                "type": entry.type,
                "amount": entry.amount,
                "formatted_amount": format_money(entry.amount, symbol),
                "description": entry.description,
                "date": entry.date,
                "account_id": entry.account_id,
                "account_name": entry.account.company or entry.account.name,
            }
            for entry in recent
        ]

        summary = {
            "base_currency": base,
            "currency_symbol": symbol,
            "revenue": revenue,
            "expenses": total_expenses,
            "net_profit": net_profit,
            "pending_invoices": pending_invoices,
            "outstanding_balance": ledger["balance"],
            "total_accounts": Account.objects.filter(status=Account.ACTIVE).count(),
            "total_projects": Project.objects.count(),
            "active_projects": Project.objects.exclude(status=Project.COMPLETED).count(),
            "rates": {code: rate for code, rate in rates.items() if code != base},
            "formatted": {
                "revenue": format_money(revenue, symbol),
                "expenses": format_money(total_expenses, symbol),
                "net_profit": format_money(net_profit, symbol),
                "pending_invoices": format_money(pending_invoices, symbol),
                "outstanding_balance": format_money(ledger["balance"], symbol),
            },
            "recent_activity": recent_activity,
        }

        logger.info(
            "Dashboard summary built",
            extra={
                "invoice_count": len(invoices),
                "expense_count": len(expenses),
                "revenue": float(revenue),
                "expenses": float(total_expenses),
                "action": "dashboard_summary_built",
                "component": "ReportingService",
            },
        )
        return summary
