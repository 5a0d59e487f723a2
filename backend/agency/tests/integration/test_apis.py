"""
Integration tests for the agency ledger API endpoints.

Covers accounts and their ledger, projects and tasks, reconciliation sync,
proposals and quotes, invoices, expenses, exchange rates and the dashboard,
plus authentication and permission boundaries.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status

from agency.models import Account, Project, Proposal, Task, Transaction
from agency.services.sync_service import ProjectSyncService

from ..factories import (AccountFactory, ExchangeRateFactory, ExpenseFactory,
                         InvoiceFactory, ProjectFactory, TaskFactory,
                         TransactionFactory)

# =============================================================================
# URL ENDPOINT CONSTANTS
# =============================================================================

# Router-generated endpoints
ACCOUNT_LIST = "account-list"
ACCOUNT_DETAIL = "account-detail"
PROJECT_LIST = "project-list"
PROJECT_DETAIL = "project-detail"
PROPOSAL_LIST = "proposal-list"
PROPOSAL_DETAIL = "proposal-detail"
INVOICE_LIST = "invoice-list"
EXPENSE_LIST = "expense-list"
EXCHANGE_RATE_LIST = "exchange-rate-list"

# Custom action endpoints
ACCOUNT_TRANSACTIONS = "account-transactions"
PROJECT_TASKS = "project-tasks"
PROJECT_TOGGLE_TASK = "project-toggle-task"
PROJECT_DELETE_TASK = "project-delete-task"
PROJECT_SYNC = "project-sync"
PROPOSAL_QUOTE = "proposal-quote"
DASHBOARD = "dashboard-summary"
TOKEN_OBTAIN = "token_obtain_pair"


# =============================================================================
# AUTHENTICATION & PERMISSIONS
# =============================================================================


@pytest.mark.django_db
class TestAuthentication:
    def test_anonymous_request_rejected(self, api_client):
        response = api_client.get(reverse(ACCOUNT_LIST))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_non_staff_user_forbidden(self, api_client, regular_user):
        api_client.force_authenticate(user=regular_user)

        for url in (reverse(ACCOUNT_LIST), reverse(PROJECT_LIST), reverse(DASHBOARD)):
            response = api_client.get(url)
            assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_jwt_token_grants_access(self, api_client, admin_user):
        response = api_client.post(
            reverse(TOKEN_OBTAIN),
            {"username": "agencyadmin", "password": "adminpass123"},
            format="json",
        )
        assert response.status_code == status.HTTP_200_OK
        access = response.data["access"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        response = api_client.get(reverse(ACCOUNT_LIST))

        assert response.status_code == status.HTTP_200_OK

    def test_wrong_password_rejected(self, api_client, admin_user):
        response = api_client.post(
            reverse(TOKEN_OBTAIN),
            {"username": "agencyadmin", "password": "wrong"},
            format="json",
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# ACCOUNTS & LEDGER
# =============================================================================


@pytest.mark.django_db
class TestAccountAPI:
    def test_create_account(self, admin_client):
        response = admin_client.post(
            reverse(ACCOUNT_LIST),
            {
                "name": "Mehmet Demir",
                "company": "Demir İnşaat",
                "email": "Mehmet@Demir.com",
                "username": "mehmet",
                "password": "secret-123",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["email"] == "mehmet@demir.com"
        assert response.data["balance"] == "0.00"
        assert response.data["formatted_balance"] == "₺0,00"
        assert "password" not in response.data

        account = Account.objects.get(pk=response.data["id"])
        assert account.check_password("secret-123")

    def test_short_name_rejected(self, admin_client):
        response = admin_client.post(
            reverse(ACCOUNT_LIST), {"name": "A", "company": "Co"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_filters_by_status(self, admin_client, account):
        AccountFactory(status=Account.ARCHIVED)

        response = admin_client.get(reverse(ACCOUNT_LIST), {"status": Account.ACTIVE})

        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data] == [account.id]

    def test_detail_carries_ledger_totals(self, admin_client, account_with_ledger):
        response = admin_client.get(reverse(ACCOUNT_DETAIL, args=[account_with_ledger.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["total_debt"] == "5000.00"
        assert response.data["total_paid"] == "2000.00"
        assert response.data["balance"] == "3000.00"

    def test_put_not_allowed(self, admin_client, account):
        response = admin_client.put(
            reverse(ACCOUNT_DETAIL, args=[account.id]),
            {"name": "New Name", "company": "Co"},
            format="json",
        )
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_patch_updates_fields(self, admin_client, account):
        response = admin_client.patch(
            reverse(ACCOUNT_DETAIL, args=[account.id]), {"company": "Yeni Şirket"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        account.refresh_from_db()
        assert account.company == "Yeni Şirket"

    def test_delete_without_projects_removes_ledger(self, admin_client, account_with_ledger):
        account_id = account_with_ledger.id

        response = admin_client.delete(reverse(ACCOUNT_DETAIL, args=[account_id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"action": "deleted"}
        assert not Account.objects.filter(pk=account_id).exists()
        assert not Transaction.objects.filter(account_id=account_id).exists()

    def test_delete_with_linked_project_archives(self, admin_client, account_with_ledger):
        ProjectFactory(linked_account=account_with_ledger)

        response = admin_client.delete(reverse(ACCOUNT_DETAIL, args=[account_with_ledger.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"action": "archived"}
        account_with_ledger.refresh_from_db()
        assert account_with_ledger.status == Account.ARCHIVED
        assert account_with_ledger.transactions.count() == 2


@pytest.mark.django_db
class TestLedgerAPI:
    def test_debt_then_payment_derives_balance(self, admin_client, account):
        url = reverse(ACCOUNT_TRANSACTIONS, args=[account.id])

        first = admin_client.post(url, {"type": "Debt", "amount": "5000"}, format="json")
        second = admin_client.post(
            url,
            {"type": "Payment", "amount": "2000", "description": "Havale"},
            format="json",
        )

        assert first.status_code == status.HTTP_201_CREATED
        assert first.data["totals"]["balance"] == "5000.00"
        assert second.status_code == status.HTTP_201_CREATED
        assert second.data["transaction"]["description"] == "Havale"
        assert second.data["totals"] == {
            "total_debt": "5000.00",
            "total_paid": "2000.00",
            "balance": "3000.00",
        }

    def test_list_ledger_in_insertion_order(self, admin_client, account_with_ledger):
        response = admin_client.get(reverse(ACCOUNT_TRANSACTIONS, args=[account_with_ledger.id]))

        assert response.status_code == status.HTTP_200_OK
        assert [row["type"] for row in response.data["transactions"]] == ["Debt", "Payment"]
        assert response.data["totals"]["balance"] == "3000.00"

    def test_overpayment_gives_negative_balance(self, admin_client, account):
        url = reverse(ACCOUNT_TRANSACTIONS, args=[account.id])
        admin_client.post(url, {"type": "Debt", "amount": "100"}, format="json")

        response = admin_client.post(url, {"type": "Payment", "amount": "350"}, format="json")

        assert response.data["totals"]["balance"] == "-250.00"

    def test_ledger_identity_holds(self, admin_client, account):
        url = reverse(ACCOUNT_TRANSACTIONS, args=[account.id])
        for entry_type, amount in [("Debt", "1200.50"), ("Payment", "300.25"), ("Debt", "99.99")]:
            admin_client.post(url, {"type": entry_type, "amount": amount}, format="json")

        totals = admin_client.get(url).data["totals"]

        assert Decimal(totals["balance"]) == Decimal(totals["total_debt"]) - Decimal(
            totals["total_paid"]
        )
        assert totals["total_debt"] == "1300.49"

    def test_negative_amount_rejected(self, admin_client, account):
        response = admin_client.post(
            reverse(ACCOUNT_TRANSACTIONS, args=[account.id]),
            {"type": "Debt", "amount": "-10"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "amount" in response.data
        assert account.transactions.count() == 0

    def test_unknown_type_rejected(self, admin_client, account):
        response = admin_client.post(
            reverse(ACCOUNT_TRANSACTIONS, args=[account.id]),
            {"type": "Refund", "amount": "10"},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_archived_account_rejects_entries(self, admin_client):
        archived = AccountFactory(status=Account.ARCHIVED)

        response = admin_client.post(
            reverse(ACCOUNT_TRANSACTIONS, args=[archived.id]),
            {"type": "Debt", "amount": "10"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert archived.transactions.count() == 0

    def test_missing_account_is_404(self, admin_client):
        response = admin_client.get(reverse(ACCOUNT_TRANSACTIONS, args=[999999]))
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# PROJECTS & TASKS
# =============================================================================


@pytest.mark.django_db
class TestProjectAPI:
    def test_create_project(self, admin_client, account):
        response = admin_client.post(
            reverse(PROJECT_LIST),
            {
                "title": "E-commerce Site",
                "client": "Yılmaz Tekstil",
                "linked_account": account.id,
                "team": ["Ali", "Zeynep"],
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == Project.PLANNING
        assert response.data["progress"] == 0
        assert response.data["team"] == ["Ali", "Zeynep"]
        assert response.data["tasks"] == []

    def test_archived_account_cannot_be_linked(self, admin_client):
        archived = AccountFactory(status=Account.ARCHIVED)

        response = admin_client.post(
            reverse(PROJECT_LIST),
            {"title": "Site", "client": "Acme", "linked_account": archived.id},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_tasks_derive_progress(self, admin_client, project):
        url = reverse(PROJECT_TASKS, args=[project.id])
        for task_status in ["Done", "Done", "To Do", "In Progress"]:
            response = admin_client.post(
                url, {"title": f"{task_status} task", "status": task_status}, format="json"
            )
            assert response.status_code == status.HTTP_201_CREATED

        assert response.data["progress"] == 50
        assert len(response.data["tasks"]) == 4

    def test_task_without_title_rejected(self, admin_client, project):
        response = admin_client.post(
            reverse(PROJECT_TASKS, args=[project.id]), {"title": ""}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_toggle_task_updates_progress(self, admin_client, project_with_tasks):
        todo = project_with_tasks.tasks.get(status=Task.TODO)

        response = admin_client.post(
            reverse(PROJECT_TOGGLE_TASK, args=[project_with_tasks.id, todo.id])
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["progress"] == 75

    def test_progress_reaches_100_only_when_all_done(self, admin_client, project_with_tasks):
        pending = project_with_tasks.tasks.exclude(status=Task.DONE)
        for task in pending:
            response = admin_client.post(
                reverse(PROJECT_TOGGLE_TASK, args=[project_with_tasks.id, task.id])
            )
        assert response.data["progress"] == 100

        done = project_with_tasks.tasks.first()
        response = admin_client.post(
            reverse(PROJECT_TOGGLE_TASK, args=[project_with_tasks.id, done.id])
        )
        assert 0 <= response.data["progress"] < 100

    def test_delete_task_updates_progress(self, admin_client, project_with_tasks):
        in_progress = project_with_tasks.tasks.get(status=Task.IN_PROGRESS)

        response = admin_client.delete(
            reverse(PROJECT_DELETE_TASK, args=[project_with_tasks.id, in_progress.id])
        )

        assert response.status_code == status.HTTP_200_OK
        # [Done, Done, To Do]
        assert response.data["progress"] == 67
        assert len(response.data["tasks"]) == 3

    def test_task_of_other_project_is_404(self, admin_client, project):
        foreign = TaskFactory()

        response = admin_client.post(
            reverse(PROJECT_TOGGLE_TASK, args=[project.id, foreign.id])
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_manual_progress_held_until_task_change(self, admin_client, project_with_tasks):
        detail = reverse(PROJECT_DETAIL, args=[project_with_tasks.id])

        response = admin_client.patch(detail, {"progress": 90}, format="json")
        assert response.data["progress"] == 90

        admin_client.post(
            reverse(PROJECT_TASKS, args=[project_with_tasks.id]),
            {"title": "One more", "status": "To Do"},
            format="json",
        )
        assert admin_client.get(detail).data["progress"] == 40

    def test_progress_out_of_range_rejected(self, admin_client, project):
        response = admin_client.patch(
            reverse(PROJECT_DETAIL, args=[project.id]), {"progress": 101}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# RECONCILIATION SYNC
# =============================================================================


@pytest.mark.django_db
class TestProjectSyncAPI:
    def test_existing_identity_is_skipped(self, admin_client):
        url = reverse(PROJECT_SYNC)
        admin_client.post(url, {"projects": [{"id": 1, "title": "Logo"}]}, format="json")

        response = admin_client.post(
            url,
            {"projects": [{"id": 1, "title": "Logo"}, {"id": 2, "title": "Web"}]},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["synced"] == 1
        assert response.data["skipped"] == 1
        assert response.data["total"] == 2
        assert Project.objects.count() == 2

    def test_project_created_via_api_is_not_duplicated(self, admin_client):
        created = admin_client.post(
            reverse(PROJECT_LIST), {"title": "Web", "client": "Acme"}, format="json"
        )
        pk = created.data["id"]

        response = admin_client.post(
            reverse(PROJECT_SYNC),
            {
                "projects": [
                    {"id": pk, "title": "Web", "client": "Acme"},
                    {"id": pk + 1000, "title": "Catalog", "client": "Acme"},
                    {"title": "Web", "client": "Acme"},
                ]
            },
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["synced"] == 1
        assert response.data["skipped"] == 2
        assert Project.objects.filter(title="Web", client="Acme").count() == 1
        assert Project.objects.count() == 2

    def test_second_sync_is_idempotent(self, admin_client):
        url = reverse(PROJECT_SYNC)
        payload = {
            "projects": [
                {"id": "p-1", "title": "Logo", "client": "A"},
                {"title": "Catalog", "client": "B"},
                {"id": "p-3", "title": "Web", "client": "C"},
            ]
        }

        first = admin_client.post(url, payload, format="json")
        second = admin_client.post(url, payload, format="json")

        assert first.data["synced"] == 3
        assert second.data["synced"] == 0
        assert second.data["skipped"] == 3
        assert Project.objects.count() == 3

    def test_embedded_tasks_are_inserted(self, admin_client, account):
        response = admin_client.post(
            reverse(PROJECT_SYNC),
            {
                "projects": [
                    {
                        "id": "p-9",
                        "title": "Rebrand",
                        "client": "Yılmaz Tekstil",
                        "status": "Review",
                        "linkedAccountId": account.id,
                        "tasks": [
                            {"title": "Moodboard", "status": "Done"},
                            {"title": "Logo", "status": "To Do"},
                        ],
                    }
                ]
            },
            format="json",
        )

        assert response.data["results"] == [{"id": "p-9", "action": "synced"}]
        project = Project.objects.get(sync_key="id:p-9")
        assert project.status == Project.REVIEW
        assert project.linked_account == account
        assert project.progress == 50
        assert project.tasks.count() == 2

    def test_demo_and_anonymous_records_skipped(self, admin_client):
        response = admin_client.post(
            reverse(PROJECT_SYNC),
            {"projects": [{"id": "demo-1", "title": "Sample"}, {"client": "Nobody"}]},
            format="json",
        )

        assert response.data["synced"] == 0
        assert [row["action"] for row in response.data["results"]] == [
            "skipped (demo)",
            "skipped (no identity)",
        ]
        assert Project.objects.count() == 0

    def test_empty_batch_rejected(self, admin_client):
        for payload in ({"projects": []}, {}, {"projects": "nope"}):
            response = admin_client.post(reverse(PROJECT_SYNC), payload, format="json")

            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.data == {"error": "No projects provided"}

    def test_store_failure_reports_partial_counts(self, admin_client):
        with patch.object(
            ProjectSyncService,
            "_insert_project",
            side_effect=[None, DatabaseError("disk full")],
        ):
            response = admin_client.post(
                reverse(PROJECT_SYNC),
                {"projects": [{"id": 1}, {"id": 2}, {"id": 3}]},
                format="json",
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data["synced"] == 1
        assert response.data["skipped"] == 0
        assert "error" in response.data

    def test_sync_requires_staff(self, api_client, regular_user):
        api_client.force_authenticate(user=regular_user)

        response = api_client.post(
            reverse(PROJECT_SYNC), {"projects": [{"id": 1}]}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Project.objects.count() == 0


# =============================================================================
# PROPOSALS & QUOTES
# =============================================================================


@pytest.mark.django_db
class TestProposalAPI:
    def create(self, client, **overrides):
        payload = {
            "title": "Website Redesign",
            "client_name": "Yılmaz Tekstil",
            "currency": "TRY",
            "tax_rate": "20",
            "show_tax": True,
            "items": [],
        }
        payload.update(overrides)
        return client.post(reverse(PROPOSAL_LIST), payload, format="json")

    def test_per_item_pricing(self, admin_client):
        response = self.create(
            admin_client, items=[{"description": "Design", "quantity": "2", "unit_price": "100", "total": "0"}]
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["items"][0]["total"] == "200.00"
        assert response.data["pricing"]["subtotal"] == "200.00"
        assert response.data["pricing"]["tax"] == "40.00"
        assert response.data["pricing"]["total"] == "240.00"
        assert response.data["total_amount"] == "200.00"

    def test_manual_line_total_used_verbatim(self, admin_client):
        response = self.create(
            admin_client,
            items=[{"description": "Hosting", "quantity": "1", "unit_price": "0", "total": "500"}],
        )

        assert response.data["pricing"]["subtotal"] == "500.00"
        assert response.data["items"][0]["total"] == "500.00"

    def test_direct_total_ignores_item_edits(self, admin_client):
        created = self.create(
            admin_client,
            use_direct_total=True,
            total_amount="10000",
            items=[{"description": "Strategy", "quantity": "1", "unit_price": "100"}],
        )
        url = reverse(PROPOSAL_DETAIL, args=[created.data["id"]])

        response = admin_client.patch(
            url,
            {"items": [{"description": "Strategy", "quantity": "7", "unit_price": "3333"}]},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["pricing"]["mode"] == "direct_total"
        assert response.data["pricing"]["subtotal"] == "10000.00"
        assert response.data["pricing"]["total"] == "12000.00"
        assert response.data["items"][0]["quantity"] == "7.00"

    def test_per_item_ignores_total_amount_edits(self, admin_client, proposal):
        response = admin_client.patch(
            reverse(PROPOSAL_DETAIL, args=[proposal.id]), {"total_amount": "99999"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["pricing"]["subtotal"] == "200.00"
        assert response.data["pricing"]["total"] == "240.00"

    def test_mode_round_trip_keeps_direct_total(self, admin_client):
        created = self.create(
            admin_client,
            use_direct_total=True,
            total_amount="10000",
            items=[{"description": "Strategy", "quantity": "1", "unit_price": "100"}],
        )
        url = reverse(PROPOSAL_DETAIL, args=[created.data["id"]])

        per_item = admin_client.patch(url, {"use_direct_total": False}, format="json")
        direct = admin_client.patch(url, {"use_direct_total": True}, format="json")

        assert per_item.data["pricing"]["subtotal"] == "100.00"
        assert direct.status_code == status.HTTP_200_OK
        assert direct.data["total_amount"] == "10000.00"
        assert direct.data["pricing"]["subtotal"] == "10000.00"

    def test_hidden_tax_total_equals_subtotal(self, admin_client):
        response = self.create(
            admin_client,
            show_tax=False,
            tax_rate="50",
            items=[{"quantity": "3", "unit_price": "33.33"}],
        )

        pricing = response.data["pricing"]
        assert pricing["tax"] == "0.00"
        assert pricing["total"] == pricing["subtotal"] == "99.99"

    def test_null_tax_rate_falls_back_to_default(self, admin_client):
        response = self.create(
            admin_client, tax_rate=None, items=[{"quantity": "1", "unit_price": "1000"}]
        )

        assert response.data["tax_rate"] == "20.00"
        assert response.data["pricing"]["tax"] == "200.00"

    def test_zero_tax_rate_is_kept(self, admin_client):
        response = self.create(
            admin_client, tax_rate="0", items=[{"quantity": "1", "unit_price": "1000"}]
        )

        assert response.data["pricing"]["tax"] == "0.00"
        assert response.data["pricing"]["total"] == "1000.00"

    def test_currency_symbol_follows_currency(self, admin_client):
        response = self.create(
            admin_client, currency="USD", items=[{"quantity": "1", "unit_price": "1234.5"}]
        )

        assert response.data["currency_symbol"] == "$"
        assert response.data["pricing"]["formatted"]["subtotal"] == "$1.234,50"

    def test_unknown_currency_rejected(self, admin_client):
        response = self.create(admin_client, currency="JPY")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_patch_without_items_keeps_items(self, admin_client, proposal):
        response = admin_client.patch(
            reverse(PROPOSAL_DETAIL, args=[proposal.id]), {"notes": "Net 30"}, format="json"
        )

        assert response.data["notes"] == "Net 30"
        assert len(response.data["items"]) == 1

    def test_delete_removes_items(self, admin_client, proposal):
        response = admin_client.delete(reverse(PROPOSAL_DETAIL, args=[proposal.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Proposal.objects.filter(pk=proposal.id).exists()


@pytest.mark.django_db
class TestQuoteAPI:
    def test_per_item_quote(self, admin_client, proposal):
        response = admin_client.get(reverse(PROPOSAL_QUOTE, args=[proposal.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["mode"] == "per_item"
        assert response.data["show_line_totals"] is True
        assert response.data["items"][0]["total"] == "200.00"
        assert response.data["items"][0]["formatted_total"] == "₺200,00"
        assert response.data["formatted"] == {
            "subtotal": "₺200,00",
            "tax": "₺40,00",
            "total": "₺240,00",
        }

    def test_direct_total_quote_hides_line_totals(self, admin_client, direct_total_proposal):
        response = admin_client.get(reverse(PROPOSAL_QUOTE, args=[direct_total_proposal.id]))

        assert response.data["mode"] == "direct_total"
        assert response.data["show_line_totals"] is False
        assert response.data["subtotal"] == "10000.00"
        assert response.data["formatted"]["total"] == "₺12.000,00"


# =============================================================================
# INVOICES, EXPENSES & EXCHANGE RATES
# =============================================================================


@pytest.mark.django_db
class TestInvoiceExpenseAPI:
    def test_invoice_status_filter(self, admin_client):
        paid = InvoiceFactory(status="Paid")
        InvoiceFactory(status="Pending")

        response = admin_client.get(reverse(INVOICE_LIST), {"status": "Paid"})

        assert [row["id"] for row in response.data] == [paid.id]

    def test_create_invoice_formats_amount(self, admin_client, account):
        response = admin_client.post(
            reverse(INVOICE_LIST),
            {
                "client": "Yılmaz Tekstil",
                "account": account.id,
                "amount": "15000",
                "currency": "TRY",
                "date": "2024-03-01",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == "Pending"
        assert response.data["formatted_amount"] == "₺15.000,00"

    def test_create_expense(self, admin_client):
        response = admin_client.post(
            reverse(EXPENSE_LIST),
            {
                "title": "Figma",
                "amount": "15",
                "currency": "USD",
                "category": "Software",
                "date": "2024-03-01",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["formatted_amount"] == "$15,00"

    def test_negative_expense_rejected(self, admin_client):
        response = admin_client.post(
            reverse(EXPENSE_LIST),
            {"title": "Refund", "amount": "-5", "currency": "TRY", "category": "Misc"},
            format="json",
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestExchangeRateAPI:
    def test_create_rate(self, admin_client):
        response = admin_client.post(
            reverse(EXCHANGE_RATE_LIST),
            {"currency": "usd", "rate_to_base": "41.25", "date": "2024-05-01"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["currency"] == "USD"

    def test_filters(self, admin_client):
        ExchangeRateFactory(currency="USD", date=date(2024, 1, 1))
        ExchangeRateFactory(currency="USD", date=date(2024, 6, 1))
        ExchangeRateFactory(currency="EUR", date=date(2024, 6, 1))

        response = admin_client.get(
            reverse(EXCHANGE_RATE_LIST), {"currencies": "usd", "date_from": "2024-03-01"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]["date"] == "2024-06-01"


# =============================================================================
# DASHBOARD
# =============================================================================


@pytest.mark.django_db
class TestDashboardAPI:
    def test_summary(self, admin_client, account_with_ledger):
        InvoiceFactory(amount=Decimal("1000"), currency="TRY", status="Paid")
        InvoiceFactory(amount=Decimal("10"), currency="USD", status="Paid")
        ExpenseFactory(amount=Decimal("250"), currency="TRY")
        ProjectFactory(status=Project.IN_PROGRESS)
        TransactionFactory(account=account_with_ledger, amount=Decimal("1"))

        response = admin_client.get(reverse(DASHBOARD))

        assert response.status_code == status.HTTP_200_OK
        # 10 USD at the 43.50 fallback rate
        assert response.data["revenue"] == "1435.00"
        assert response.data["expenses"] == "250.00"
        assert response.data["net_profit"] == "1185.00"
        assert response.data["outstanding_balance"] == "3001.00"
        assert response.data["formatted"]["revenue"] == "₺1.435,00"
        assert response.data["active_projects"] == 1
        assert len(response.data["recent_activity"]) == 3

    def test_empty_summary(self, admin_client):
        response = admin_client.get(reverse(DASHBOARD))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["revenue"] == "0.00"
        assert response.data["recent_activity"] == []
