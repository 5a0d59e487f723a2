"""
API views for the agency ledger.

This module provides viewsets for accounts and their ledgers, projects and
tasks, proposals, invoices, expenses and exchange rates, plus the project
sync endpoint and the dashboard summary. Views stay thin: business rules live
in the service layer and errors are translated by ServiceExceptionHandlerMixin.
"""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from .mixins.service_exception_handler import ServiceExceptionHandlerMixin
from .models import (Account, ExchangeRate, Expense, Invoice, Project,
                     Proposal, Task)
from .permissions import IsAgencyAdmin
from .serializers import (AccountSerializer, DashboardSummarySerializer,
                          ExchangeRateSerializer, ExpenseSerializer,
                          InvoiceSerializer, LedgerEntryInputSerializer,
                          ProjectSerializer, ProjectSyncSerializer,
                          ProposalSerializer, QuoteSerializer, TaskSerializer,
                          TransactionSerializer, money_strings)
from .services.ledger_service import LedgerService
from .services.project_service import ProjectService
from .services.proposal_service import ProposalService
from .services.reporting_service import ReportingService
from .services.sync_service import ProjectSyncService, SyncError

# Get structured logger for this module
logger = logging.getLogger(__name__)


class AgencyModelViewSet(ServiceExceptionHandlerMixin, viewsets.ModelViewSet):
    """Base ViewSet for admin-only agency resources."""

    permission_classes = [IsAgencyAdmin]


# -------------------------------------------------------------------
# ACCOUNTS & LEDGER
# -------------------------------------------------------------------


class AccountViewSet(AgencyModelViewSet):
    """
    Client accounts with derived ledger totals.

    DELETE archives accounts that still have linked projects and hard-deletes
    the rest together with their ledger.
    """

    serializer_class = AccountSerializer
    queryset = Account.objects.prefetch_related("transactions")
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = super().get_queryset()
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs

    def destroy(self, request, *args, **kwargs):
        account = self.get_object()
        result = self.handle_service_call(LedgerService.delete_account, account)
        return Response(result, status=status.HTTP_200_OK)

    @action(
        detail=True,
        methods=["get", "post"],
        url_path="transactions",
        url_name="transactions",
    )
    def transactions(self, request, pk=None):
        """
        GET returns the ledger in insertion order; POST appends an entry and
        returns it with the re-derived totals.
        """
        account = self.get_object()

        if request.method == "GET":
            entries = account.transactions.all()
            return Response(
                {
                    "transactions": TransactionSerializer(entries, many=True).data,
                    "totals": money_strings(LedgerService.account_totals(account)),
                }
            )

        input_serializer = LedgerEntryInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        result = self.handle_service_call(
            LedgerService.add_transaction, account, input_serializer.validated_data
        )

        logger.info(
            "Ledger entry added via API",
            extra={
                "user_id": request.user.id,
                "account_id": account.id,
                "transaction_id": result["transaction"].id,
                "action": "ledger_entry_api_created",
                "component": "AccountViewSet",
            },
        )

        return Response(
            {
                "transaction": TransactionSerializer(result["transaction"]).data,
                "totals": money_strings(result["totals"]),
            },
            status=status.HTTP_201_CREATED,
        )


# -------------------------------------------------------------------
# PROJECTS & TASKS
# -------------------------------------------------------------------


class ProjectViewSet(AgencyModelViewSet):
    """Projects with task management and client-list reconciliation."""

    serializer_class = ProjectSerializer
    queryset = Project.objects.select_related("linked_account").prefetch_related("tasks")

    def _get_task(self, project, task_id):
        return get_object_or_404(Task, pk=task_id, project=project)

    def _project_response(self, project, status_code=status.HTTP_200_OK):
        # Re-read so progress written by the task signals is included
        project = self.get_queryset().get(pk=project.pk)
        return Response(self.get_serializer(project).data, status=status_code)

    @action(detail=True, methods=["post"], url_path="tasks", url_name="tasks")
    def tasks(self, request, pk=None):
        project = self.get_object()
        task_serializer = TaskSerializer(data=request.data)
        task_serializer.is_valid(raise_exception=True)

        self.handle_service_call(
            ProjectService.add_task, project, task_serializer.validated_data
        )
        return self._project_response(project, status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["post"],
        url_path=r"tasks/(?P<task_id>[^/.]+)/toggle",
        url_name="toggle-task",
    )
    def toggle_task(self, request, pk=None, task_id=None):
        project = self.get_object()
        task = self._get_task(project, task_id)
        self.handle_service_call(ProjectService.toggle_task, task)
        return self._project_response(project)

    @action(
        detail=True,
        methods=["delete"],
        url_path=r"tasks/(?P<task_id>[^/.]+)",
        url_name="delete-task",
    )
    def delete_task(self, request, pk=None, task_id=None):
        project = self.get_object()
        task = self._get_task(project, task_id)
        self.handle_service_call(ProjectService.delete_task, task)
        return self._project_response(project)

    @action(detail=False, methods=["post"], url_path="sync", url_name="sync")
    def sync(self, request):
        """
        Reconcile a client-held project list into the database.

        Failures answer with an ``{"error": ...}`` payload: 400 for an empty or
        malformed batch, 500 when the store fails mid-batch.
        """
        payload = ProjectSyncSerializer(data=request.data)
        if not payload.is_valid():
            logger.warning(
                "Project sync rejected - invalid payload",
                extra={
                    "user_id": request.user.id,
                    "errors": payload.errors,
                    "action": "project_sync_invalid_payload",
                    "component": "ProjectViewSet",
                    "severity": "low",
                },
            )
            return Response(
                {"error": "No projects provided"}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            result = ProjectSyncService.sync_projects(payload.validated_data["projects"])
        except SyncError as e:
            return Response(
                {"error": e.message, "synced": e.synced, "skipped": e.skipped},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(result)


# -------------------------------------------------------------------
# PROPOSALS
# -------------------------------------------------------------------


class ProposalViewSet(AgencyModelViewSet):
    """Proposals with nested line items and derived pricing."""

    serializer_class = ProposalSerializer
    queryset = Proposal.objects.select_related("account").prefetch_related("items")

    @action(detail=True, methods=["get"], url_path="quote", url_name="quote")
    def quote(self, request, pk=None):
        """Renderer contract for printing or exporting the proposal."""
        proposal = self.get_object()
        quote = self.handle_service_call(ProposalService.build_quote, proposal)
        return Response(QuoteSerializer(quote).data)


# -------------------------------------------------------------------
# INVOICES, EXPENSES & EXCHANGE RATES
# -------------------------------------------------------------------


class InvoiceViewSet(AgencyModelViewSet):
    serializer_class = InvoiceSerializer
    queryset = Invoice.objects.select_related("account")

    def get_queryset(self):
        qs = super().get_queryset()
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs


class ExpenseViewSet(AgencyModelViewSet):
    serializer_class = ExpenseSerializer
    queryset = Expense.objects.all()


class ExchangeRateViewSet(
    ServiceExceptionHandlerMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Exchange rate table with currency and date filtering.
    """

    serializer_class = ExchangeRateSerializer
    permission_classes = [IsAgencyAdmin]
    queryset = ExchangeRate.objects.all()

    def get_queryset(self):
        qs = super().get_queryset()

        currencies = self.request.query_params.get("currencies")
        if currencies:
            currency_list = [c.strip().upper() for c in currencies.split(",")]
            qs = qs.filter(currency__in=currency_list)

        date_from = self.request.query_params.get("date_from")
        if date_from:
            qs = qs.filter(date__gte=date_from)

        date_to = self.request.query_params.get("date_to")
        if date_to:
            qs = qs.filter(date__lte=date_to)

        logger.debug(
            "Exchange rates queryset prepared",
            extra={
                "user_id": self.request.user.id,
                "filters_applied": {
                    "currencies": currencies,
                    "date_from": date_from,
                    "date_to": date_to,
                },
                "action": "exchange_rates_queryset",
                "component": "ExchangeRateViewSet",
            },
        )
        return qs


# -------------------------------------------------------------------
# DASHBOARD
# -------------------------------------------------------------------


class DashboardView(ServiceExceptionHandlerMixin, APIView):
    """Finance summary in the base currency."""

    permission_classes = [IsAgencyAdmin]

    def get(self, request):
        summary = self.handle_service_call(ReportingService.dashboard_summary)
        return Response(DashboardSummarySerializer(summary).data)
