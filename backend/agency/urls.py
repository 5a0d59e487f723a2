"""
URL configuration for the agency ledger API.

This module defines the REST endpoints for accounts, projects, proposals,
invoices, expenses and exchange rates, plus the dashboard summary.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

# Initialize DefaultRouter for RESTful API endpoints
router = DefaultRouter()

# Client accounts with ledger sub-resource
router.register(r"accounts", views.AccountViewSet, basename="account")

# Projects, task actions and the sync endpoint
router.register(r"projects", views.ProjectViewSet, basename="project")

# Proposals with nested items and quote action
router.register(r"proposals", views.ProposalViewSet, basename="proposal")

router.register(r"invoices", views.InvoiceViewSet, basename="invoice")
router.register(r"expenses", views.ExpenseViewSet, basename="expense")

# Exchange rates (list/create)
router.register(r"exchange-rates", views.ExchangeRateViewSet, basename="exchange-rate")

urlpatterns = [
    # Include all router-generated URLs
    path("", include(router.urls)),
    # Finance summary
    path("dashboard/", views.DashboardView.as_view(), name="dashboard-summary"),
]
