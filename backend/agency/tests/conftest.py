# tests/conftest.py
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from agency.models import Task, Transaction

from .factories import (AccountFactory, LineItemFactory, ProjectFactory,
                        ProposalFactory, TaskFactory, TransactionFactory)

User = get_user_model()

# =============================================================================
# USER FIXTURES
# =============================================================================


@pytest.fixture
def admin_user(db):
    """Staff user allowed to use the agency API"""
    return User.objects.create_user(
        username="agencyadmin",
        email="admin@example.com",
        password="adminpass123",
        is_staff=True,
    )


@pytest.fixture
def regular_user(db):
    """Authenticated user without staff rights"""
    return User.objects.create_user(
        username="regular", email="regular@example.com", password="testpass123"
    )


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_user):
    """API client authenticated as agency admin"""
    api_client.force_authenticate(user=admin_user)
    return api_client


# =============================================================================
# ACCOUNT & LEDGER FIXTURES
# =============================================================================


@pytest.fixture
def account(db):
    return AccountFactory(name="Ayşe Yılmaz", company="Yılmaz Tekstil")


@pytest.fixture
def account_with_ledger(account):
    """Account with Debt 5000 and Payment 2000"""
    TransactionFactory(account=account, type=Transaction.DEBT, amount=Decimal("5000"))
    TransactionFactory(account=account, type=Transaction.PAYMENT, amount=Decimal("2000"))
    return account


# =============================================================================
# PROJECT FIXTURES
# =============================================================================


@pytest.fixture
def project(db):
    return ProjectFactory(title="Brand Refresh", client="Yılmaz Tekstil")


@pytest.fixture
def project_with_tasks(project):
    """Tasks [Done, Done, To Do, In Progress]"""
    for status in [Task.DONE, Task.DONE, Task.TODO, Task.IN_PROGRESS]:
        TaskFactory(project=project, status=status)
    project.refresh_from_db()
    return project


# =============================================================================
# PROPOSAL FIXTURES
# =============================================================================


@pytest.fixture
def proposal(db):
    """Per-item proposal with one 2 x 100 line"""
    proposal = ProposalFactory(title="Website", client_name="Yılmaz Tekstil")
    LineItemFactory(
        proposal=proposal, quantity=Decimal("2"), unit_price=Decimal("100"), total=0
    )
    return proposal


@pytest.fixture
def direct_total_proposal(db):
    """Direct-total proposal of 10000 with descriptive items"""
    proposal = ProposalFactory(
        use_direct_total=True, total_amount=Decimal("10000"), title="Retainer"
    )
    LineItemFactory(proposal=proposal, quantity=Decimal("3"), unit_price=Decimal("999"))
    return proposal
