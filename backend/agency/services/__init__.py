# agency/services/__init__.py
from .ledger_service import LedgerService
from .project_service import ProjectService
from .proposal_service import ProposalService
from .reporting_service import ReportingService
from .sync_service import ProjectSyncService, SyncError

__all__ = [
    "LedgerService",
    "ProjectService",
    "ProposalService",
    "ProjectSyncService",
    "ReportingService",
    "SyncError",
]
