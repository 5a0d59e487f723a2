"""
One-way reconciliation of client-held projects into the database.

Projects cached by a client (for example in browser storage) are merged into
the store: entries whose identity already exists are skipped, new ones are
inserted with their embedded tasks. Identity is kept in the unique
``Project.sync_key`` column so concurrent syncs cannot double-insert; projects
created through the API are recognised by primary key or title and client.
"""

import logging

from django.db import DatabaseError, IntegrityError
from django.db import transaction as db_transaction
from django.db.models import Q

from ..models import Account, Project, Task
from ..utils.progress_utils import derive_progress

# Get structured logger for this module
logger = logging.getLogger(__name__)

DEMO_PREFIX = "demo-"

SYNCED = "synced"
SKIPPED = "skipped"
SKIPPED_DEMO = "skipped (demo)"
SKIPPED_NO_IDENTITY = "skipped (no identity)"

# Upper bound of a BigAutoField primary key
MAX_PK = 2**63

PROJECT_TEXT_FIELDS = ("title", "client", "category", "year", "description")
PROJECT_LIST_FIELDS = ("files", "team", "gallery")


class SyncError(Exception):
    """Raised when the store fails in the middle of a sync batch."""

    def __init__(self, message: str, synced: int = 0, skipped: int = 0):
        self.message = message
        self.synced = synced
        self.skipped = skipped
        super().__init__(self.message)


def sync_identity(project):
    """
    Identity key of an incoming project.

    ``id:<id>`` when the client sent an id, otherwise ``natural:<title>|<client>``;
    None when neither is available.
    """
    project_id = project.get("id")
    if project_id not in (None, ""):
        return f"id:{project_id}"

    title = (project.get("title") or "").strip()
    if not title:
        return None
    client = (project.get("client") or "").strip()
    return f"natural:{title}|{client}"


class ProjectSyncService:
    """
    Service for reconciling client-held projects.

    Each insert runs in its own savepoint: there is no batch atomicity, and
    inserts applied before a store failure are kept.
    """

    @staticmethod
    def sync_projects(projects):
        """
        Merge a list of project dicts into the store.

        Args:
            projects: List of project dicts as held by the client

        Returns:
            dict: ``success``, ``synced``, ``skipped``, ``total`` and per-record
            ``results`` (``{"id", "action"}``)

        Raises:
            SyncError: If the store fails; earlier inserts stay applied
        """
        synced = 0
        skipped = 0
        results = []

        logger.info(
            "Project sync started",
            extra={
                "project_count": len(projects),
                "action": "project_sync_start",
                "component": "ProjectSyncService",
            },
        )

        for project in projects:
            project_id = project.get("id")

            if project_id is not None and str(project_id).startswith(DEMO_PREFIX):
                skipped += 1
                results.append({"id": project_id, "action": SKIPPED_DEMO})
                continue

            key = sync_identity(project)
            if key is None:
                skipped += 1
                results.append({"id": project_id, "action": SKIPPED_NO_IDENTITY})
                continue

            try:
                if ProjectSyncService._identity_exists(project, key):
                    skipped += 1
                    results.append({"id": project_id, "action": SKIPPED})
                    continue

                ProjectSyncService._insert_project(project, key)
            except IntegrityError:
                # Another sync inserted the same identity first
                logger.info(
                    "Concurrent insert detected, project skipped",
                    extra={
                        "sync_key": key,
                        "action": "project_sync_conflict",
                        "component": "ProjectSyncService",
                    },
                )
                skipped += 1
                results.append({"id": project_id, "action": SKIPPED})
                continue
            except DatabaseError as e:
                logger.error(
                    "Project sync aborted by store failure",
                    extra={
                        "sync_key": key,
                        "synced": synced,
                        "skipped": skipped,
                        "error_message": str(e),
                        "action": "project_sync_failed",
                        "component": "ProjectSyncService",
                        "severity": "high",
                    },
                    exc_info=True,
                )
                raise SyncError("Project sync failed", synced=synced, skipped=skipped) from e

            synced += 1
            results.append({"id": project_id, "action": SYNCED})

        logger.info(
            "Project sync completed",
            extra={
                "synced": synced,
                "skipped": skipped,
                "total": len(projects),
                "action": "project_sync_success",
                "component": "ProjectSyncService",
            },
        )

        return {
            "success": True,
            "synced": synced,
            "skipped": skipped,
            "total": len(projects),
            "results": results,
        }

    @staticmethod
    def _identity_exists(project, key):
        """
        Whether the store already holds the incoming project.

        Matches the recorded ``sync_key`` and, for projects created through the
        API, the primary key (incoming id) or the title/client pair (no id).
        """
        lookup = Q(sync_key=key)

        project_id = project.get("id")
        if project_id not in (None, ""):
            pk = str(project_id).strip()
            if pk.isascii() and pk.isdigit() and 0 < int(pk) < MAX_PK:
                lookup |= Q(pk=int(pk))
        else:
            lookup |= Q(
                title=(project.get("title") or "").strip(),
                client=(project.get("client") or "").strip(),
            )

        return Project.objects.filter(lookup).exists()

    @staticmethod
    def _insert_project(project, key):
        """Insert one project with its tasks inside a savepoint."""
        with db_transaction.atomic():
            fields = {
                field: str(project.get(field) or "").strip()
                for field in PROJECT_TEXT_FIELDS
            }
            for field in PROJECT_LIST_FIELDS:
                value = project.get(field)
                fields[field] = value if isinstance(value, list) else []

            status = project.get("status")
            if status not in dict(Project.STATUS_CHOICES):
                status = Project.PLANNING

            tasks = [task for task in project.get("tasks") or [] if isinstance(task, dict)]
            progress = derive_progress(tasks)
            if progress is None:
                progress = ProjectSyncService._clamp_progress(project.get("progress"))

            instance = Project.objects.create(
                sync_key=key,
                status=status,
                progress=progress,
                linked_account=ProjectSyncService._resolve_account(
                    project.get("linked_account", project.get("linkedAccountId"))
                ),
                **fields,
            )

            for task in tasks:
                task_status = task.get("status")
                if task_status not in dict(Task.STATUS_CHOICES):
                    task_status = Task.TODO
                priority = task.get("priority")
                if priority not in dict(Task.PRIORITY_CHOICES):
                    priority = "Medium"
                Task.objects.create(
                    project=instance,
                    title=str(task.get("title") or "").strip(),
                    status=task_status,
                    priority=priority,
                )

        logger.debug(
            "Project inserted from sync",
            extra={
                "project_id": instance.id,
                "sync_key": key,
                "task_count": len(tasks),
                "action": "project_sync_inserted",
                "component": "ProjectSyncService",
            },
        )
        return instance

    @staticmethod
    def _clamp_progress(value):
        try:
            progress = int(value)
        except (TypeError, ValueError):
            return 0
        return max(0, min(100, progress))

    @staticmethod
    def _resolve_account(account_id):
        """Return the linked Account when it exists, else None."""
        if account_id in (None, ""):
            return None
        try:
            return Account.objects.get(pk=int(account_id))
        except (Account.DoesNotExist, TypeError, ValueError):
            logger.warning(
                "Linked account not found during sync",
                extra={
                    "account_id": account_id,
                    "action": "project_sync_account_missing",
                    "component": "ProjectSyncService",
                    "severity": "low",
                },
            )
            return None
