"""
Service for project task management and completion progress.

Task mutations go through ProjectService; the Task signals re-derive the
owning project's progress right after every save or delete.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction
from django.utils import timezone

from ..models import Project, Task
from ..utils.progress_utils import derive_progress, toggled_status

# Get structured logger for this module
logger = logging.getLogger(__name__)


class ProjectService:
    """Service for tasks and progress of agency projects."""

    @staticmethod
    @db_transaction.atomic
    def add_task(project, data):
        """
        Add a task to a project.

        Args:
            project: Project instance
            data: dict with ``title`` and optional ``status`` and ``priority``

        Returns:
            Task: Created task; the project's progress is already re-derived

        Raises:
            ValidationError: If the title is empty or the status/priority is
                unknown
        """
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("Task title is required.")

        status = data.get("status") or Task.TODO
        if status not in dict(Task.STATUS_CHOICES):
            raise ValidationError(f"Invalid task status: {status}")

        priority = data.get("priority") or "Medium"
        if priority not in dict(Task.PRIORITY_CHOICES):
            raise ValidationError(f"Invalid task priority: {priority}")

        task = Task.objects.create(
            project=project, title=title, status=status, priority=priority
        )

        logger.info(
            "Task added to project",
            extra={
                "project_id": project.id,
                "task_id": task.id,
                "status": status,
                "action": "task_added",
                "component": "ProjectService",
            },
        )
        return task

    @staticmethod
    @db_transaction.atomic
    def toggle_task(task):
        """Flip a task between Done and not-Done."""
        previous = task.status
        task.status = toggled_status(previous)
        task.save(update_fields=["status"])

        logger.info(
            "Task status toggled",
            extra={
                "project_id": task.project_id,
                "task_id": task.id,
                "previous_status": previous,
                "new_status": task.status,
                "action": "task_toggled",
                "component": "ProjectService",
            },
        )
        return task

    @staticmethod
    @db_transaction.atomic
    def delete_task(task):
        project_id = task.project_id
        task_id = task.id
        task.delete()

        logger.info(
            "Task deleted",
            extra={
                "project_id": project_id,
                "task_id": task_id,
                "action": "task_deleted",
                "component": "ProjectService",
            },
        )

    @staticmethod
    def set_progress(project, value):
        """
        Set progress by hand.

        The value sticks until the next task mutation re-derives it.

        Raises:
            ValidationError: If value is not an integer in 0..100
        """
        try:
            progress = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid progress: {value}")

        if not 0 <= progress <= 100:
            raise ValidationError("Progress must be between 0 and 100.")

        project.progress = progress
        project.save(update_fields=["progress", "updated_at"])

        logger.info(
            "Project progress set manually",
            extra={
                "project_id": project.id,
                "progress": progress,
                "action": "progress_set",
                "component": "ProjectService",
            },
        )
        return project

    @staticmethod
    def refresh_progress(project_id):
        """
        Re-derive a project's progress from its current tasks.

        Projects without tasks keep their admin-set progress.

        Returns:
            int | None: New progress, or None when nothing was derived
        """
        statuses = list(
            Task.objects.filter(project_id=project_id).values("status")
        )
        progress = derive_progress(statuses)
        if progress is None:
            return None

        # Queryset update bypasses auto_now
        Project.objects.filter(pk=project_id).update(
            progress=progress, updated_at=timezone.now()
        )

        logger.debug(
            "Project progress re-derived",
            extra={
                "project_id": project_id,
                "task_count": len(statuses),
                "progress": progress,
                "action": "progress_refreshed",
                "component": "ProjectService",
            },
        )
        return progress
