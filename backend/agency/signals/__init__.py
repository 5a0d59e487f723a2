"""
Signal handlers for the agency app.
"""
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from agency.models import Task
from agency.services.project_service import ProjectService


@receiver(post_save, sender=Task)
def refresh_progress_on_task_save(sender, instance, **kwargs):
    """
    Re-derive the project's progress whenever a task is added or changed.
    """
    ProjectService.refresh_progress(instance.project_id)


@receiver(post_delete, sender=Task)
def refresh_progress_on_task_delete(sender, instance, **kwargs):
    # Deleting the last task leaves the last derived value in place
    ProjectService.refresh_progress(instance.project_id)
