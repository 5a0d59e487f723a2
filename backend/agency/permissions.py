# permissions.py
import logging

from rest_framework import permissions

logger = logging.getLogger(__name__)


class IsAgencyAdmin(permissions.BasePermission):
    """
    Admin-only access to the agency API.

    Authorization granted to authenticated staff users and superusers.
    Every denial is logged for the audit trail.
    """

    def has_permission(self, request, view):
        """
        Verify the requesting user is agency staff.

        Args:
            request: HTTP request
            view: Target view being accessed

        Returns:
            bool: True if the user may use the agency API
        """
        user = request.user
        is_authorized = bool(
            user
            and user.is_authenticated
            and (user.is_staff or user.is_superuser)
        )

        if not is_authorized:
            logger.warning(
                "Agency admin access denied",
                extra={
                    "user_id": getattr(user, "id", None),
                    "view_name": view.__class__.__name__,
                    "method": request.method,
                    "action": "agency_admin_access_denied",
                    "component": "IsAgencyAdmin",
                    "severity": "medium",
                },
            )

        return is_authorized
