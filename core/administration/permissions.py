from rest_framework.permissions import BasePermission


class IsAdminUser(BasePermission):
    """
    Restricts access to staff and superuser accounts.

    Certificate review and the audit log both sit behind this check, so
    views never test `is_staff` themselves.
    """

    def has_permission(self, request, _view):
        return bool(
            request.user
            and request.user.is_authenticated
            and (request.user.is_staff or request.user.is_superuser)
        )
