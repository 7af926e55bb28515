from .models import AdminAuditLog


def log_admin_action(admin, action, target_user=None, details=None):
    """Helper to record administrative actions in the audit log."""
    return AdminAuditLog.objects.create(
        admin=admin,
        admin_username=admin.username if admin else "system",
        action=action,
        target_user=target_user,
        target_username=target_user.username if target_user else "",
        details=details or {},
    )
