from django.urls import path

from .views import AdminAuditLogView

urlpatterns = [
    path("audit-logs/", AdminAuditLogView.as_view(), name="admin_audit_logs"),
]
