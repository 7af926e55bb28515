from rest_framework import serializers

from .models import AdminAuditLog


class AdminAuditLogSerializer(serializers.ModelSerializer):
    admin = serializers.CharField(source="admin_username", read_only=True)
    target = serializers.CharField(source="target_username", read_only=True)

    class Meta:
        model = AdminAuditLog
        fields = ["id", "admin", "action", "target", "details", "timestamp"]
