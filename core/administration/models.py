from django.db import models
from django.contrib.auth.models import User


class AdminAuditLog(models.Model):
    """One row per administrative action. Usernames are copied onto the row."""

    admin = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="admin_actions"
    )
    admin_username = models.CharField(max_length=150, db_index=True)
    action = models.CharField(max_length=255, db_index=True)
    target_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="target_of_admin_actions",
    )
    target_username = models.CharField(max_length=150, blank=True, default="", db_index=True)
    details = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-timestamp"]

    def __str__(self):
        return f"{self.admin_username} - {self.action} - {self.timestamp}"
