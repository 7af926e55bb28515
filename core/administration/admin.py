from django.contrib import admin

from .models import AdminAuditLog


@admin.register(AdminAuditLog)
class AdminAuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "admin_username", "action", "target_username")
    list_filter = ("action",)
    search_fields = ("admin_username", "target_username")
    readonly_fields = [field.name for field in AdminAuditLog._meta.fields]
