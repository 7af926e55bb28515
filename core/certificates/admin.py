from django.contrib import admin

from .models import Certificate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = (
        "certificate_number",
        "user",
        "course_id",
        "status",
        "delivery_status",
        "issued_date",
    )
    search_fields = ("user__username", "user__email", "certificate_number", "credential_verification_code")
    list_filter = ("status", "delivery_status", "certificate_type")
    # Status changes go through the review endpoints
    readonly_fields = [field.name for field in Certificate._meta.fields]

    def has_delete_permission(self, request, obj=None):
        return False
