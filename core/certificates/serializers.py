from rest_framework import serializers

from .models import Certificate
from .presentation import certificate_description, status_color


class CertificateSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    status_color = serializers.SerializerMethodField()
    certificate_type_display = serializers.CharField(
        source="get_certificate_type_display", read_only=True
    )
    description = serializers.SerializerMethodField()
    verification_url = serializers.CharField(read_only=True)

    class Meta:
        model = Certificate
        fields = [
            "id",
            "username",
            "user_full_name",
            "course_id",
            "course_title",
            "certificate_type",
            "certificate_type_display",
            "description",
            "skill_level",
            "completion_date",
            "issued_date",
            "certificate_number",
            "credential_verification_code",
            "verification_url",
            "total_watched_hours",
            "final_score",
            "instructor_name",
            "status",
            "status_display",
            "status_color",
            "delivery_status",
        ]
        read_only_fields = fields

    def get_status_color(self, obj):
        return status_color(obj.status)

    def get_description(self, obj):
        return certificate_description(obj.certificate_type)


class AdminCertificateSerializer(CertificateSerializer):
    class Meta(CertificateSerializer.Meta):
        fields = CertificateSerializer.Meta.fields + [
            "user_email",
            "admin_notes",
            "delivery_error",
            "delivered_at",
            "created_at",
        ]
        read_only_fields = fields


class PublicCertificateSerializer(serializers.ModelSerializer):
    """Fields shown to anyone holding the verification code."""

    class Meta:
        model = Certificate
        fields = [
            "user_full_name",
            "course_title",
            "certificate_type",
            "skill_level",
            "completion_date",
            "issued_date",
            "certificate_number",
            "status",
        ]
        read_only_fields = fields


class ApproveSerializer(serializers.Serializer):
    admin_notes = serializers.CharField(required=False, allow_blank=True, default="")


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
