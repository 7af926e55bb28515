import random
import uuid

from django.conf import settings
from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone

from .exceptions import ImmutableFieldError


class CertificateStatus(models.TextChoices):
    PENDING_APPROVAL = "pending_approval", "Pending Approval"
    APPROVED = "approved", "Approved"
    ISSUED = "issued", "Issued"
    REJECTED = "rejected", "Rejected"
    REVOKED = "revoked", "Revoked"


class CertificateType(models.TextChoices):
    ADVANCED_EV_FUNDAMENTALS = "advanced_ev_fundamentals", "Advanced EV Fundamentals Specialist"
    BATTERY_SYSTEMS_EXPERT = "battery_systems_expert", "Battery Systems Expert"
    CHARGING_INFRASTRUCTURE_SPECIALIST = (
        "charging_infrastructure_specialist",
        "Charging Infrastructure Specialist",
    )
    MOTOR_CONTROL_ADVANCED = "motor_control_advanced", "Advanced Motor Control Technician"
    DIAGNOSTICS_EXPERT = "diagnostics_expert", "EV Diagnostics Expert"


class SkillLevel(models.TextChoices):
    EXPERT = "expert", "Expert Level"
    MASTER = "master", "Master Level"


class DeliveryStatus(models.TextChoices):
    NOT_SENT = "not_sent", "Not sent"
    QUEUED = "queued", "Queued"
    SENT = "sent", "Sent"
    FAILED = "failed", "Failed"


CERTIFICATE_PREFIXES = {
    CertificateType.ADVANCED_EV_FUNDAMENTALS: "EVF",
    CertificateType.BATTERY_SYSTEMS_EXPERT: "BSE",
    CertificateType.CHARGING_INFRASTRUCTURE_SPECIALIST: "CIS",
    CertificateType.MOTOR_CONTROL_ADVANCED: "MCA",
    CertificateType.DIAGNOSTICS_EXPERT: "EDX",
}


def generate_certificate_number(certificate_type, year=None):
    """SKV-<PREFIX>-<YEAR>-<6 digits>, e.g. SKV-BSE-2025-482913."""
    prefix = CERTIFICATE_PREFIXES[CertificateType(certificate_type)]
    year = year or timezone.now().year
    return f"SKV-{prefix}-{year}-{random.randint(100000, 999999)}"


def generate_verification_code():
    """8 uppercase hex characters followed by 4 digits."""
    return f"{uuid.uuid4().hex[:8].upper()}{random.randint(1000, 9999)}"


class Certificate(models.Model):
    """
    Professional certificate for one completed advanced course.

    Status changes go through certificates.lifecycle only. Identity fields
    are fixed once the row exists.
    """

    IMMUTABLE_FIELDS = (
        "user_id",
        "course_id",
        "course_title",
        "certificate_type",
        "skill_level",
        "completion_date",
        "certificate_number",
        "credential_verification_code",
        "total_watched_hours",
        "final_score",
        "instructor_name",
    )

    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name="certificates")

    # Identity
    user_full_name = models.CharField(max_length=150)
    user_email = models.EmailField(blank=True, default="")
    course_id = models.CharField(max_length=100, db_index=True)
    course_title = models.CharField(max_length=255)
    certificate_type = models.CharField(max_length=50, choices=CertificateType.choices)
    skill_level = models.CharField(max_length=20, choices=SkillLevel.choices)
    completion_date = models.DateTimeField()
    certificate_number = models.CharField(max_length=32, unique=True, editable=False)
    credential_verification_code = models.CharField(
        max_length=12, unique=True, editable=False, db_index=True
    )
    total_watched_hours = models.FloatField(default=0)
    final_score = models.FloatField(null=True, blank=True)
    instructor_name = models.CharField(max_length=150)

    # Review state
    status = models.CharField(
        max_length=20,
        choices=CertificateStatus.choices,
        default=CertificateStatus.PENDING_APPROVAL,
        db_index=True,
    )
    admin_notes = models.TextField(blank=True, default="")
    issued_date = models.DateTimeField(null=True, blank=True)

    # Delivery side-channel, independent of status
    delivery_status = models.CharField(
        max_length=20, choices=DeliveryStatus.choices, default=DeliveryStatus.NOT_SENT
    )
    delivery_error = models.TextField(blank=True, default="")
    delivered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.certificate_number} - {self.user.username} ({self.status})"

    @property
    def verification_url(self):
        base_url = settings.CERTIFICATE_VERIFY_BASE_URL.rstrip("/")
        return f"{base_url}/{self.credential_verification_code}"

    @property
    def is_valid(self):
        return self.status == CertificateStatus.ISSUED

    def save(self, *args, **kwargs):
        if self.pk is None:
            if not self.certificate_number:
                while True:
                    number = generate_certificate_number(self.certificate_type)
                    if not Certificate.objects.filter(certificate_number=number).exists():
                        self.certificate_number = number
                        break
            if not self.credential_verification_code:
                while True:
                    code = generate_verification_code()
                    if not Certificate.objects.filter(credential_verification_code=code).exists():
                        self.credential_verification_code = code
                        break
        else:
            stored = (
                Certificate.objects.filter(pk=self.pk).values(*self.IMMUTABLE_FIELDS).first()
            )
            if stored:
                for field_name in self.IMMUTABLE_FIELDS:
                    if stored[field_name] != getattr(self, field_name):
                        raise ImmutableFieldError(field_name)
        super().save(*args, **kwargs)
