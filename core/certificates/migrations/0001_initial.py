from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Certificate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_full_name", models.CharField(max_length=150)),
                ("user_email", models.EmailField(blank=True, default="", max_length=254)),
                ("course_id", models.CharField(db_index=True, max_length=100)),
                ("course_title", models.CharField(max_length=255)),
                (
                    "certificate_type",
                    models.CharField(
                        choices=[
                            ("advanced_ev_fundamentals", "Advanced EV Fundamentals Specialist"),
                            ("battery_systems_expert", "Battery Systems Expert"),
                            ("charging_infrastructure_specialist", "Charging Infrastructure Specialist"),
                            ("motor_control_advanced", "Advanced Motor Control Technician"),
                            ("diagnostics_expert", "EV Diagnostics Expert"),
                        ],
                        max_length=50,
                    ),
                ),
                (
                    "skill_level",
                    models.CharField(
                        choices=[("expert", "Expert Level"), ("master", "Master Level")],
                        max_length=20,
                    ),
                ),
                ("completion_date", models.DateTimeField()),
                ("certificate_number", models.CharField(editable=False, max_length=32, unique=True)),
                (
                    "credential_verification_code",
                    models.CharField(db_index=True, editable=False, max_length=12, unique=True),
                ),
                ("total_watched_hours", models.FloatField(default=0)),
                ("final_score", models.FloatField(blank=True, null=True)),
                ("instructor_name", models.CharField(max_length=150)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending_approval", "Pending Approval"),
                            ("approved", "Approved"),
                            ("issued", "Issued"),
                            ("rejected", "Rejected"),
                            ("revoked", "Revoked"),
                        ],
                        db_index=True,
                        default="pending_approval",
                        max_length=20,
                    ),
                ),
                ("admin_notes", models.TextField(blank=True, default="")),
                ("issued_date", models.DateTimeField(blank=True, null=True)),
                (
                    "delivery_status",
                    models.CharField(
                        choices=[
                            ("not_sent", "Not sent"),
                            ("queued", "Queued"),
                            ("sent", "Sent"),
                            ("failed", "Failed"),
                        ],
                        default="not_sent",
                        max_length=20,
                    ),
                ),
                ("delivery_error", models.TextField(blank=True, default="")),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="certificates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
