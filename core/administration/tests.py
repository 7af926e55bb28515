from django.contrib.auth.models import User
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from .audit import log_admin_action
from .models import AdminAuditLog


class AdminAuditLogTests(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="reviewer", password="password", is_staff=True)
        self.learner = User.objects.create_user(username="learner", password="password")
        self.url = reverse("admin_audit_logs")

    def test_log_snapshots_usernames(self):
        log = log_admin_action(
            self.admin, "certificate_approve", target_user=self.learner, details={"to": "approved"}
        )

        self.assertEqual(log.admin_username, "reviewer")
        self.assertEqual(log.target_username, "learner")

    def test_system_actions(self):
        log = log_admin_action(None, "certificate_issue")
        self.assertEqual(log.admin_username, "system")

    def test_staff_can_filter_logs(self):
        log_admin_action(self.admin, "certificate_approve", target_user=self.learner)
        log_admin_action(self.admin, "certificate_reject", target_user=self.learner)
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(self.url, {"action": "certificate_reject"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["target"], "learner")

    def test_learners_cannot_read_logs(self):
        self.client.force_authenticate(user=self.learner)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_logs_outlive_admin_account(self):
        log_admin_action(self.admin, "certificate_approve")
        self.admin.delete()

        log = AdminAuditLog.objects.get()
        self.assertIsNone(log.admin)
        self.assertEqual(log.admin_username, "reviewer")


class HealthCheckTests(APITestCase):
    def test_health_is_public(self):
        response = self.client.get(reverse("health-check"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["checks"]["database"], "ok")
