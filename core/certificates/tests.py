import re
from unittest.mock import patch

from django.contrib.auth.models import User
from django.core import mail
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from administration.models import AdminAuditLog
from courses.catalog import CourseCatalog
from courses.evaluator import CourseCompletionData
from progress.ledger import ProgressLedger

from .exceptions import (
    ImmutableFieldError,
    IneligibleCompletionError,
    InvalidTransitionError,
    MissingReasonError,
)
from .lifecycle import CertificateLifecycle
from .models import Certificate, CertificateStatus, DeliveryStatus
from .notifier import DeliveryResult
from .signals import certificate_transitioned


class RecordingNotifier:
    def __init__(self, result=None):
        self.result = result or DeliveryResult.sent()
        self.sent = []

    def send(self, certificate):
        self.sent.append(certificate.pk)
        return self.result


class RaisingNotifier:
    def send(self, certificate):
        raise ConnectionError("SMTP unreachable")


def completed_data(course_id="adv_2", watched=3000.0, total=3600.0):
    return CourseCompletionData(
        course_id=course_id,
        watched_seconds=watched,
        total_duration=total,
        completed=True,
        completed_at=timezone.now(),
    )


class CertificateLifecycleTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="tech", email="tech@example.com", password="password"
        )
        self.admin = User.objects.create_user(
            username="reviewer", password="password", is_staff=True
        )
        self.course = CourseCatalog.from_settings().get("adv_2")
        self.notifier = RecordingNotifier()
        self.lifecycle = CertificateLifecycle(notifier=self.notifier)
        self.certificate = self.lifecycle.generate(self.user, self.course, completed_data())

    def test_generate_sets_identity(self):
        certificate = self.certificate

        self.assertEqual(certificate.status, CertificateStatus.PENDING_APPROVAL)
        self.assertEqual(certificate.course_id, "adv_2")
        self.assertEqual(certificate.certificate_type, "battery_systems_expert")
        self.assertRegex(certificate.certificate_number, r"^SKV-BSE-\d{4}-\d{6}$")
        self.assertRegex(certificate.credential_verification_code, r"^[0-9A-F]{8}\d{4}$")
        self.assertAlmostEqual(certificate.final_score, 3000 / 3600 * 100)
        self.assertAlmostEqual(certificate.total_watched_hours, 1.0)
        self.assertEqual(certificate.user_email, "tech@example.com")

    def test_final_score_is_capped(self):
        certificate = self.lifecycle.generate(
            self.user, self.course, completed_data(watched=5000, total=3600)
        )
        self.assertEqual(certificate.final_score, 100.0)

    def test_generate_rejects_unfinished_course(self):
        data = CourseCompletionData("adv_2", 10, 3600, completed=False)
        with self.assertRaises(IneligibleCompletionError):
            self.lifecycle.generate(self.user, self.course, data)

    def test_generate_rejects_zero_duration(self):
        with self.assertRaises(IneligibleCompletionError):
            self.lifecycle.generate(self.user, self.course, completed_data(watched=0, total=0))

    def test_generate_rejects_basic_course(self):
        basic = CourseCatalog.from_settings().get("2")
        with self.assertRaises(IneligibleCompletionError):
            self.lifecycle.generate(self.user, basic, completed_data(course_id="2"))

    def test_full_round_trip(self):
        pk = self.certificate.pk

        approved = self.lifecycle.approve(pk, admin_notes="Looks good", actor=self.admin)
        self.assertEqual(approved.status, CertificateStatus.APPROVED)
        self.assertEqual(approved.admin_notes, "Looks good")

        issued = self.lifecycle.issue(pk, actor=self.admin)
        self.assertEqual(issued.status, CertificateStatus.ISSUED)
        self.assertIsNotNone(issued.issued_date)
        self.assertEqual(issued.delivery_status, DeliveryStatus.SENT)
        self.assertIsNotNone(issued.delivered_at)
        self.assertEqual(self.notifier.sent, [pk])

        revoked = self.lifecycle.revoke(pk, "Issued in error", actor=self.admin)
        self.assertEqual(revoked.status, CertificateStatus.REVOKED)
        self.assertEqual(revoked.admin_notes, "Issued in error")

    def test_cannot_issue_pending_certificate(self):
        with self.assertRaises(InvalidTransitionError) as ctx:
            self.lifecycle.issue(self.certificate.pk)

        self.assertEqual(ctx.exception.current_status, CertificateStatus.PENDING_APPROVAL)
        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.status, CertificateStatus.PENDING_APPROVAL)
        self.assertEqual(self.notifier.sent, [])

    def test_cannot_revoke_unissued_certificate(self):
        self.lifecycle.approve(self.certificate.pk)
        with self.assertRaises(InvalidTransitionError):
            self.lifecycle.revoke(self.certificate.pk, "Fraud")

    def test_reject_requires_reason(self):
        for reason in ("", "   ", None):
            with self.subTest(reason=reason):
                with self.assertRaises(MissingReasonError):
                    self.lifecycle.reject(self.certificate.pk, reason)

        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.status, CertificateStatus.PENDING_APPROVAL)

    def test_rejected_is_terminal(self):
        self.lifecycle.reject(self.certificate.pk, "Incomplete watch history")
        with self.assertRaises(InvalidTransitionError):
            self.lifecycle.approve(self.certificate.pk)

    def test_second_approval_loses(self):
        other = CertificateLifecycle(notifier=self.notifier)
        self.lifecycle.approve(self.certificate.pk)

        with self.assertRaises(InvalidTransitionError) as ctx:
            other.approve(self.certificate.pk)
        self.assertEqual(ctx.exception.current_status, CertificateStatus.APPROVED)

    def test_unknown_certificate(self):
        with self.assertRaises(Certificate.DoesNotExist):
            self.lifecycle.approve(999999)

    def test_failed_delivery_keeps_certificate_issued(self):
        lifecycle = CertificateLifecycle(
            notifier=RecordingNotifier(DeliveryResult.failed("mailbox full"))
        )
        lifecycle.approve(self.certificate.pk)
        issued = lifecycle.issue(self.certificate.pk)

        self.assertEqual(issued.status, CertificateStatus.ISSUED)
        self.assertEqual(issued.delivery_status, DeliveryStatus.FAILED)
        self.assertEqual(issued.delivery_error, "mailbox full")

    def test_raising_notifier_keeps_certificate_issued(self):
        lifecycle = CertificateLifecycle(notifier=RaisingNotifier())
        lifecycle.approve(self.certificate.pk)
        issued = lifecycle.issue(self.certificate.pk)

        self.assertEqual(issued.status, CertificateStatus.ISSUED)
        self.assertEqual(issued.delivery_status, DeliveryStatus.FAILED)
        self.assertIn("SMTP unreachable", issued.delivery_error)

    def test_resend_after_failure(self):
        CertificateLifecycle(notifier=RaisingNotifier()).approve(self.certificate.pk)
        CertificateLifecycle(notifier=RaisingNotifier()).issue(self.certificate.pk)

        resent = self.lifecycle.resend(self.certificate.pk, actor=self.admin)
        self.assertEqual(resent.delivery_status, DeliveryStatus.SENT)
        self.assertEqual(resent.delivery_error, "")

    def test_resend_requires_issued(self):
        with self.assertRaises(InvalidTransitionError):
            self.lifecycle.resend(self.certificate.pk)

    def test_identity_fields_are_immutable(self):
        self.certificate.certificate_number = "SKV-BSE-2020-000000"
        with self.assertRaises(ImmutableFieldError):
            self.certificate.save()

    def test_mutable_fields_can_be_saved(self):
        self.certificate.admin_notes = "Checked watch history"
        self.certificate.save()
        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.admin_notes, "Checked watch history")

    def test_admin_actions_are_audited(self):
        self.lifecycle.approve(self.certificate.pk, actor=self.admin)
        self.lifecycle.issue(self.certificate.pk, actor=self.admin)

        actions = list(AdminAuditLog.objects.order_by("id").values_list("action", flat=True))
        self.assertEqual(actions, ["certificate_approve", "certificate_issue"])
        log = AdminAuditLog.objects.get(action="certificate_issue")
        self.assertEqual(log.target_user, self.user)
        self.assertEqual(log.details["to"], CertificateStatus.ISSUED)

    def test_transition_signal(self):
        received = []

        def handler(sender, certificate, action, previous_status, **kwargs):
            received.append((action, previous_status, certificate.status))

        certificate_transitioned.connect(handler)
        try:
            self.lifecycle.approve(self.certificate.pk)
        finally:
            certificate_transitioned.disconnect(handler)

        self.assertEqual(
            received,
            [("approve", CertificateStatus.PENDING_APPROVAL, CertificateStatus.APPROVED)],
        )

    def test_verify_by_code(self):
        code = self.certificate.credential_verification_code
        self.assertEqual(CertificateLifecycle.verify(code.lower()), self.certificate)
        self.assertIsNone(CertificateLifecycle.verify("NOPE"))
        self.assertIsNone(CertificateLifecycle.verify(""))


class CeleryDeliveryTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="tech", email="tech@example.com", password="password"
        )
        course = CourseCatalog.from_settings().get("adv_1")
        self.lifecycle = CertificateLifecycle()
        self.certificate = self.lifecycle.generate(
            self.user, course, completed_data(course_id="adv_1")
        )
        self.lifecycle.approve(self.certificate.pk)

    def test_issue_sends_email_through_task(self):
        issued = self.lifecycle.issue(self.certificate.pk)

        self.assertEqual(issued.delivery_status, DeliveryStatus.SENT)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["tech@example.com"])
        self.assertIn(issued.certificate_number, mail.outbox[0].body)

    def test_mail_error_is_recorded(self):
        with patch("certificates.emails.send_mail", side_effect=OSError("connection refused")):
            issued = self.lifecycle.issue(self.certificate.pk)

        self.assertEqual(issued.status, CertificateStatus.ISSUED)
        self.assertEqual(issued.delivery_status, DeliveryStatus.FAILED)
        self.assertIn("connection refused", issued.delivery_error)

    def test_missing_email_is_recorded(self):
        Certificate.objects.filter(pk=self.certificate.pk).update(user_email="")
        issued = self.lifecycle.issue(self.certificate.pk)

        self.assertEqual(issued.delivery_status, DeliveryStatus.FAILED)
        self.assertEqual(len(mail.outbox), 0)


class AutoGenerationTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="tech", password="password")
        self.ledger = ProgressLedger(self.user)

    def test_completing_advanced_course_creates_pending_certificate(self):
        self.ledger.mark_completed("adv_3_1", "adv_3", duration_sec=600)
        self.assertFalse(Certificate.objects.filter(user=self.user).exists())

        self.ledger.mark_completed("adv_3_2", "adv_3", duration_sec=600)

        certificate = Certificate.objects.get(user=self.user)
        self.assertEqual(certificate.course_id, "adv_3")
        self.assertEqual(certificate.status, CertificateStatus.PENDING_APPROVAL)
        self.assertTrue(re.match(r"^SKV-CIS-", certificate.certificate_number))

    def test_basic_course_creates_no_certificate(self):
        for index in (1, 2):
            self.ledger.mark_completed(f"3-{index}", "3", duration_sec=600)
        self.assertFalse(Certificate.objects.exists())


class CertificateApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="tech", email="tech@example.com", password="password"
        )
        self.admin = User.objects.create_user(
            username="reviewer", password="password", is_staff=True
        )
        course = CourseCatalog.from_settings().get("adv_4")
        self.certificate = CertificateLifecycle(notifier=RecordingNotifier()).generate(
            self.user, course, completed_data(course_id="adv_4")
        )

    def test_learner_cannot_approve(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse("certificate-approve", args=[self.certificate.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.status, CertificateStatus.PENDING_APPROVAL)

    def test_admin_approves(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse("certificate-approve", args=[self.certificate.pk]),
            {"admin_notes": "ok"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], CertificateStatus.APPROVED)

    def test_invalid_transition_is_conflict(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse("certificate-issue", args=[self.certificate.pk]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["current_status"], CertificateStatus.PENDING_APPROVAL)

    def test_reject_without_reason(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse("certificate-reject", args=[self.certificate.pk]), {}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_certificate(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse("certificate-approve", args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_review_queue(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse("certificate-review"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["user_email"], "tech@example.com")

    def test_my_certificates(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get(reverse("my-certificates"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["certificate_number"], self.certificate.certificate_number)
        self.assertNotIn("admin_notes", response.data[0])

    def test_public_verification(self):
        url = reverse("certificate-verify", args=[self.certificate.credential_verification_code])
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["valid"])
        self.assertEqual(response.data["certificate"]["course_title"], self.certificate.course_title)

    def test_public_verification_unknown_code(self):
        response = self.client.get(reverse("certificate-verify", args=["UNKNOWN"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
