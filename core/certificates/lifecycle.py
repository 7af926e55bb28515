"""
Certificate Lifecycle
The only writer of certificate status.

    pending_approval -> approved -> issued -> revoked
    pending_approval -> rejected

Each transition is a conditional UPDATE on the expected source status, so of
two concurrent admins acting on the same certificate exactly one wins.
"""

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from administration.audit import log_admin_action

from .exceptions import (
    IneligibleCompletionError,
    InvalidTransitionError,
    MissingReasonError,
)
from .models import Certificate, CertificateStatus, DeliveryStatus
from .notifier import CeleryCertificateNotifier, DeliveryResult, record_delivery
from .signals import certificate_transitioned

logger = logging.getLogger(__name__)


class CertificateLifecycle:
    def __init__(self, notifier=None, clock=None):
        self.notifier = notifier or CeleryCertificateNotifier()
        self.clock = clock or timezone.now

    # Creation

    def generate(self, user, course, completion_data):
        """
        Create a pending certificate for a completed advanced course.

        Not deduplicated: callers check for an existing certificate for the
        same (user, course) first.

        Raises:
            IneligibleCompletionError: if the course is unfinished, has no
                recorded duration, or does not award a certificate.
        """
        if not completion_data.completed:
            raise IneligibleCompletionError(course.course_id, "course not completed")
        if completion_data.total_duration <= 0:
            raise IneligibleCompletionError(course.course_id, "no recorded watch duration")
        if not course.certificate_type or not course.skill_level:
            raise IneligibleCompletionError(course.course_id, "course does not award a certificate")

        score = min(100.0, completion_data.watched_seconds / completion_data.total_duration * 100)
        profile = getattr(user, "profile", None)

        certificate = Certificate.objects.create(
            user=user,
            user_full_name=profile.display_name if profile else user.username,
            user_email=user.email or "",
            course_id=course.course_id,
            course_title=course.title,
            certificate_type=course.certificate_type,
            skill_level=course.skill_level,
            completion_date=completion_data.completed_at or self.clock(),
            total_watched_hours=completion_data.total_duration / 3600,
            final_score=score,
            instructor_name=settings.CERTIFICATE_INSTRUCTOR_NAME,
        )

        logger.info(
            "Generated certificate %s for %s (course %s)",
            certificate.certificate_number,
            user.username,
            course.course_id,
        )
        return certificate

    # Transitions

    def approve(self, certificate_id, admin_notes=None, actor=None):
        changes = {}
        if admin_notes:
            changes["admin_notes"] = admin_notes.strip()
        return self._transition(
            certificate_id,
            "approve",
            CertificateStatus.PENDING_APPROVAL,
            CertificateStatus.APPROVED,
            actor=actor,
            **changes,
        )

    def reject(self, certificate_id, reason, actor=None):
        reason = (reason or "").strip()
        if not reason:
            raise MissingReasonError("reject")
        return self._transition(
            certificate_id,
            "reject",
            CertificateStatus.PENDING_APPROVAL,
            CertificateStatus.REJECTED,
            actor=actor,
            admin_notes=reason,
        )

    def issue(self, certificate_id, actor=None):
        """
        Issue an approved certificate, then hand it to the notifier.

        The status change is committed before delivery starts. A delivery
        failure is recorded on the delivery fields and the certificate stays
        issued.
        """
        certificate = self._transition(
            certificate_id,
            "issue",
            CertificateStatus.APPROVED,
            CertificateStatus.ISSUED,
            actor=actor,
            issued_date=self.clock(),
        )
        return self._deliver(certificate)

    def revoke(self, certificate_id, reason, actor=None):
        reason = (reason or "").strip()
        if not reason:
            raise MissingReasonError("revoke")
        return self._transition(
            certificate_id,
            "revoke",
            CertificateStatus.ISSUED,
            CertificateStatus.REVOKED,
            actor=actor,
            admin_notes=reason,
        )

    def resend(self, certificate_id, actor=None):
        """Retry delivery of an issued certificate."""
        certificate = Certificate.objects.select_related("user").get(pk=certificate_id)
        if certificate.status != CertificateStatus.ISSUED:
            raise InvalidTransitionError("resend", certificate.status)

        if actor is not None:
            log_admin_action(
                actor,
                "certificate_resend",
                target_user=certificate.user,
                details={"certificate_number": certificate.certificate_number},
            )
        return self._deliver(certificate)

    def _transition(self, certificate_id, action, source, target, actor=None, **changes):
        now = self.clock()

        with transaction.atomic():
            updated = Certificate.objects.filter(pk=certificate_id, status=source).update(
                status=target, updated_at=now, **changes
            )
            if not updated:
                current = (
                    Certificate.objects.filter(pk=certificate_id)
                    .values_list("status", flat=True)
                    .first()
                )
                if current is None:
                    raise Certificate.DoesNotExist(f"Certificate {certificate_id} does not exist")
                logger.warning(
                    "Refused to %s certificate %s: status is %s", action, certificate_id, current
                )
                raise InvalidTransitionError(action, current)

            certificate = Certificate.objects.select_related("user").get(pk=certificate_id)
            if actor is not None:
                log_admin_action(
                    actor,
                    f"certificate_{action}",
                    target_user=certificate.user,
                    details={
                        "certificate_number": certificate.certificate_number,
                        "from": str(source),
                        "to": str(target),
                        "notes": changes.get("admin_notes", ""),
                    },
                )

        logger.info(
            "Certificate %s: %s -> %s (by %s)",
            certificate.certificate_number,
            source,
            target,
            actor.username if actor else "system",
        )
        certificate_transitioned.send(
            sender=self.__class__,
            certificate=certificate,
            action=action,
            previous_status=source,
            actor=actor,
        )
        return certificate

    # Delivery

    def _deliver(self, certificate):
        record_delivery(certificate.pk, DeliveryResult.queued(), now=self.clock())
        try:
            result = self.notifier.send(certificate)
        except Exception as e:
            logger.exception("Notifier failed for certificate %s", certificate.certificate_number)
            result = DeliveryResult.failed(e)

        if result.status != DeliveryStatus.QUEUED:
            record_delivery(certificate.pk, result, now=self.clock())
        if not result.ok:
            logger.error(
                "Delivery of certificate %s failed: %s",
                certificate.certificate_number,
                result.error,
            )

        certificate.refresh_from_db()
        return certificate

    # Queries

    @staticmethod
    def for_user(user):
        return Certificate.objects.filter(user=user)

    @staticmethod
    def by_status(status):
        return Certificate.objects.filter(status=status).select_related("user")

    @staticmethod
    def verify(code):
        """Look up a certificate by its verification code; None when unknown."""
        code = (code or "").strip().upper()
        if not code:
            return None
        return Certificate.objects.filter(credential_verification_code=code).first()
