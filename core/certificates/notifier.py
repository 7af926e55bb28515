"""
Certificate delivery.

A notifier takes an issued certificate and reports what happened in a
DeliveryResult. The lifecycle records that result on the certificate's
delivery fields; it never changes the certificate status.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from django.utils import timezone

from .emails import send_certificate_email
from .models import Certificate, DeliveryStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    status: str
    error: str = ""

    @property
    def ok(self):
        return self.status != DeliveryStatus.FAILED

    @classmethod
    def sent(cls):
        return cls(DeliveryStatus.SENT)

    @classmethod
    def queued(cls):
        return cls(DeliveryStatus.QUEUED)

    @classmethod
    def failed(cls, error):
        return cls(DeliveryStatus.FAILED, str(error))


class CertificateNotifier(Protocol):
    def send(self, certificate) -> DeliveryResult: ...


class EmailCertificateNotifier:
    """Sends the congratulation email synchronously."""

    def send(self, certificate):
        if not certificate.user_email:
            return DeliveryResult.failed("Learner has no email address")
        try:
            send_certificate_email(certificate)
        except Exception as e:
            logger.exception(
                "Failed to email certificate %s", certificate.certificate_number
            )
            return DeliveryResult.failed(e)
        return DeliveryResult.sent()


class CeleryCertificateNotifier:
    """Hands delivery to a Celery worker; the task records the final outcome."""

    def send(self, certificate):
        from .tasks import deliver_certificate_task

        deliver_certificate_task.delay(certificate.pk)
        return DeliveryResult.queued()


def record_delivery(certificate_id, result, now=None):
    """Store a delivery outcome on the certificate without touching its status."""
    now = now or timezone.now()
    changes = {
        "delivery_status": result.status,
        "delivery_error": result.error,
        "updated_at": now,
    }
    if result.status == DeliveryStatus.SENT:
        changes["delivered_at"] = now
    Certificate.objects.filter(pk=certificate_id).update(**changes)
