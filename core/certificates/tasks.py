from celery import shared_task
import logging

from .models import Certificate, CertificateStatus
from .notifier import DeliveryResult, EmailCertificateNotifier, record_delivery

logger = logging.getLogger(__name__)


@shared_task
def deliver_certificate_task(certificate_id):
    """Email an issued certificate and record the outcome."""
    try:
        certificate = Certificate.objects.get(pk=certificate_id)
    except Certificate.DoesNotExist:
        logger.warning("Certificate %s not found for delivery task", certificate_id)
        return

    if certificate.status != CertificateStatus.ISSUED:
        logger.warning(
            "Skipping delivery of certificate %s: status is %s",
            certificate.certificate_number,
            certificate.status,
        )
        record_delivery(certificate_id, DeliveryResult.failed(f"Certificate is {certificate.status}"))
        return

    result = EmailCertificateNotifier().send(certificate)
    record_delivery(certificate_id, result)
    logger.info(
        "Delivery task for certificate %s finished: %s",
        certificate.certificate_number,
        result.status,
    )
