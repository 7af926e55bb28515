import logging

from django.dispatch import receiver

from courses.evaluator import CourseCompletionEvaluator
from progress.ledger import ProgressLedger
from progress.signals import video_completed

from .exceptions import IneligibleCompletionError
from .lifecycle import CertificateLifecycle
from .models import Certificate

logger = logging.getLogger(__name__)


@receiver(video_completed)
def generate_certificates_for_completed_courses(sender, user, record, **kwargs):
    """
    Create a pending certificate for every advanced course the learner has
    now finished and holds no certificate for yet.
    """
    evaluator = CourseCompletionEvaluator()
    snapshot = ProgressLedger(user).snapshot()
    existing = set(Certificate.objects.filter(user=user).values_list("course_id", flat=True))
    lifecycle = CertificateLifecycle()

    for course in evaluator.catalog.advanced_courses():
        if course.course_id in existing:
            continue
        completion = evaluator.completion_data(course.course_id, snapshot, course)
        if not completion.completed:
            continue
        try:
            lifecycle.generate(user, course, completion)
        except IneligibleCompletionError as e:
            logger.warning("Certificate not generated for %s: %s", user.username, e)
