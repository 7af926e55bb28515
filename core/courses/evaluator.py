"""
Course Completion Evaluator
Derives course-level completion from a learner's progress records.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from .catalog import ADVANCED_PREFIX, CourseCatalog

logger = logging.getLogger(__name__)

LEGACY_COURSE_PREFIX = "course_"


@dataclass(frozen=True)
class CompletionDetail:
    completed_count: int
    total_expected: int
    is_complete: bool


@dataclass(frozen=True)
class CourseCompletionData:
    """Aggregated watch figures for one course, as consumed by certificate generation."""

    course_id: str
    watched_seconds: float
    total_duration: float
    completed: bool
    completed_at: datetime | None = None


def underlying_video_id(video_id):
    """Video id with the legacy `course_` prefix removed."""
    return video_id.removeprefix(LEGACY_COURSE_PREFIX)


class CourseCompletionEvaluator:
    """
    Strict course completion: every expected video must be completed, no
    partial credit.

    Historical progress data uses three naming conventions for the same
    course, so records are matched by any of:

    1. the exact course id (`"2"`),
    2. the `course_` form (`course_id == "course_2"` or a `course_2...` video id),
    3. the `<id>-` video id pattern (`"2-1"`, `"2-2"`, ...).

    Matches are unioned and de-duplicated by underlying video id before
    counting. This keeps old installs working; the data itself should be
    migrated to a single id scheme eventually.
    """

    def __init__(self, catalog=None):
        self.catalog = catalog or CourseCatalog.from_settings()

    # Alias resolution

    @staticmethod
    def _matches(course_id, record):
        legacy_id = f"{LEGACY_COURSE_PREFIX}{course_id}"
        if record.course_id == course_id:
            return True
        if record.course_id == legacy_id or record.video_id.startswith(f"{legacy_id}-"):
            return True
        if record.video_id.startswith(f"{course_id}-"):
            # Basic courses never pick up advanced modules through the pattern match
            return course_id.startswith(ADVANCED_PREFIX) or not record.video_id.startswith(
                ADVANCED_PREFIX
            )
        return False

    def resolve_videos(self, course_id, ledger_snapshot, required_video_ids=None):
        """
        Map each underlying video id of the course to its best record.

        When several alias records exist for one video, a completed record
        wins, then the one with the most watch time. With `required_video_ids`
        only those videos are kept.
        """
        resolved = {}
        for record in ledger_snapshot.values():
            if not self._matches(course_id, record):
                continue
            key = underlying_video_id(record.video_id)
            if required_video_ids is not None and key not in required_video_ids:
                continue
            current = resolved.get(key)
            if current is None or (record.completed, record.watched_seconds) > (
                current.completed,
                current.watched_seconds,
            ):
                resolved[key] = record
        return resolved

    # Completion

    def completion_detail(self, course_id, ledger_snapshot, course_definition=None):
        definition = course_definition or self.catalog.find(course_id)
        if definition is None:
            logger.debug("No course definition for %s; treating as incomplete", course_id)
            return CompletionDetail(completed_count=0, total_expected=0, is_complete=False)

        required = set(definition.video_ids)
        resolved = self.resolve_videos(course_id, ledger_snapshot, required)
        completed_count = sum(1 for record in resolved.values() if record.completed)

        return CompletionDetail(
            completed_count=completed_count,
            total_expected=len(required),
            is_complete=bool(required) and completed_count == len(required),
        )

    def is_course_complete(self, course_id, ledger_snapshot, course_definition=None):
        """True only when every required video of a known course is completed."""
        return self.completion_detail(course_id, ledger_snapshot, course_definition).is_complete

    def completion_data(self, course_id, ledger_snapshot, course_definition=None):
        definition = course_definition or self.catalog.find(course_id)
        required = set(definition.video_ids) if definition else None
        resolved = self.resolve_videos(course_id, ledger_snapshot, required)
        is_complete = self.is_course_complete(course_id, ledger_snapshot, definition)

        completed_times = [
            record.completed_at for record in resolved.values() if record.completed_at
        ]
        return CourseCompletionData(
            course_id=course_id,
            watched_seconds=sum(record.watched_seconds for record in resolved.values()),
            total_duration=sum(record.total_duration_seconds for record in resolved.values()),
            completed=is_complete,
            completed_at=max(completed_times) if is_complete and completed_times else None,
        )

    def completed_course_count(self, ledger_snapshot, course_ids=None):
        """
        Number of completed courses among `course_ids`.

        Professional certification is earned from advanced courses, so those
        are counted by default.
        """
        if course_ids is None:
            course_ids = [course.course_id for course in self.catalog.advanced_courses()]
        return sum(
            1 for course_id in course_ids if self.is_course_complete(course_id, ledger_snapshot)
        )

    def prerequisites_met(self, course_id, ledger_snapshot):
        definition = self.catalog.find(course_id)
        if definition is None:
            return False
        if not definition.prerequisite_course_id:
            return True
        return self.is_course_complete(definition.prerequisite_course_id, ledger_snapshot)
