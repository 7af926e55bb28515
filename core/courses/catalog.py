"""
Course Catalog
Read-only course definitions: which videos each course requires and which
certificate an advanced course leads to.
"""

from dataclasses import dataclass

from django.conf import settings

from .exceptions import UnknownCourseError

ADVANCED_PREFIX = "adv_"


@dataclass(frozen=True)
class CourseDefinition:
    course_id: str
    title: str
    video_ids: tuple
    certificate_type: str | None = None
    skill_level: str | None = None
    prerequisite_course_id: str | None = None

    @property
    def expected_video_count(self) -> int:
        return len(self.video_ids)

    @property
    def is_advanced(self) -> bool:
        return self.course_id.startswith(ADVANCED_PREFIX)


def _basic(number, title, video_count):
    return CourseDefinition(
        course_id=str(number),
        title=title,
        video_ids=tuple(f"{number}-{index}" for index in range(1, video_count + 1)),
    )


def _advanced(number, title, video_count, certificate_type, skill_level):
    return CourseDefinition(
        course_id=f"{ADVANCED_PREFIX}{number}",
        title=title,
        video_ids=tuple(
            f"{ADVANCED_PREFIX}{number}_{index}" for index in range(1, video_count + 1)
        ),
        certificate_type=certificate_type,
        skill_level=skill_level,
        prerequisite_course_id=str(number),
    )


DEFAULT_COURSES = (
    _basic(1, "High Voltage Safety Foundation", 7),
    _basic(2, "Electrical Fundamentals", 4),
    _basic(3, "Advanced Electrical Diagnostics", 2),
    _basic(4, "EV Charging Systems", 2),
    _basic(5, "Advanced EV Systems", 3),
    _advanced(1, "1.0 High Voltage Vehicle Safety", 7, "advanced_ev_fundamentals", "expert"),
    _advanced(2, "2.0 Electrical Level 1 - Medium Heavy Duty", 4, "battery_systems_expert", "expert"),
    _advanced(3, "3.0 Electrical Level 2 - Medium Heavy Duty", 2, "charging_infrastructure_specialist", "expert"),
    _advanced(4, "4.0 Electric Vehicle Supply Equipment", 2, "motor_control_advanced", "master"),
    _advanced(5, "5.0 Introduction to Electric Vehicles", 3, "advanced_ev_fundamentals", "master"),
)


class CourseCatalog:
    def __init__(self, courses):
        self._courses = {course.course_id: course for course in courses}

    @classmethod
    def from_settings(cls):
        """
        Build the catalog from the COURSE_CATALOG setting, or the built-in
        courses when it is unset.

        COURSE_CATALOG is a list of dicts with the CourseDefinition fields.
        """
        configured = getattr(settings, "COURSE_CATALOG", None)
        if not configured:
            return cls(DEFAULT_COURSES)
        return cls(
            CourseDefinition(
                course_id=str(entry["course_id"]),
                title=entry.get("title", str(entry["course_id"])),
                video_ids=tuple(entry["video_ids"]),
                certificate_type=entry.get("certificate_type"),
                skill_level=entry.get("skill_level"),
                prerequisite_course_id=entry.get("prerequisite_course_id"),
            )
            for entry in configured
        )

    def __iter__(self):
        return iter(self._courses.values())

    def __contains__(self, course_id):
        return course_id in self._courses

    def __len__(self):
        return len(self._courses)

    def find(self, course_id):
        return self._courses.get(course_id)

    def get(self, course_id):
        course = self.find(course_id)
        if course is None:
            raise UnknownCourseError(course_id)
        return course

    def basic_courses(self):
        return [course for course in self if not course.is_advanced]

    def advanced_courses(self):
        return [course for course in self if course.is_advanced]
