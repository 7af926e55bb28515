from django.contrib.auth.models import User
from django.test import SimpleTestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from progress.models import VideoProgress

from .catalog import CourseCatalog, CourseDefinition
from .evaluator import CourseCompletionEvaluator
from .exceptions import UnknownCourseError


def make_record(video_id, course_id, completed=True, watched=100.0, duration=100.0):
    return VideoProgress(
        video_id=video_id,
        course_id=course_id,
        watched_seconds=watched,
        total_duration_seconds=duration,
        completed=completed,
        completed_at=timezone.now() if completed else None,
        updated_at=timezone.now(),
    )


def snapshot_of(*records):
    return {record.video_id: record for record in records}


class CourseCatalogTests(SimpleTestCase):
    def test_default_catalog_expected_counts(self):
        catalog = CourseCatalog.from_settings()
        counts = {course.course_id: course.expected_video_count for course in catalog.basic_courses()}
        self.assertEqual(counts, {"1": 7, "2": 4, "3": 2, "4": 2, "5": 3})
        self.assertEqual(len(catalog.advanced_courses()), 5)

    def test_get_unknown_course_raises(self):
        catalog = CourseCatalog.from_settings()
        with self.assertRaises(UnknownCourseError):
            catalog.get("99")
        self.assertIsNone(catalog.find("99"))

    def test_catalog_from_setting(self):
        with self.settings(COURSE_CATALOG=[{"course_id": 7, "video_ids": ["7-1", "7-2"]}]):
            catalog = CourseCatalog.from_settings()
        self.assertIn("7", catalog)
        self.assertEqual(catalog.get("7").expected_video_count, 2)
        self.assertEqual(len(catalog), 1)


class CourseCompletionEvaluatorTests(SimpleTestCase):
    def setUp(self):
        self.evaluator = CourseCompletionEvaluator()

    def test_alias_records_are_deduplicated(self):
        records = [make_record(f"1-{i}", "1") for i in range(1, 8)]
        records += [make_record(f"course_1-{i}", "course_1") for i in range(1, 8)]
        detail = self.evaluator.completion_detail("1", snapshot_of(*records))

        self.assertEqual(detail.completed_count, 7)
        self.assertEqual(detail.total_expected, 7)
        self.assertTrue(detail.is_complete)

    def test_missing_video_keeps_course_incomplete(self):
        snapshot = snapshot_of(
            make_record("2-1", "2"),
            make_record("2-2", "2"),
            make_record("2-3", "2"),
        )
        detail = self.evaluator.completion_detail("2", snapshot)

        self.assertEqual(detail.completed_count, 3)
        self.assertEqual(detail.total_expected, 4)
        self.assertFalse(detail.is_complete)
        self.assertFalse(self.evaluator.is_course_complete("2", snapshot))

    def test_discovered_but_unfinished_video_is_not_complete(self):
        snapshot = snapshot_of(
            make_record("2-1", "2"),
            make_record("2-2", "2"),
            make_record("2-3", "2"),
            make_record("2-4", "2", completed=False, watched=40),
        )
        detail = self.evaluator.completion_detail("2", snapshot)

        self.assertEqual(detail.completed_count, 3)
        self.assertEqual(detail.total_expected, 4)
        self.assertFalse(detail.is_complete)
        self.assertFalse(self.evaluator.is_course_complete("2", snapshot))

    def test_extra_video_does_not_stand_in_for_required_one(self):
        snapshot = snapshot_of(
            make_record("2-1", "2"),
            make_record("2-2", "2"),
            make_record("2-3", "2"),
            make_record("2-4", "2", completed=False, watched=40),
            make_record("2-5", "2"),
            make_record("course_2-9", "course_2"),
        )
        detail = self.evaluator.completion_detail("2", snapshot)

        self.assertEqual(detail.completed_count, 3)
        self.assertEqual(detail.total_expected, 4)
        self.assertFalse(detail.is_complete)

        data = self.evaluator.completion_data("2", snapshot)
        self.assertFalse(data.completed)
        self.assertEqual(data.total_duration, 400)

    def test_completed_alias_wins_over_partial_record(self):
        snapshot = snapshot_of(
            make_record("3-1", "3"),
            make_record("3-2", "3", completed=False, watched=20),
            make_record("course_3-2", "course_3"),
        )
        self.assertTrue(self.evaluator.is_course_complete("3", snapshot))

    def test_unknown_course_is_never_complete(self):
        snapshot = snapshot_of(make_record("1-1", "1"))
        detail = self.evaluator.completion_detail("nope", snapshot)

        self.assertEqual((detail.completed_count, detail.total_expected), (0, 0))
        self.assertFalse(detail.is_complete)
        self.assertFalse(self.evaluator.is_course_complete("nope", snapshot))

    def test_basic_course_ignores_advanced_videos(self):
        snapshot = snapshot_of(*[make_record(f"adv_4_{i}", "adv_4") for i in range(1, 3)])
        self.assertEqual(self.evaluator.completion_detail("4", snapshot).completed_count, 0)
        self.assertTrue(self.evaluator.is_course_complete("adv_4", snapshot))

    def test_explicit_definition_overrides_catalog(self):
        definition = CourseDefinition(course_id="4", title="Short", video_ids=("4-1",))
        snapshot = snapshot_of(make_record("4-1", "4"))
        self.assertTrue(self.evaluator.is_course_complete("4", snapshot, definition))
        self.assertFalse(self.evaluator.is_course_complete("4", snapshot))

    def test_completion_data_totals(self):
        snapshot = snapshot_of(
            make_record("adv_3_1", "adv_3", watched=80, duration=100),
            make_record("adv_3_2", "adv_3", watched=100, duration=200),
        )
        data = self.evaluator.completion_data("adv_3", snapshot)

        self.assertTrue(data.completed)
        self.assertEqual(data.watched_seconds, 180)
        self.assertEqual(data.total_duration, 300)
        self.assertIsNotNone(data.completed_at)

    def test_completed_course_count_uses_advanced_courses(self):
        records = [make_record(f"adv_3_{i}", "adv_3") for i in range(1, 3)]
        records += [make_record(f"adv_4_{i}", "adv_4") for i in range(1, 3)]
        records += [make_record(f"2-{i}", "2") for i in range(1, 5)]
        snapshot = snapshot_of(*records)

        self.assertEqual(self.evaluator.completed_course_count(snapshot), 2)
        self.assertEqual(self.evaluator.completed_course_count(snapshot, ["2", "3"]), 1)

    def test_prerequisites(self):
        snapshot = snapshot_of(*[make_record(f"4-{i}", "4") for i in range(1, 3)])
        self.assertTrue(self.evaluator.prerequisites_met("4", {}))
        self.assertTrue(self.evaluator.prerequisites_met("adv_4", snapshot))
        self.assertFalse(self.evaluator.prerequisites_met("adv_5", snapshot))
        self.assertFalse(self.evaluator.prerequisites_met("missing", snapshot))


class CourseCompletionViewTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")
        self.client.force_authenticate(user=self.user)
        now = timezone.now()
        for index in range(1, 4):
            VideoProgress.objects.create(
                user=self.user,
                video_id=f"2-{index}",
                course_id="2",
                watched_seconds=100,
                total_duration_seconds=100,
                completed=True,
                completed_at=now,
                updated_at=now,
            )

    def test_completion_detail_for_current_learner(self):
        response = self.client.get(reverse("course-completion", args=["2"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["completed_count"], 3)
        self.assertEqual(response.data["total_expected"], 4)
        self.assertFalse(response.data["is_complete"])

    def test_unknown_course_returns_404(self):
        response = self.client.get(reverse("course-completion", args=["nope"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_completion_list_covers_catalog(self):
        response = self.client.get(reverse("course-completion-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 10)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse("course-completion", args=["2"]))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
