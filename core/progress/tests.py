from datetime import datetime, timedelta, timezone as dt_timezone

from django.contrib.auth.models import User
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from xpoint.services import XPService

from .exceptions import InvalidDurationError
from .ledger import ProgressLedger
from .models import DailyActivity, VideoProgress
from .signals import video_completed


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2025, 3, 10, 18, 0, tzinfo=dt_timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@override_settings(
    PROGRESS_COMPLETION_THRESHOLD=0.85,
    PROGRESS_MAX_TICK_GAP_SECONDS=3,
    VIDEO_COMPLETION_XP=50,
)
class ProgressLedgerTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")
        self.clock = FakeClock()
        self.ledger = ProgressLedger(self.user, clock=self.clock)

    def play(self, video_id, start, stop, duration, step=2, course_id="1"):
        position = start
        record = self.ledger.record_tick(video_id, course_id, position, duration)
        while position + step <= stop:
            position += step
            self.clock.advance(step)
            record = self.ledger.record_tick(video_id, course_id, position, duration)
        return record

    def test_first_tick_creates_record(self):
        record = self.ledger.record_tick("1-1", "1", 0, 100)

        self.assertEqual(record.watched_seconds, 0)
        self.assertEqual(record.total_duration_seconds, 100)
        self.assertFalse(record.completed)
        self.assertEqual(self.ledger.get("1-1"), record)
        self.assertIsNone(self.ledger.get("1-2"))

    def test_playback_accrues_and_completes_at_threshold(self):
        record = self.play("1-1", 0, 84, 100)
        self.assertEqual(record.watched_seconds, 84)
        self.assertFalse(record.completed)

        self.clock.advance(2)
        record = self.ledger.record_tick("1-1", "1", 86, 100)
        self.assertEqual(record.watched_seconds, 86)
        self.assertTrue(record.completed)
        self.assertEqual(record.completed_at, self.clock.now)

    def test_seeking_forward_grants_no_credit(self):
        self.ledger.record_tick("1-1", "1", 0, 100)
        record = self.ledger.record_tick("1-1", "1", 95, 100)

        self.assertEqual(record.watched_seconds, 0)
        self.assertEqual(record.last_position_seconds, 95)
        self.assertFalse(record.completed)

    def test_watch_time_never_decreases(self):
        self.play("1-1", 0, 20, 100)
        record = self.ledger.record_tick("1-1", "1", 5, 100)

        self.assertEqual(record.watched_seconds, 20)
        self.assertEqual(record.last_position_seconds, 5)

    def test_paused_ticks_grant_no_credit(self):
        self.ledger.record_tick("1-1", "1", 0, 100)
        record = self.ledger.record_tick("1-1", "1", 2, 100, is_playing=False)
        self.assertEqual(record.watched_seconds, 0)

    def test_watched_time_is_capped_at_duration(self):
        self.play("1-1", 0, 10, 10)
        record = self.ledger.record_tick("1-1", "1", 12, 10)

        self.assertLessEqual(record.watched_seconds, 10)
        self.assertLessEqual(record.last_position_seconds, 10)

    def test_invalid_duration_leaves_record_unchanged(self):
        self.play("1-1", 0, 10, 100)
        before = VideoProgress.objects.get(user=self.user, video_id="1-1")

        for duration in (0, -5, "abc", float("nan"), None):
            with self.subTest(duration=duration):
                with self.assertRaises(InvalidDurationError):
                    self.ledger.record_tick("1-1", "1", 12, duration)

        after = VideoProgress.objects.get(user=self.user, video_id="1-1")
        self.assertEqual(after.watched_seconds, before.watched_seconds)
        self.assertEqual(after.last_position_seconds, before.last_position_seconds)
        self.assertEqual(after.updated_at, before.updated_at)

    def test_invalid_duration_creates_no_record(self):
        with self.assertRaises(InvalidDurationError):
            self.ledger.record_tick("1-1", "1", 0, 0)
        self.assertFalse(VideoProgress.objects.exists())

    def test_completion_is_monotonic(self):
        self.play("1-1", 0, 90, 100)
        record = self.ledger.record_tick("1-1", "1", 90, 1000)

        self.assertTrue(record.completed)
        self.assertLess(record.watch_ratio, 0.85)

    def test_updated_at_never_goes_backwards(self):
        first = self.ledger.record_tick("1-1", "1", 0, 100)
        self.clock.advance(-60)
        second = self.ledger.record_tick("1-1", "1", 2, 100)

        self.assertGreaterEqual(second.updated_at, first.updated_at)

    def test_completion_awards_xp_once(self):
        self.play("1-1", 0, 90, 100)
        self.play("1-1", 90, 100, 100)

        self.assertEqual(XPService.get_user_xp(self.user), 50)

    def test_completion_signal_sent_once(self):
        received = []

        def handler(sender, user, record, **kwargs):
            received.append(record.video_id)

        video_completed.connect(handler)
        try:
            self.play("1-1", 0, 100, 100)
        finally:
            video_completed.disconnect(handler)

        self.assertEqual(received, ["1-1"])

    def test_quiz_completion(self):
        self.ledger.record_tick("1-2", "1", 0, 300)
        record = self.ledger.mark_completed("1-2", "1")

        self.assertTrue(record.completed)
        self.assertTrue(record.completed_by_quiz)
        self.assertEqual(record.total_duration_seconds, 300)
        self.assertEqual(XPService.get_user_xp(self.user), 50)

        self.ledger.mark_completed("1-2", "1")
        self.assertEqual(XPService.get_user_xp(self.user), 50)

    def test_quiz_completion_rejects_bad_duration(self):
        with self.assertRaises(InvalidDurationError):
            self.ledger.mark_completed("1-2", "1", duration_sec=-1)

    def test_quiz_completion_needs_duration_for_unwatched_video(self):
        with self.assertRaises(InvalidDurationError):
            self.ledger.mark_completed("1-4", "1")

        self.assertIsNone(self.ledger.get("1-4"))
        self.assertEqual(XPService.get_user_xp(self.user), 0)

        record = self.ledger.mark_completed("1-4", "1", duration_sec=240)
        self.assertTrue(record.completed)
        self.assertEqual(record.total_duration_seconds, 240)

    def test_snapshot_is_keyed_by_video(self):
        self.ledger.record_tick("1-1", "1", 0, 100)
        self.ledger.record_tick("2-1", "2", 0, 100)

        self.assertEqual(set(self.ledger.snapshot()), {"1-1", "2-1"})

    def test_ledgers_are_per_learner(self):
        other = User.objects.create_user(username="other", password="password")
        self.ledger.record_tick("1-1", "1", 0, 100)

        self.assertEqual(ProgressLedger(other).snapshot(), {})

    def test_new_watch_time_counts_towards_today(self):
        self.play("1-1", 0, 30, 100)

        self.assertAlmostEqual(self.ledger.today_activity_minutes(), 0.5)
        self.assertEqual(DailyActivity.objects.filter(user=self.user).count(), 1)


class StreakTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")
        self.ledger = ProgressLedger(self.user)
        self.today = datetime(2025, 3, 10).date()

    def active_on(self, *days_ago):
        for offset in days_ago:
            DailyActivity.objects.create(
                user=self.user, day=self.today - timedelta(days=offset), watched_seconds=120
            )

    def test_no_activity(self):
        self.assertEqual(self.ledger.current_streak(today=self.today), 0)

    def test_consecutive_days_including_today(self):
        self.active_on(0, 1, 2)
        self.assertEqual(self.ledger.current_streak(today=self.today), 3)

    def test_today_not_yet_active(self):
        self.active_on(1, 2)
        self.assertEqual(self.ledger.current_streak(today=self.today), 2)

    def test_gap_breaks_streak(self):
        self.active_on(0, 1, 3, 4)
        self.assertEqual(self.ledger.current_streak(today=self.today), 2)

    def test_lookback_is_bounded(self):
        self.active_on(*range(0, 45))
        self.assertEqual(self.ledger.current_streak(today=self.today), 30)


class ProgressApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")
        self.client.force_authenticate(user=self.user)

    def test_tick_and_read_back(self):
        url = reverse("video-progress-tick", args=["1-1"])
        response = self.client.post(
            url, {"course_id": "1", "current_time": 0, "duration": 120}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_duration_seconds"], 120)

        response = self.client.get(reverse("video-progress", args=["1-1"]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["completed"])

    def test_tick_with_zero_duration(self):
        url = reverse("video-progress-tick", args=["1-1"])
        response = self.client.post(
            url, {"course_id": "1", "current_time": 0, "duration": 0}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("error", response.data)

    def test_unstarted_video(self):
        response = self.client.get(reverse("video-progress", args=["9-9"]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_quiz_completion_endpoint(self):
        response = self.client.post(
            reverse("video-progress-complete", args=["1-3"]),
            {"course_id": "1", "duration": 200},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["completed"])
        self.assertEqual(XPService.get_user_xp(self.user), 50)

    def test_quiz_completion_without_duration_for_unwatched_video(self):
        response = self.client.post(
            reverse("video-progress-complete", args=["1-5"]),
            {"course_id": "1"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("error", response.data)

    def test_activity(self):
        response = self.client.get(reverse("progress-activity"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["current_streak"], 0)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse("video-progress", args=["1-1"]))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
