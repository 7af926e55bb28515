from django.contrib.auth.models import User
from django.test import SimpleTestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from progress.models import VideoProgress
from xpoint.services import XPService

from .engine import (
    CertificationLevel,
    XPLevel,
    certification_level,
    progress_to_next_level,
    tier_ordinal,
    xp_level,
)


class XPLevelTests(SimpleTestCase):
    def test_boundaries(self):
        cases = [
            (0, XPLevel.BRONZE),
            (999, XPLevel.BRONZE),
            (1000, XPLevel.SILVER),
            (2499, XPLevel.SILVER),
            (2500, XPLevel.GOLD),
            (4999, XPLevel.GOLD),
            (5000, XPLevel.PLATINUM),
            (9999, XPLevel.PLATINUM),
            (10000, XPLevel.DIAMOND),
            (250000, XPLevel.DIAMOND),
        ]
        for total, expected in cases:
            with self.subTest(total=total):
                self.assertEqual(xp_level(total), expected)

    def test_negative_xp_clamps_to_bronze(self):
        self.assertEqual(xp_level(-50), XPLevel.BRONZE)
        self.assertEqual(progress_to_next_level(-50).current_progress, 0)

    def test_progress_within_level(self):
        progress = progress_to_next_level(1750)
        self.assertEqual(progress.current_progress, 750)
        self.assertEqual(progress.needed_for_next, 1500)
        self.assertAlmostEqual(progress.fraction, 0.5)

    def test_diamond_is_terminal(self):
        progress = progress_to_next_level(12000)
        self.assertEqual(progress.fraction, 1.0)
        self.assertEqual(progress.current_progress, 12000)

    def test_tier_ordinal(self):
        self.assertEqual(tier_ordinal(XPLevel.BRONZE), 1)
        self.assertEqual(tier_ordinal(XPLevel.DIAMOND), 5)


class CertificationLevelTests(SimpleTestCase):
    def test_breakpoints(self):
        cases = [
            (0, CertificationLevel.NONE),
            (1, CertificationLevel.FOUNDATION),
            (2, CertificationLevel.ASSOCIATE),
            (3, CertificationLevel.ASSOCIATE),
            (4, CertificationLevel.PROFESSIONAL),
            (5, CertificationLevel.CERTIFIED),
            (9, CertificationLevel.CERTIFIED),
            (-3, CertificationLevel.NONE),
        ]
        for count, expected in cases:
            with self.subTest(count=count):
                self.assertEqual(certification_level(count), expected)


class MyLevelViewTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")
        self.client.force_authenticate(user=self.user)

    def test_summary_for_new_learner(self):
        response = self.client.get(reverse("my-level"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_xp"], 0)
        self.assertEqual(response.data["xp_level"], "bronze")
        self.assertEqual(response.data["xp_level_name"], "Bronze Learner")
        self.assertEqual(response.data["certification_level"], "none")

    def test_summary_reflects_xp_and_completed_courses(self):
        XPService.add_xp(self.user, 2600)
        now = timezone.now()
        for index in range(1, 3):
            VideoProgress.objects.create(
                user=self.user,
                video_id=f"adv_3_{index}",
                course_id="adv_3",
                watched_seconds=90,
                total_duration_seconds=100,
                completed=True,
                completed_at=now,
                updated_at=now,
            )

        response = self.client.get(reverse("my-level"))

        self.assertEqual(response.data["xp_level"], "gold")
        self.assertEqual(response.data["current_progress"], 100)
        self.assertEqual(response.data["completed_courses"], 1)
        self.assertEqual(response.data["certification_level"], "foundation")
