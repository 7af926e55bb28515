from django.contrib.auth.models import User
from django.test import TestCase

from .models import UserProfile


class UserProfileTests(TestCase):
    def test_profile_created_with_user(self):
        user = User.objects.create_user(username="learner", password="password")

        profile = UserProfile.objects.get(user=user)
        self.assertEqual(profile.xp, 0)
        self.assertEqual(profile.access_tier, UserProfile.AccessTier.FREE)

    def test_display_name_prefers_certificate_name(self):
        user = User.objects.create_user(
            username="learner", password="password", first_name="Ada", last_name="Lovelace"
        )
        self.assertEqual(user.profile.display_name, "Ada Lovelace")

        user.profile.full_name = "Augusta Ada King"
        user.profile.save()
        self.assertEqual(user.profile.display_name, "Augusta Ada King")

    def test_display_name_falls_back_to_username(self):
        user = User.objects.create_user(username="learner", password="password")
        self.assertEqual(user.profile.display_name, "learner")
