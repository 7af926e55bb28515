from django.contrib.auth.models import User
from django.test import TestCase

from .services import XPService


class XPServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")

    def test_add_xp_accumulates(self):
        XPService.add_xp(self.user, 50, source=XPService.SOURCE_VIDEO_COMPLETION)
        total = XPService.add_xp(self.user, 25, source=XPService.SOURCE_ADMIN)

        self.assertEqual(total, 75)
        self.assertEqual(XPService.get_user_xp(self.user), 75)

    def test_non_positive_amount_is_ignored(self):
        XPService.add_xp(self.user, 10)
        self.assertEqual(XPService.add_xp(self.user, 0), 10)
        self.assertEqual(XPService.add_xp(self.user, -5), 10)
        self.assertEqual(XPService.get_user_xp(self.user), 10)
