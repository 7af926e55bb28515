from django.contrib.auth.models import User
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from users.models import UserProfile
from xpoint.services import XPService

from .exceptions import AlreadyUsedError, InvalidCodeError
from .gate import RedemptionResult, friend_code_quota, redeem
from .models import FriendCode, RedeemedCode
from .services import AccessService


class RedeemTests(SimpleTestCase):
    def test_same_code_twice(self):
        used = set()
        self.assertEqual(redeem("C12345", used), RedemptionResult.SUCCESS_BASIC)
        self.assertEqual(redeem("C12345", used), RedemptionResult.ALREADY_USED)
        self.assertEqual(used, {"C12345"})

    def test_code_is_normalized(self):
        used = set()
        self.assertEqual(redeem("  p54321 ", used), RedemptionResult.SUCCESS_PREMIUM)
        self.assertIn("P54321", used)
        self.assertEqual(redeem("P54321", used), RedemptionResult.ALREADY_USED)

    def test_prefixes(self):
        cases = {
            "C10000": RedemptionResult.SUCCESS_BASIC,
            "P10000": RedemptionResult.SUCCESS_PREMIUM,
            "F10000": RedemptionResult.SUCCESS_FRIEND,
            "I10000": RedemptionResult.SUCCESS_INDIVIDUAL,
        }
        for code, expected in cases.items():
            with self.subTest(code=code):
                self.assertEqual(redeem(code, set()), expected)

    def test_invalid_codes_leave_used_set_untouched(self):
        for code in ("", "C1234", "C123456", "X12345", "C12A45", "CC2345"):
            with self.subTest(code=code):
                used = set()
                self.assertEqual(redeem(code, used), RedemptionResult.INVALID)
                self.assertEqual(used, set())

    def test_success_flag(self):
        self.assertTrue(RedemptionResult.SUCCESS_FRIEND.is_success)
        self.assertFalse(RedemptionResult.ALREADY_USED.is_success)

    def test_friend_code_quota(self):
        expected = {-1: 0, 0: 0, 1: 1, 2: 2, 3: 4, 4: 8, 5: 16, 9: 16}
        for level, quota in expected.items():
            with self.subTest(level=level):
                self.assertEqual(friend_code_quota(level), quota)


class AccessServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")

    def tier(self):
        return UserProfile.objects.get(user=self.user).access_tier

    def test_class_code_grants_basic(self):
        result = AccessService.redeem_for_user(self.user, "c12345")

        self.assertEqual(result, RedemptionResult.SUCCESS_BASIC)
        self.assertEqual(self.tier(), UserProfile.AccessTier.BASIC_PAID)
        self.assertTrue(RedeemedCode.objects.filter(user=self.user, code="C12345").exists())

    def test_second_redemption_raises(self):
        AccessService.redeem_for_user(self.user, "C12345")
        with self.assertRaises(AlreadyUsedError):
            AccessService.redeem_for_user(self.user, " c12345")

    def test_invalid_code_raises(self):
        with self.assertRaises(InvalidCodeError):
            AccessService.redeem_for_user(self.user, "Z99999")
        self.assertEqual(self.tier(), UserProfile.AccessTier.FREE)
        self.assertFalse(RedeemedCode.objects.exists())

    def test_tier_never_downgrades(self):
        AccessService.redeem_for_user(self.user, "P12345")
        AccessService.redeem_for_user(self.user, "F12345")
        self.assertEqual(self.tier(), UserProfile.AccessTier.PREMIUM)

    def test_codes_are_per_learner(self):
        other = User.objects.create_user(username="friend", password="password")
        AccessService.redeem_for_user(self.user, "I12345")
        self.assertEqual(
            AccessService.redeem_for_user(other, "I12345"), RedemptionResult.SUCCESS_INDIVIDUAL
        )

    @override_settings(ACCESS_XP_PAYWALL_THRESHOLD=50)
    def test_paywall(self):
        self.assertFalse(AccessService.should_show_paywall(self.user))

        XPService.add_xp(self.user, 50)
        self.assertTrue(AccessService.should_show_paywall(self.user))

        AccessService.redeem_for_user(self.user, "C12345")
        self.assertFalse(AccessService.should_show_paywall(self.user))

    def test_friend_codes_follow_xp_tier(self):
        codes = AccessService.grant_friend_codes(self.user)
        self.assertEqual(len(codes), 1)
        self.assertRegex(codes[0], r"^F\d{5}$")

        self.assertEqual(AccessService.grant_friend_codes(self.user), [])

        XPService.add_xp(self.user, 2500)
        self.assertEqual(len(AccessService.grant_friend_codes(self.user)), 3)
        self.assertEqual(FriendCode.objects.filter(owner=self.user).count(), 4)


class RedeemApiTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="learner", password="password")
        self.client.force_authenticate(user=self.user)
        self.url = reverse("access-redeem")

    def test_redeem_then_reuse(self):
        first = self.client.post(self.url, {"code": "C12345"}, format="json")
        second = self.client.post(self.url, {"code": "C12345"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["result"], "success_basic")
        self.assertEqual(first.data["access_tier"], "basic_paid")
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(second.data["result"], "already_used")

    def test_invalid_code(self):
        response = self.client.post(self.url, {"code": "hello"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["result"], "invalid")

    def test_status_and_friend_codes(self):
        response = self.client.post(reverse("access-friend-codes"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["friend_codes"]), 1)

        response = self.client.get(reverse("access-status"))
        self.assertEqual(response.data["access_tier"], "free")
        self.assertFalse(response.data["show_paywall"])
