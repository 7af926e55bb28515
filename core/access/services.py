import logging
import random

from django.conf import settings
from django.db import transaction

from levels.engine import tier_ordinal, xp_level
from users.models import UserProfile

from . import gate
from .exceptions import AlreadyUsedError, InvalidCodeError
from .models import FriendCode, RedeemedCode

logger = logging.getLogger(__name__)

AccessTier = UserProfile.AccessTier

TIER_GRANTS = {
    gate.RedemptionResult.SUCCESS_BASIC: AccessTier.BASIC_PAID,
    gate.RedemptionResult.SUCCESS_FRIEND: AccessTier.BASIC_PAID,
    gate.RedemptionResult.SUCCESS_INDIVIDUAL: AccessTier.BASIC_PAID,
    gate.RedemptionResult.SUCCESS_PREMIUM: AccessTier.PREMIUM,
}

TIER_RANK = {
    AccessTier.FREE: 0,
    AccessTier.BASIC_PAID: 1,
    AccessTier.PREMIUM: 2,
}


class AccessService:
    @staticmethod
    def redeem_for_user(user, code):
        """
        Redeem an access code for a learner and apply the tier it grants.

        Returns the RedemptionResult. A tier is never downgraded: a class
        code redeemed by a premium learner is recorded but leaves them premium.

        Raises:
            InvalidCodeError: malformed or unknown prefix.
            AlreadyUsedError: the learner already redeemed this code.
        """
        with transaction.atomic():
            profile = UserProfile.objects.select_for_update().get(user=user)
            used_codes = set(
                RedeemedCode.objects.filter(user=user).values_list("code", flat=True)
            )

            result = gate.redeem(code, used_codes)
            normalized = gate.normalize_code(code)
            if result == gate.RedemptionResult.ALREADY_USED:
                raise AlreadyUsedError(normalized)
            if result == gate.RedemptionResult.INVALID:
                logger.warning("User %s tried invalid access code %r", user.username, code)
                raise InvalidCodeError(normalized)

            RedeemedCode.objects.create(user=user, code=normalized, result=result.value)

            granted = TIER_GRANTS[result]
            if TIER_RANK[granted] > TIER_RANK[AccessTier(profile.access_tier)]:
                profile.access_tier = granted
                profile.save(update_fields=["access_tier", "updated_at"])

        logger.info(
            "User %s redeemed %s (%s); tier is now %s",
            user.username,
            normalized,
            result.value,
            profile.access_tier,
        )
        return result

    @staticmethod
    def access_tier(user):
        return UserProfile.objects.values_list("access_tier", flat=True).get(user=user)

    @staticmethod
    def should_show_paywall(user):
        """Free learners hit the paywall once their XP reaches the threshold."""
        xp, tier = UserProfile.objects.values_list("xp", "access_tier").get(user=user)
        return xp >= settings.ACCESS_XP_PAYWALL_THRESHOLD and tier == AccessTier.FREE

    @staticmethod
    def friend_codes(user):
        return list(FriendCode.objects.filter(owner=user).values_list("code", flat=True))

    @staticmethod
    def grant_friend_codes(user):
        """
        Top up the learner's friend codes to the quota of their XP tier.

        Returns the newly created codes.
        """
        with transaction.atomic():
            profile = UserProfile.objects.select_for_update().get(user=user)
            quota = gate.friend_code_quota(tier_ordinal(xp_level(profile.xp)))
            missing = quota - FriendCode.objects.filter(owner=user).count()

            new_codes = []
            for _ in range(max(missing, 0)):
                while True:
                    code = f"{gate.CodeType.FRIEND.value}{random.randint(10000, 99999)}"
                    if not FriendCode.objects.filter(code=code).exists():
                        break
                FriendCode.objects.create(owner=user, code=code)
                new_codes.append(code)

        if new_codes:
            logger.info("Granted %s friend codes to %s", len(new_codes), user.username)
        return new_codes
