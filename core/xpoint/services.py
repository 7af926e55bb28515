import logging
from django.db import transaction

from users.models import UserProfile

logger = logging.getLogger(__name__)


class XPService:
    SOURCE_VIDEO_COMPLETION = "video_completion"
    SOURCE_ADMIN = "admin_adjustment"

    @staticmethod
    def add_xp(user, amount, source=None):
        """Add XP to a user's profile."""
        if amount <= 0:
            logger.warning(
                "Attempted to add non-positive XP (%s) to user %s", amount, user.username
            )
            return XPService.get_user_xp(user)

        try:
            with transaction.atomic():
                profile = UserProfile.objects.select_for_update().get(user=user)

                profile.xp += amount
                profile.save(update_fields=["xp", "updated_at"])

                logger.info(
                    "Added %s XP to user %s (Source: %s). Total: %s",
                    amount,
                    user.username,
                    source,
                    profile.xp,
                )

                return profile.xp

        except UserProfile.DoesNotExist:
            logger.error("UserProfile not found for user %s", user.username)
            raise

    @staticmethod
    def get_user_xp(user):
        """Get the current XP of a user."""
        return UserProfile.objects.values_list("xp", flat=True).get(user=user)
