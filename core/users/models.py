from django.db import models
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver


class UserProfile(models.Model):
    """
    Learner record that carries the engine's per-user aggregates.

    Responsibilities:
    1.  **Gamification**: Tracks the running XP total that drives the XP tier.
    2.  **Access**: Stores the content tier unlocked by redeemed codes.

    Relationships:
    - OneToOne with Django's built-in User model.
    """

    class AccessTier(models.TextChoices):
        FREE = "free", "Free"
        BASIC_PAID = "basic_paid", "Basic"
        PREMIUM = "premium", "Premium"

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile',
        help_text="The associated Django User account."
    )

    full_name = models.CharField(max_length=150, blank=True, default="", help_text="Name printed on certificates.")

    xp = models.IntegerField(default=0, help_text="Total Experience Points earned.")
    access_tier = models.CharField(
        max_length=20,
        choices=AccessTier.choices,
        default=AccessTier.FREE,
        help_text="Content tier unlocked by redeemed access codes."
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'User Profile'
        verbose_name_plural = 'User Profiles'

    @property
    def display_name(self):
        return self.full_name or self.user.get_full_name() or self.user.username

    def __str__(self):
        return f"{self.user.username} ({self.xp} XP, {self.access_tier})"


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    # Automatically create profile when a user is created
    if created and not hasattr(instance, 'profile'):
        UserProfile.objects.create(user=instance)
