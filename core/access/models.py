from django.contrib.auth.models import User
from django.db import models


class RedeemedCode(models.Model):
    """An access code a learner has used. Codes are single-use per learner."""

    user = models.ForeignKey(User, related_name="redeemed_codes", on_delete=models.CASCADE)
    code = models.CharField(max_length=16)
    result = models.CharField(max_length=32)
    redeemed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ["user", "code"]
        ordering = ["-redeemed_at"]

    def __str__(self):
        return f"{self.user.username} redeemed {self.code}"


class FriendCode(models.Model):
    """A code a learner earned by levelling up and can hand to a friend."""

    owner = models.ForeignKey(User, related_name="friend_codes", on_delete=models.CASCADE)
    code = models.CharField(max_length=16, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.code} ({self.owner.username})"
