from django.contrib.auth.models import User
from django.db import models


class VideoProgress(models.Model):
    """
    Watch state of one video for one learner.

    Rows are created on the first playback tick and overwritten in place
    afterwards; they are never deleted. `completed` only ever moves from
    False to True.
    """

    user = models.ForeignKey(
        User, related_name="video_progress", on_delete=models.CASCADE
    )
    video_id = models.CharField(max_length=100)
    course_id = models.CharField(max_length=100, db_index=True)

    watched_seconds = models.FloatField(default=0)
    total_duration_seconds = models.FloatField(default=0)
    last_position_seconds = models.FloatField(
        default=0, help_text="Resume point, never beyond the total duration"
    )

    completed = models.BooleanField(default=False)
    completed_by_quiz = models.BooleanField(
        default=False, help_text="Set when an end-of-content quiz was passed"
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField()

    class Meta:
        unique_together = ["user", "video_id"]
        ordering = ["video_id"]

    def __str__(self):
        state = "completed" if self.completed else f"{self.watch_ratio:.0%}"
        return f"Progress: {self.user.username} - {self.video_id} ({state})"

    @property
    def watch_ratio(self):
        if self.total_duration_seconds <= 0:
            return 0.0
        return self.watched_seconds / self.total_duration_seconds


class DailyActivity(models.Model):
    """Seconds of new watch time a learner accumulated on a calendar day."""

    user = models.ForeignKey(
        User, related_name="daily_activity", on_delete=models.CASCADE
    )
    day = models.DateField()
    watched_seconds = models.FloatField(default=0)

    class Meta:
        unique_together = ["user", "day"]
        ordering = ["-day"]

    def __str__(self):
        return f"{self.user.username} - {self.day}: {self.watched_seconds:.0f}s"
