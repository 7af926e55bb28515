"""
Progress Ledger
Durable per-video watch state for one learner. Source of truth for
"has this learner watched this video to completion".
"""

import logging
import math
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from xpoint.services import XPService

from .exceptions import InvalidDurationError
from .models import DailyActivity, VideoProgress
from .signals import video_completed

logger = logging.getLogger(__name__)

STREAK_LOOKBACK_DAYS = 30


def _as_seconds(value):
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds):
        return None
    return seconds


class ProgressLedger:
    """
    Records playback ticks for a single learner.

    Every write happens inside its own transaction with the progress row
    locked, so ticks for the same video are applied one at a time and the
    row is committed before the call returns.
    """

    def __init__(self, user, clock=None, completion_threshold=None, max_tick_gap=None):
        self.user = user
        self.clock = clock or timezone.now
        self.completion_threshold = (
            completion_threshold
            if completion_threshold is not None
            else settings.PROGRESS_COMPLETION_THRESHOLD
        )
        self.max_tick_gap = (
            max_tick_gap if max_tick_gap is not None else settings.PROGRESS_MAX_TICK_GAP_SECONDS
        )

    # Reads

    def get(self, video_id):
        """Return the record for `video_id`, or None if the video was never started."""
        return VideoProgress.objects.filter(user=self.user, video_id=video_id).first()

    def snapshot(self):
        """All of the learner's records keyed by video id."""
        return {
            record.video_id: record
            for record in VideoProgress.objects.filter(user=self.user)
        }

    # Writes

    def record_tick(self, video_id, course_id, current_time_sec, duration_sec, is_playing=True):
        """
        Apply one playback tick and return the updated record.

        Watch credit only accrues while playing and only for forward movement
        of at most `max_tick_gap` seconds since the previous tick; seeking
        moves the resume point without adding watch time.

        Raises:
            InvalidDurationError: if `duration_sec` is not a positive number.
        """
        duration = _as_seconds(duration_sec)
        if duration is None or duration <= 0:
            logger.warning(
                "Rejected tick for %s/%s: invalid duration %r",
                self.user.username,
                video_id,
                duration_sec,
            )
            raise InvalidDurationError(video_id, duration_sec)

        position = _as_seconds(current_time_sec)
        if position is None:
            raise InvalidDurationError(video_id, duration_sec)
        position = min(max(position, 0.0), duration)

        now = self.clock()

        with transaction.atomic():
            record, _ = VideoProgress.objects.select_for_update().get_or_create(
                user=self.user,
                video_id=video_id,
                defaults={
                    "course_id": course_id,
                    "total_duration_seconds": duration,
                    "updated_at": now,
                },
            )
            was_completed = record.completed

            delta = position - record.last_position_seconds
            new_watch_time = delta if is_playing and 0 <= delta <= self.max_tick_gap else 0.0

            previous_watched = record.watched_seconds
            watched = min(max(previous_watched + new_watch_time, previous_watched), duration)

            record.course_id = course_id
            record.total_duration_seconds = duration
            record.last_position_seconds = position
            record.watched_seconds = watched
            record.completed = (
                was_completed
                or record.completed_by_quiz
                or watched / duration >= self.completion_threshold
            )
            if record.completed and record.completed_at is None:
                record.completed_at = now
            record.updated_at = max(now, record.updated_at)
            record.save()

            if new_watch_time > 0:
                self._add_daily_activity(now, new_watch_time)

            just_completed = record.completed and not was_completed
            if just_completed:
                XPService.add_xp(
                    self.user,
                    settings.VIDEO_COMPLETION_XP,
                    source=XPService.SOURCE_VIDEO_COMPLETION,
                )

        if just_completed:
            logger.info("Video %s completed by %s", video_id, self.user.username)
            video_completed.send(sender=self.__class__, user=self.user, record=record)

        return record

    def mark_completed(self, video_id, course_id, duration_sec=None):
        """
        Set the explicit completion flag, e.g. after an end-of-content quiz pass.

        `duration_sec` may be omitted only when the video already has a known
        duration from earlier ticks.

        Raises:
            InvalidDurationError: if the duration is invalid, or missing for a
                video with no recorded duration.
        """
        duration = _as_seconds(duration_sec) if duration_sec is not None else None
        if duration_sec is not None and (duration is None or duration <= 0):
            raise InvalidDurationError(video_id, duration_sec)

        now = self.clock()

        with transaction.atomic():
            record, _ = VideoProgress.objects.select_for_update().get_or_create(
                user=self.user,
                video_id=video_id,
                defaults={
                    "course_id": course_id,
                    "total_duration_seconds": duration or 0,
                    "updated_at": now,
                },
            )
            was_completed = record.completed

            if duration is None and record.total_duration_seconds <= 0:
                raise InvalidDurationError(video_id, duration_sec)
            if duration is not None:
                record.total_duration_seconds = duration
            record.completed_by_quiz = True
            record.completed = True
            if record.completed_at is None:
                record.completed_at = now
            record.updated_at = max(now, record.updated_at)
            record.save()

            if not was_completed:
                XPService.add_xp(
                    self.user,
                    settings.VIDEO_COMPLETION_XP,
                    source=XPService.SOURCE_VIDEO_COMPLETION,
                )

        if not was_completed:
            logger.info("Video %s completed by quiz for %s", video_id, self.user.username)
            video_completed.send(sender=self.__class__, user=self.user, record=record)

        return record

    # Activity

    def _add_daily_activity(self, now, seconds):
        day = timezone.localdate(now)
        DailyActivity.objects.get_or_create(user=self.user, day=day)
        DailyActivity.objects.filter(user=self.user, day=day).update(
            watched_seconds=F("watched_seconds") + seconds
        )

    def today_activity_minutes(self, today=None):
        today = today or timezone.localdate(self.clock())
        seconds = (
            DailyActivity.objects.filter(user=self.user, day=today)
            .values_list("watched_seconds", flat=True)
            .first()
        )
        return (seconds or 0) / 60.0

    def current_streak(self, today=None):
        """
        Count consecutive active days ending today.

        A day without activity yet today does not break the streak; the count
        then starts from yesterday.
        """
        today = today or timezone.localdate(self.clock())
        active_days = set(
            DailyActivity.objects.filter(
                user=self.user,
                day__gt=today - timedelta(days=STREAK_LOOKBACK_DAYS),
                day__lte=today,
                watched_seconds__gt=0,
            ).values_list("day", flat=True)
        )

        streak = 0
        day = today
        for _ in range(STREAK_LOOKBACK_DAYS):
            if day in active_days:
                streak += 1
            elif streak > 0 or day != today:
                break
            day -= timedelta(days=1)
        return streak
