from django.contrib import admin

from .models import DailyActivity, VideoProgress


@admin.register(VideoProgress)
class VideoProgressAdmin(admin.ModelAdmin):
    list_display = ("user", "video_id", "course_id", "watched_seconds", "total_duration_seconds", "completed", "updated_at")
    search_fields = ("user__username", "video_id", "course_id")
    list_filter = ("completed", "completed_by_quiz", "course_id")
    # The ledger is the only writer
    readonly_fields = [field.name for field in VideoProgress._meta.fields]


@admin.register(DailyActivity)
class DailyActivityAdmin(admin.ModelAdmin):
    list_display = ("user", "day", "watched_seconds")
    search_fields = ("user__username",)
    list_filter = ("day",)
