from rest_framework import serializers

from .models import VideoProgress


class VideoProgressSerializer(serializers.ModelSerializer):
    watch_ratio = serializers.FloatField(read_only=True)

    class Meta:
        model = VideoProgress
        fields = [
            "video_id",
            "course_id",
            "watched_seconds",
            "total_duration_seconds",
            "last_position_seconds",
            "watch_ratio",
            "completed",
            "completed_by_quiz",
            "completed_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProgressTickSerializer(serializers.Serializer):
    course_id = serializers.CharField(max_length=100)
    current_time = serializers.FloatField()
    duration = serializers.FloatField()
    is_playing = serializers.BooleanField(default=True)


class QuizCompletionSerializer(serializers.Serializer):
    course_id = serializers.CharField(max_length=100)
    duration = serializers.FloatField(required=False)
