from rest_framework import serializers


class LevelSummarySerializer(serializers.Serializer):
    total_xp = serializers.IntegerField()
    xp_level = serializers.CharField()
    xp_level_name = serializers.CharField()
    current_progress = serializers.IntegerField()
    needed_for_next = serializers.IntegerField()
    fraction = serializers.FloatField()
    completed_courses = serializers.IntegerField()
    certification_level = serializers.CharField()
    certification_level_name = serializers.CharField()
