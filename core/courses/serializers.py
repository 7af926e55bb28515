from rest_framework import serializers


class CompletionDetailSerializer(serializers.Serializer):
    course_id = serializers.CharField()
    title = serializers.CharField()
    completed_count = serializers.IntegerField()
    total_expected = serializers.IntegerField()
    is_complete = serializers.BooleanField()
    prerequisites_met = serializers.BooleanField()
