import logging

from drf_spectacular.utils import OpenApiTypes, extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import InvalidDurationError
from .ledger import ProgressLedger
from .serializers import (
    ProgressTickSerializer,
    QuizCompletionSerializer,
    VideoProgressSerializer,
)

logger = logging.getLogger(__name__)


class VideoProgressView(APIView):
    """Resume point and completion state of one video for the current learner."""

    permission_classes = [IsAuthenticated]
    serializer_class = VideoProgressSerializer

    def get(self, request, video_id):
        record = ProgressLedger(request.user).get(video_id)
        if record is None:
            return Response(
                {"error": "Video not started"}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(VideoProgressSerializer(record).data)


class VideoTickView(APIView):
    """Playback collaborator entry point, called every few seconds by the player."""

    permission_classes = [IsAuthenticated]
    serializer_class = ProgressTickSerializer

    @extend_schema(
        request=ProgressTickSerializer,
        responses={200: VideoProgressSerializer, 400: OpenApiTypes.OBJECT},
        description="Record the current playhead position of a video.",
    )
    def post(self, request, video_id):
        serializer = ProgressTickSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            record = ProgressLedger(request.user).record_tick(
                video_id,
                data["course_id"],
                data["current_time"],
                data["duration"],
                is_playing=data["is_playing"],
            )
        except InvalidDurationError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VideoProgressSerializer(record).data, status=status.HTTP_200_OK)


class QuizCompletionView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = QuizCompletionSerializer

    @extend_schema(
        request=QuizCompletionSerializer,
        responses={200: VideoProgressSerializer, 400: OpenApiTypes.OBJECT},
        description="Mark a video completed after its end-of-content quiz was passed.",
    )
    def post(self, request, video_id):
        serializer = QuizCompletionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            record = ProgressLedger(request.user).mark_completed(
                video_id, data["course_id"], data.get("duration")
            )
        except InvalidDurationError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VideoProgressSerializer(record).data, status=status.HTTP_200_OK)


class ActivityView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={
            200: inline_serializer(
                name="ActivityResponse",
                fields={
                    "today_minutes": serializers.FloatField(),
                    "current_streak": serializers.IntegerField(),
                },
            )
        },
        description="Minutes watched today and the current daily streak.",
    )
    def get(self, request):
        ledger = ProgressLedger(request.user)
        return Response(
            {
                "today_minutes": round(ledger.today_activity_minutes(), 1),
                "current_streak": ledger.current_streak(),
            }
        )
