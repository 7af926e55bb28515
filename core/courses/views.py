from drf_spectacular.utils import OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from progress.ledger import ProgressLedger

from .evaluator import CourseCompletionEvaluator
from .serializers import CompletionDetailSerializer


def _detail_payload(evaluator, course, snapshot):
    detail = evaluator.completion_detail(course.course_id, snapshot)
    return {
        "course_id": course.course_id,
        "title": course.title,
        "completed_count": detail.completed_count,
        "total_expected": detail.total_expected,
        "is_complete": detail.is_complete,
        "prerequisites_met": evaluator.prerequisites_met(course.course_id, snapshot),
    }


class CourseCompletionListView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CompletionDetailSerializer

    @extend_schema(responses={200: CompletionDetailSerializer(many=True)})
    def get(self, request):
        evaluator = CourseCompletionEvaluator()
        snapshot = ProgressLedger(request.user).snapshot()
        data = [_detail_payload(evaluator, course, snapshot) for course in evaluator.catalog]
        return Response(CompletionDetailSerializer(data, many=True).data)


class CourseCompletionView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CompletionDetailSerializer

    @extend_schema(responses={200: CompletionDetailSerializer, 404: OpenApiTypes.OBJECT})
    def get(self, request, course_id):
        evaluator = CourseCompletionEvaluator()
        course = evaluator.catalog.find(course_id)
        if course is None:
            return Response({"error": "Course not found"}, status=status.HTTP_404_NOT_FOUND)

        snapshot = ProgressLedger(request.user).snapshot()
        return Response(CompletionDetailSerializer(_detail_payload(evaluator, course, snapshot)).data)
