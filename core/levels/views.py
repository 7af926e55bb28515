from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from courses.evaluator import CourseCompletionEvaluator
from progress.ledger import ProgressLedger
from xpoint.services import XPService

from . import engine
from .presentation import certification_level_name, xp_level_name
from .serializers import LevelSummarySerializer


class MyLevelView(APIView):
    """XP tier and certification level of the current learner."""

    permission_classes = [IsAuthenticated]
    serializer_class = LevelSummarySerializer

    @extend_schema(responses={200: LevelSummarySerializer})
    def get(self, request):
        total_xp = XPService.get_user_xp(request.user)
        snapshot = ProgressLedger(request.user).snapshot()
        completed = CourseCompletionEvaluator().completed_course_count(snapshot)

        level = engine.xp_level(total_xp)
        progress = engine.progress_to_next_level(total_xp)
        certification = engine.certification_level(completed)

        data = {
            "total_xp": total_xp,
            "xp_level": level.value,
            "xp_level_name": xp_level_name(level),
            "current_progress": progress.current_progress,
            "needed_for_next": progress.needed_for_next,
            "fraction": progress.fraction,
            "completed_courses": completed,
            "certification_level": certification.value,
            "certification_level_name": certification_level_name(certification),
        }
        return Response(LevelSummarySerializer(data).data)
