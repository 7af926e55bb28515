from django.urls import path

from .views import ActivityView, QuizCompletionView, VideoProgressView, VideoTickView

urlpatterns = [
    path("videos/<str:video_id>/", VideoProgressView.as_view(), name="video-progress"),
    path("videos/<str:video_id>/tick/", VideoTickView.as_view(), name="video-progress-tick"),
    path(
        "videos/<str:video_id>/complete/",
        QuizCompletionView.as_view(),
        name="video-progress-complete",
    ),
    path("activity/", ActivityView.as_view(), name="progress-activity"),
]
