from django.urls import path

from .views import CourseCompletionListView, CourseCompletionView

urlpatterns = [
    path("completion/", CourseCompletionListView.as_view(), name="course-completion-list"),
    path("<str:course_id>/completion/", CourseCompletionView.as_view(), name="course-completion"),
]
