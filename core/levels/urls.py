from django.urls import path

from .views import MyLevelView

urlpatterns = [
    path("me/", MyLevelView.as_view(), name="my-level"),
]
