from django.urls import path

from .views import AccessStatusView, FriendCodeGrantView, RedeemCodeView

urlpatterns = [
    path("redeem/", RedeemCodeView.as_view(), name="access-redeem"),
    path("me/", AccessStatusView.as_view(), name="access-status"),
    path("friend-codes/", FriendCodeGrantView.as_view(), name="access-friend-codes"),
]
