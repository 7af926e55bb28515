from django.contrib import admin

from .models import FriendCode, RedeemedCode


@admin.register(RedeemedCode)
class RedeemedCodeAdmin(admin.ModelAdmin):
    list_display = ("user", "code", "result", "redeemed_at")
    search_fields = ("user__username", "code")
    list_filter = ("result",)


@admin.register(FriendCode)
class FriendCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "owner", "created_at")
    search_fields = ("owner__username", "code")
