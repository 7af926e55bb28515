from rest_framework import serializers


class RedeemCodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32)


class RedemptionResponseSerializer(serializers.Serializer):
    result = serializers.CharField()
    message = serializers.CharField()
    access_tier = serializers.CharField()


class AccessStatusSerializer(serializers.Serializer):
    access_tier = serializers.CharField()
    show_paywall = serializers.BooleanField()
    friend_codes = serializers.ListField(child=serializers.CharField())
