from drf_spectacular.utils import OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import AlreadyUsedError, InvalidCodeError
from .gate import RedemptionResult
from .presentation import redemption_message
from .serializers import (
    AccessStatusSerializer,
    RedeemCodeSerializer,
    RedemptionResponseSerializer,
)
from .services import AccessService


def _status_payload(user):
    return {
        "access_tier": AccessService.access_tier(user),
        "show_paywall": AccessService.should_show_paywall(user),
        "friend_codes": AccessService.friend_codes(user),
    }


class RedeemCodeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RedeemCodeSerializer

    @extend_schema(
        request=RedeemCodeSerializer,
        responses={200: RedemptionResponseSerializer, 400: OpenApiTypes.OBJECT},
        description="Redeem a class, premium, friend or individual access code.",
    )
    def post(self, request):
        serializer = RedeemCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = AccessService.redeem_for_user(request.user, serializer.validated_data["code"])
        except InvalidCodeError as e:
            return Response(
                {
                    "error": str(e),
                    "result": RedemptionResult.INVALID.value,
                    "message": redemption_message(RedemptionResult.INVALID),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        except AlreadyUsedError as e:
            return Response(
                {
                    "error": str(e),
                    "result": RedemptionResult.ALREADY_USED.value,
                    "message": redemption_message(RedemptionResult.ALREADY_USED),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = {
            "result": result.value,
            "message": redemption_message(result),
            "access_tier": AccessService.access_tier(request.user),
        }
        return Response(RedemptionResponseSerializer(data).data, status=status.HTTP_200_OK)


class AccessStatusView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccessStatusSerializer

    @extend_schema(responses={200: AccessStatusSerializer})
    def get(self, request):
        return Response(AccessStatusSerializer(_status_payload(request.user)).data)


class FriendCodeGrantView(APIView):
    """Issue any friend codes the learner's XP tier entitles them to."""

    permission_classes = [IsAuthenticated]
    serializer_class = AccessStatusSerializer

    @extend_schema(request=None, responses={200: AccessStatusSerializer})
    def post(self, request):
        AccessService.grant_friend_codes(request.user)
        return Response(AccessStatusSerializer(_status_payload(request.user)).data)
