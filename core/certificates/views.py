import logging

from drf_spectacular.utils import OpenApiTypes, extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from administration.permissions import IsAdminUser

from .exceptions import InvalidTransitionError, MissingReasonError
from .lifecycle import CertificateLifecycle
from .models import Certificate, CertificateStatus
from .serializers import (
    AdminCertificateSerializer,
    ApproveSerializer,
    CertificateSerializer,
    PublicCertificateSerializer,
    ReasonSerializer,
)

logger = logging.getLogger(__name__)


class MyCertificatesView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CertificateSerializer

    @extend_schema(responses={200: CertificateSerializer(many=True)})
    def get(self, request):
        certificates = CertificateLifecycle.for_user(request.user)
        return Response(CertificateSerializer(certificates, many=True).data)


class VerifyCertificateView(APIView):
    """Public credential check by verification code."""

    permission_classes = [AllowAny]
    serializer_class = PublicCertificateSerializer

    @extend_schema(
        responses={
            200: inline_serializer(
                name="CertificateVerification",
                fields={
                    "valid": serializers.BooleanField(),
                    "certificate": PublicCertificateSerializer(),
                },
            ),
            404: OpenApiTypes.OBJECT,
        }
    )
    def get(self, request, code):
        certificate = CertificateLifecycle.verify(code)
        if certificate is None:
            return Response(
                {"valid": False, "error": "Certificate not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(
            {
                "valid": certificate.is_valid,
                "certificate": PublicCertificateSerializer(certificate).data,
            }
        )


class AdminCertificateListView(APIView):
    """Review queue, filtered by status (defaults to pending approval)."""

    permission_classes = [IsAdminUser]
    serializer_class = AdminCertificateSerializer

    @extend_schema(responses={200: AdminCertificateSerializer(many=True), 400: OpenApiTypes.OBJECT})
    def get(self, request):
        wanted = request.query_params.get("status", CertificateStatus.PENDING_APPROVAL)
        if wanted not in CertificateStatus.values:
            return Response({"error": f"Unknown status: {wanted}"}, status=status.HTTP_400_BAD_REQUEST)
        certificates = CertificateLifecycle.by_status(wanted)
        return Response(AdminCertificateSerializer(certificates, many=True).data)


class CertificateActionView(APIView):
    """Base view for admin actions on one certificate."""

    permission_classes = [IsAdminUser]
    serializer_class = AdminCertificateSerializer
    input_serializer_class = None

    def perform(self, lifecycle, certificate_id, data, actor):
        raise NotImplementedError

    def post(self, request, certificate_id):
        data = {}
        if self.input_serializer_class is not None:
            serializer = self.input_serializer_class(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

        try:
            certificate = self.perform(CertificateLifecycle(), certificate_id, data, request.user)
        except Certificate.DoesNotExist:
            return Response({"error": "Certificate not found"}, status=status.HTTP_404_NOT_FOUND)
        except InvalidTransitionError as e:
            return Response(
                {"error": str(e), "current_status": e.current_status},
                status=status.HTTP_409_CONFLICT,
            )
        except MissingReasonError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AdminCertificateSerializer(certificate).data)


class ApproveCertificateView(CertificateActionView):
    input_serializer_class = ApproveSerializer

    @extend_schema(request=ApproveSerializer, responses={200: AdminCertificateSerializer})
    def post(self, request, certificate_id):
        return super().post(request, certificate_id)

    def perform(self, lifecycle, certificate_id, data, actor):
        return lifecycle.approve(certificate_id, admin_notes=data.get("admin_notes"), actor=actor)


class RejectCertificateView(CertificateActionView):
    input_serializer_class = ReasonSerializer

    @extend_schema(request=ReasonSerializer, responses={200: AdminCertificateSerializer})
    def post(self, request, certificate_id):
        return super().post(request, certificate_id)

    def perform(self, lifecycle, certificate_id, data, actor):
        return lifecycle.reject(certificate_id, data.get("reason"), actor=actor)


class IssueCertificateView(CertificateActionView):
    @extend_schema(request=None, responses={200: AdminCertificateSerializer})
    def post(self, request, certificate_id):
        return super().post(request, certificate_id)

    def perform(self, lifecycle, certificate_id, data, actor):
        return lifecycle.issue(certificate_id, actor=actor)


class RevokeCertificateView(CertificateActionView):
    input_serializer_class = ReasonSerializer

    @extend_schema(request=ReasonSerializer, responses={200: AdminCertificateSerializer})
    def post(self, request, certificate_id):
        return super().post(request, certificate_id)

    def perform(self, lifecycle, certificate_id, data, actor):
        return lifecycle.revoke(certificate_id, data.get("reason"), actor=actor)


class ResendCertificateView(CertificateActionView):
    @extend_schema(request=None, responses={200: AdminCertificateSerializer})
    def post(self, request, certificate_id):
        return super().post(request, certificate_id)

    def perform(self, lifecycle, certificate_id, data, actor):
        return lifecycle.resend(certificate_id, actor=actor)
